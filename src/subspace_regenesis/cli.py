from __future__ import annotations

import argparse
import logging

import httpx

from .accounts import fetch_total_issuance, iter_accounts
from .config import Settings
from .errors import RegenesisError
from .exclusions import build_exclusion_set
from .reconcile import reconcile
from .resolver import resolve_block
from .rpc import RpcClient
from .snapshot import verify_snapshot, write_snapshot

log = logging.getLogger("regenesis")


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def block_hash_arg(value: str) -> str:
    raw = value[2:] if value.startswith("0x") else value
    try:
        decoded = bytes.fromhex(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a hex block hash: {value}")
    if len(decoded) != 32:
        raise argparse.ArgumentTypeError(f"block hash must be 32 bytes: {value}")
    return "0x" + decoded.hex()


def block_number_arg(value: str) -> int:
    number = int(value)
    if not 0 <= number <= 0xFFFFFFFF:
        raise argparse.ArgumentTypeError(f"block number out of range: {value}")
    return number


def cmd_snapshot(args: argparse.Namespace) -> int:
    settings = Settings.from_env(
        node_url_override=args.url,
        page_size_override=args.page_size,
        ss58_format_override=args.ss58_format,
    )

    # Fail on a bad address before touching the node.
    exclusions = build_exclusion_set()
    log.info("Excluded addresses: %d", len(exclusions))

    rpc = RpcClient(settings.node_url, timeout_s=args.timeout)
    try:
        block = resolve_block(rpc, args.block_number, args.block_hash)
        log.info("Reading state at block #%d (%s)", block.number, block.hash)

        snapshot = reconcile(
            block,
            iter_accounts(rpc, block, settings.page_size),
            exclusions,
            lambda b: fetch_total_issuance(rpc, b),
            ss58_format=settings.ss58_format,
        )
    finally:
        rpc.close()

    path = write_snapshot(snapshot, args.out_dir, settings.ss58_format)

    print(f"State of balances at block #{block.number} ({block.hash})")
    print(f"Total new accounts: {len(snapshot.entries)}")
    print(f"Total new issuance: {snapshot.new_issuance}")
    print(f"Snapshot has been successfully written to {path}")
    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    exclusions = build_exclusion_set()
    result = verify_snapshot(args.snapshot, exclusions)
    print("Snapshot verified")
    print(f"Total new accounts: {result['accounts']}")
    print(f"Total new issuance: {result['new_issuance']}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="subspace-regenesis",
        description="Subspace regenesis tool: snapshot account balances at a block.",
    )
    p.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    p.add_argument(
        "--url", default=None, help="Node RPC url (else NODE_URL or ws://127.0.0.1:9944)."
    )
    p.add_argument("--timeout", type=float, default=60.0, help="RPC timeout seconds.")

    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("snapshot", help="Snapshot new account balances at a block.")
    s.add_argument(
        "--block-number",
        type=block_number_arg,
        default=None,
        help="Block number; wins over --block-hash.",
    )
    s.add_argument(
        "--block-hash",
        type=block_hash_arg,
        default=None,
        help="Block hash (hex). Defaults to the best block.",
    )
    s.add_argument("--page-size", type=int, default=None, help="Storage keys per RPC page.")
    s.add_argument("--ss58-format", type=int, default=None, help="Output address format.")
    s.add_argument("--out-dir", default=".", help="Directory for balances_<number>.json.")
    s.set_defaults(func=cmd_snapshot)

    v = sub.add_parser("verify", help="Check an existing balances_<number>.json.")
    v.add_argument("--snapshot", required=True, help="Path to the snapshot file.")
    v.set_defaults(func=cmd_verify)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    try:
        return args.func(args)
    except (RegenesisError, httpx.HTTPError, OSError) as e:
        log.error("%s: %s", type(e).__name__, e)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
