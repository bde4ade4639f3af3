from __future__ import annotations

import json
import os
import tempfile
from typing import Any, Dict, List

from .errors import SnapshotFormatError
from .exclusions import ExclusionSet
from .project_constants import DEFAULT_SS58_FORMAT, SNAPSHOT_FILE_TEMPLATE
from .reconcile import Snapshot
from .ss58 import ss58_decode, ss58_encode


def snapshot_path(out_dir: str, block_number: int) -> str:
    return os.path.join(out_dir, SNAPSHOT_FILE_TEMPLATE.format(number=block_number))


def render_snapshot(snapshot: Snapshot, ss58_format: int = DEFAULT_SS58_FORMAT) -> str:
    # Stream order is kept as is (critical for reproducibility).
    entries: List[Dict[str, Any]] = [
        {"account": ss58_encode(e.account_id, ss58_format), "balance": e.balance}
        for e in snapshot.entries
    ]
    return json.dumps(entries, indent=2) + "\n"


def write_snapshot(
    snapshot: Snapshot,
    out_dir: str = ".",
    ss58_format: int = DEFAULT_SS58_FORMAT,
) -> str:
    """Writes balances_<number>.json in one replace; returns the path."""
    path = snapshot_path(out_dir, snapshot.block.number)
    content = render_snapshot(snapshot, ss58_format)

    fd, tmp_path = tempfile.mkstemp(
        prefix=".balances_", suffix=".tmp", dir=os.path.dirname(path) or "."
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        # mkstemp creates 0600; give the file the mode a plain open() would.
        umask = os.umask(0)
        os.umask(umask)
        os.chmod(tmp_path, 0o666 & ~umask)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise
    return path


def verify_snapshot(path: str, exclusions: ExclusionSet) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise SnapshotFormatError(f"Snapshot is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise SnapshotFormatError("Snapshot must be a JSON list of entries")

    seen = set()
    new_issuance = 0
    for idx, entry in enumerate(data):
        if not isinstance(entry, dict) or "account" not in entry or "balance" not in entry:
            raise SnapshotFormatError(f"Entry {idx}: expected {{account, balance}}, got {entry!r}")

        try:
            account_id, _ = ss58_decode(entry["account"])
        except (TypeError, ValueError) as e:
            raise SnapshotFormatError(f"Entry {idx}: bad account {entry['account']!r}: {e}") from e

        balance = entry["balance"]
        if isinstance(balance, bool) or not isinstance(balance, int) or balance < 0:
            raise SnapshotFormatError(f"Entry {idx}: bad balance {balance!r}")

        if account_id in seen:
            raise SnapshotFormatError(f"Entry {idx}: duplicate account {entry['account']}")
        if account_id in exclusions:
            raise SnapshotFormatError(f"Entry {idx}: excluded account {entry['account']}")

        seen.add(account_id)
        new_issuance += balance

    return {
        "ok": True,
        "accounts": len(data),
        "new_issuance": new_issuance,
    }
