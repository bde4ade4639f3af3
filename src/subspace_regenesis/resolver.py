from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .errors import BlockNotFound, HeaderNotFound, RpcError
from .rpc import RpcClient

log = logging.getLogger("resolver")


@dataclass(frozen=True)
class BlockRef:
    number: int
    hash: str


def resolve_block_hash(
    rpc: RpcClient,
    block_number: Optional[int] = None,
    block_hash: Optional[str] = None,
) -> str:
    """
    An explicit number wins over an explicit hash; with neither, the node's
    best block is used.
    """
    if block_number is not None:
        resolved = rpc.get_block_hash(block_number)
        if resolved is None:
            raise BlockNotFound(block_number)
        return resolved

    if block_hash is not None:
        return block_hash

    resolved = rpc.get_block_hash()
    if resolved is None:
        raise RpcError("Best block hash not found")
    return resolved


def resolve_block(
    rpc: RpcClient,
    block_number: Optional[int] = None,
    block_hash: Optional[str] = None,
) -> BlockRef:
    resolved = resolve_block_hash(rpc, block_number, block_hash)
    header = rpc.get_header(resolved)
    if not isinstance(header, dict) or "number" not in header:
        raise HeaderNotFound(resolved)

    try:
        number = int(header["number"], 16)
    except (TypeError, ValueError) as e:
        raise RpcError(f"Bad header number for {resolved}: {header['number']!r}") from e
    if block_number is not None and number != block_number:
        raise RpcError(
            f"Header number mismatch: requested #{block_number}, node returned #{number}"
        )

    log.debug("Resolved block #%d (%s)", number, resolved)
    return BlockRef(number=number, hash=resolved)
