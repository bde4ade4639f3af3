from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from .errors import MalformedAccountKey, MalformedBalanceRecord
from .project_constants import (
    ACCOUNT_INFO_LEN,
    ACCOUNT_KEY_LEN,
    BALANCE_LEN,
    BLAKE_HASH_LEN,
    STORAGE_PREFIX_LEN,
    SYSTEM_ACCOUNT_PREFIX,
    TOTAL_ISSUANCE_KEY,
)
from .rpc import RpcClient, from_hex
from .resolver import BlockRef

log = logging.getLogger("accounts")

# AccountInfo counters: nonce, consumers, providers, sufficients
_COUNTERS_LEN = 4 * 4


@dataclass(frozen=True)
class BalanceRecord:
    free: int
    reserved: int

    @property
    def total(self) -> int:
        return self.free + self.reserved


def _unhex(value: str, what: str, error: type) -> bytes:
    try:
        return from_hex(value)
    except (TypeError, ValueError) as e:
        raise error(f"{what} is not hex: {value!r}") from e


def decode_account_key(key: bytes) -> bytes:
    """
    System.Account key layout (Blake2_128Concat):
    prefix(0-32) | blake2_128(account)(32-48) | account(48-80)
    """
    if len(key) != ACCOUNT_KEY_LEN:
        raise MalformedAccountKey(
            f"Account key must be {ACCOUNT_KEY_LEN} bytes, got {len(key)}: 0x{key.hex()}"
        )
    if key[:STORAGE_PREFIX_LEN] != SYSTEM_ACCOUNT_PREFIX:
        raise MalformedAccountKey(f"Key outside System.Account: 0x{key.hex()}")

    hash_end = STORAGE_PREFIX_LEN + BLAKE_HASH_LEN
    key_hash = key[STORAGE_PREFIX_LEN:hash_end]
    account_id = key[hash_end:]
    if hashlib.blake2b(account_id, digest_size=BLAKE_HASH_LEN).digest() != key_hash:
        raise MalformedAccountKey(f"Key hash does not match account id: 0x{key.hex()}")
    return account_id


def decode_u128(data: bytes) -> int:
    return int.from_bytes(data, "little")


def decode_balance_record(value: bytes) -> BalanceRecord:
    """
    AccountInfo layout:
    nonce, consumers, providers, sufficients (u32 each)
    | free | reserved | two frozen/flags fields (u128 each)
    """
    if len(value) != ACCOUNT_INFO_LEN:
        raise MalformedBalanceRecord(
            f"AccountInfo must be {ACCOUNT_INFO_LEN} bytes, got {len(value)}: 0x{value.hex()}"
        )
    free_start = _COUNTERS_LEN
    reserved_start = free_start + BALANCE_LEN
    free = decode_u128(value[free_start:reserved_start])
    reserved = decode_u128(value[reserved_start:reserved_start + BALANCE_LEN])
    return BalanceRecord(free=free, reserved=reserved)


def decode_total_issuance(value: Optional[str]) -> int:
    # Absent storage decodes to the ValueQuery default.
    if value is None:
        return 0
    raw = _unhex(value, "Total issuance", MalformedBalanceRecord)
    if len(raw) != BALANCE_LEN:
        raise MalformedBalanceRecord(
            f"Total issuance must be {BALANCE_LEN} bytes, got {len(raw)}: {value}"
        )
    return decode_u128(raw)


def iter_raw_account_entries(
    rpc: RpcClient,
    block: BlockRef,
    page_size: int,
) -> Iterator[Tuple[bytes, bytes]]:
    """
    Yields every (key, value) under System.Account at `block`, in key order.
    Pages are pulled lazily; the generator is single use.
    """
    start_key: Optional[str] = None
    pages = 0
    while True:
        keys = rpc.get_keys_paged(SYSTEM_ACCOUNT_PREFIX, page_size, start_key, block.hash)
        if not keys:
            break
        pages += 1

        values = dict(rpc.query_storage_at(keys, block.hash))
        log.debug("Page %d: %d keys", pages, len(keys))

        for key in keys:
            value = values.get(key)
            if value is None:
                raise MalformedBalanceRecord(
                    f"No value for account key {key} at block {block.hash}"
                )
            yield (
                _unhex(key, "Account key", MalformedAccountKey),
                _unhex(value, "Account value", MalformedBalanceRecord),
            )

        start_key = keys[-1]

    log.info("Fetched %d pages of accounts", pages)


def iter_accounts(
    rpc: RpcClient,
    block: BlockRef,
    page_size: int,
) -> Iterator[Tuple[bytes, BalanceRecord]]:
    for key, value in iter_raw_account_entries(rpc, block, page_size):
        yield decode_account_key(key), decode_balance_record(value)


def fetch_total_issuance(rpc: RpcClient, block: BlockRef) -> int:
    return decode_total_issuance(rpc.get_storage(TOTAL_ISSUANCE_KEY, block.hash))
