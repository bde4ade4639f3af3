"""Shared fixtures: an in-memory node serving System.Account at fixed blocks."""

import hashlib
from typing import Any, Dict, List, Optional, Tuple

import pytest

from subspace_regenesis.project_constants import SYSTEM_ACCOUNT_PREFIX, TOTAL_ISSUANCE_KEY
from subspace_regenesis.rpc import to_hex

ALICE = bytes.fromhex("d43593c715fdd31c61141abd04a99fd6822c8558854ccde39a5684e7a56da27d")
BOB = bytes.fromhex("8eaf04151687736326c9fea17e25fc5287613693c912909cb226aa4794f26a48")

BLOCK_HASH = "0x" + "ab" * 32


def account_id(n: int) -> bytes:
    return bytes([n]) * 32


def account_key(account: bytes) -> bytes:
    return SYSTEM_ACCOUNT_PREFIX + hashlib.blake2b(account, digest_size=16).digest() + account


def account_info(free: int, reserved: int = 0, nonce: int = 0) -> bytes:
    counters = nonce.to_bytes(4, "little") + (0).to_bytes(4, "little") * 3
    data = (
        free.to_bytes(16, "little")
        + reserved.to_bytes(16, "little")
        + (0).to_bytes(16, "little") * 2
    )
    return counters + data


class FakeNode:
    """
    Mimics the RpcClient methods used by the pipeline, over one block's state.
    Records the block hash of every state read.
    """

    def __init__(
        self,
        accounts: List[Tuple[bytes, int, int]],
        total_issuance: Optional[int],
        block_number: int = 100,
        block_hash: str = BLOCK_HASH,
    ) -> None:
        self.block_number = block_number
        self.block_hash = block_hash
        self.storage: Dict[str, str] = {}
        for account, free, reserved in accounts:
            self.storage[to_hex(account_key(account))] = to_hex(account_info(free, reserved))
        self.total_issuance = total_issuance
        self.state_reads: List[str] = []
        self.key_pages = 0
        self.closed = False

    def close(self) -> None:
        self.closed = True

    def get_block_hash(self, block_number: Optional[int] = None) -> Optional[str]:
        if block_number is None or block_number == self.block_number:
            return self.block_hash
        return None

    def get_header(self, block_hash: str) -> Optional[Dict[str, Any]]:
        if block_hash != self.block_hash:
            return None
        return {"number": hex(self.block_number), "parentHash": "0x" + "00" * 32}

    def get_keys_paged(self, prefix: bytes, count: int, start_key, block_hash: str) -> List[str]:
        self.state_reads.append(block_hash)
        self.key_pages += 1
        keys = sorted(k for k in self.storage if k.startswith(to_hex(prefix)))
        if start_key is not None:
            keys = [k for k in keys if k > start_key]
        return keys[:count]

    def query_storage_at(self, keys: List[str], block_hash: str) -> List[Tuple[str, Optional[str]]]:
        self.state_reads.append(block_hash)
        return [(k, self.storage.get(k)) for k in keys]

    def get_storage(self, key: bytes, block_hash: str) -> Optional[str]:
        self.state_reads.append(block_hash)
        assert key == TOTAL_ISSUANCE_KEY
        if self.total_issuance is None:
            return None
        return to_hex(self.total_issuance.to_bytes(16, "little"))


@pytest.fixture
def make_node():
    return FakeNode
