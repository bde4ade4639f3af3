from __future__ import annotations


class RegenesisError(RuntimeError):
    """Base class for every condition that aborts a snapshot run."""


class ConfigError(RegenesisError):
    pass


class RpcError(RegenesisError):
    pass


class BlockNotFound(RegenesisError):
    def __init__(self, block_number: int) -> None:
        super().__init__(f"Block hash for block number {block_number} not found")
        self.block_number = block_number


class HeaderNotFound(RegenesisError):
    def __init__(self, block_hash: str) -> None:
        super().__init__(f"Header for block hash {block_hash} not found")
        self.block_hash = block_hash


class MalformedAccountKey(RegenesisError):
    pass


class MalformedBalanceRecord(RegenesisError):
    pass


class GrantListDecodeFailure(RegenesisError):
    pass


class UnexpectedReservedBalance(RegenesisError):
    def __init__(self, account: str, free: int, reserved: int) -> None:
        super().__init__(
            f"New account {account} has reserved balance: free={free} reserved={reserved}"
        )
        self.account = account
        self.free = free
        self.reserved = reserved


class IssuanceMismatch(RegenesisError):
    def __init__(self, accumulated: int, expected: int) -> None:
        super().__init__(
            f"Total issuance mismatch: accounts sum={accumulated} chain={expected}"
        )
        self.accumulated = accumulated
        self.expected = expected


class SnapshotFormatError(RegenesisError):
    pass
