from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Tuple

from .errors import GrantListDecodeFailure
from .project_constants import DEV_ACCOUNTS, SUDO_ACCOUNT, TOKEN_GRANTS
from .ss58 import ss58_decode


@dataclass(frozen=True)
class ExclusionSet:
    sudo: bytes
    dev_accounts: Tuple[bytes, ...]
    token_grants: Tuple[bytes, ...]
    members: FrozenSet[bytes] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        members = frozenset((self.sudo, *self.dev_accounts, *self.token_grants))
        object.__setattr__(self, "members", members)

    def __contains__(self, account_id: object) -> bool:
        return account_id in self.members

    def __len__(self) -> int:
        return len(self.members)


def decode_addresses(addresses: Iterable[str], what: str) -> List[bytes]:
    out: List[bytes] = []
    for address in addresses:
        try:
            account_id, _ = ss58_decode(address)
        except ValueError as e:
            raise GrantListDecodeFailure(f"Invalid {what} address {address!r}: {e}") from e
        out.append(account_id)
    return out


def decode_token_grants(addresses: Iterable[str] = TOKEN_GRANTS) -> Tuple[bytes, ...]:
    addresses = list(addresses)
    decoded = decode_addresses(addresses, "token grant")
    if len(set(decoded)) != len(addresses):
        raise GrantListDecodeFailure(
            f"Token grant list decoded to {len(set(decoded))} accounts, expected {len(addresses)}"
        )
    return tuple(decoded)


def build_exclusion_set(token_grants: Iterable[str] = TOKEN_GRANTS) -> ExclusionSet:
    """Decodes every fixed address eagerly; any bad entry aborts before network I/O."""
    sudo = decode_addresses([SUDO_ACCOUNT], "sudo")[0]
    dev_accounts = tuple(decode_addresses(DEV_ACCOUNTS, "dev account"))
    grants = decode_token_grants(token_grants)
    return ExclusionSet(sudo=sudo, dev_accounts=dev_accounts, token_grants=grants)
