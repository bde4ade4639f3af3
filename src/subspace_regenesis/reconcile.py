from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Tuple

from .accounts import BalanceRecord
from .errors import IssuanceMismatch, UnexpectedReservedBalance
from .exclusions import ExclusionSet
from .project_constants import DEFAULT_SS58_FORMAT
from .resolver import BlockRef
from .ss58 import ss58_encode

log = logging.getLogger("reconcile")


@dataclass(frozen=True)
class NewAccountEntry:
    account_id: bytes
    balance: int


@dataclass(frozen=True)
class Snapshot:
    block: BlockRef
    entries: Tuple[NewAccountEntry, ...]
    accounts_seen: int
    excluded_count: int
    total_issuance: int

    @property
    def new_issuance(self) -> int:
        return sum(e.balance for e in self.entries)


def reconcile(
    block: BlockRef,
    accounts: Iterable[Tuple[bytes, BalanceRecord]],
    exclusions: ExclusionSet,
    fetch_total_issuance: Callable[[BlockRef], int],
    ss58_format: int = DEFAULT_SS58_FORMAT,
) -> Snapshot:
    """
    Partitions every account at `block` into excluded and new, and checks that
    the sum over all of them equals the chain's own TotalIssuance.

    `accounts` must be the complete stream for `block`; the issuance read is
    made only after it is exhausted.
    """
    total_issuance = 0
    accounts_seen = 0
    excluded_count = 0
    new_accounts: List[NewAccountEntry] = []

    for account_id, record in accounts:
        accounts_seen += 1
        total = record.total
        total_issuance += total
        if accounts_seen % 10000 == 0:
            log.info("Accounts processed: %d", accounts_seen)

        if account_id in exclusions:
            # Sudo, dev and token grant accounts are set up by the new genesis.
            excluded_count += 1
            continue

        # New accounts must have the free balance only.
        if total != record.free:
            raise UnexpectedReservedBalance(
                ss58_encode(account_id, ss58_format), record.free, record.reserved
            )
        new_accounts.append(NewAccountEntry(account_id, total))

    log.info("Accounts seen     : %d", accounts_seen)
    log.info("Excluded accounts : %d", excluded_count)

    expected_total_issuance = fetch_total_issuance(block)
    if total_issuance != expected_total_issuance:
        raise IssuanceMismatch(total_issuance, expected_total_issuance)

    log.info("Total issuance verified: %d", total_issuance)
    return Snapshot(
        block=block,
        entries=tuple(new_accounts),
        accounts_seen=accounts_seen,
        excluded_count=excluded_count,
        total_issuance=total_issuance,
    )
