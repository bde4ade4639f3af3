"""Tests for account classification and issuance reconciliation."""

import pytest

from subspace_regenesis.accounts import BalanceRecord, fetch_total_issuance, iter_accounts
from subspace_regenesis.errors import IssuanceMismatch, UnexpectedReservedBalance
from subspace_regenesis.exclusions import build_exclusion_set
from subspace_regenesis.reconcile import NewAccountEntry, reconcile
from subspace_regenesis.resolver import BlockRef
from subspace_regenesis.ss58 import ss58_encode

from conftest import ALICE, BLOCK_HASH, account_id

BLOCK = BlockRef(number=100, hash=BLOCK_HASH)


@pytest.fixture(scope="module")
def exclusions():
    return build_exclusion_set()


def issuance(value):
    calls = []

    def fetch(block):
        calls.append(block)
        return value

    fetch.calls = calls
    return fetch


class TestReconcile:
    """Tests for reconcile."""

    def test_excluded_and_new_accounts(self, exclusions):
        """Test the excluded account counts toward issuance but not the snapshot."""
        b, c = account_id(2), account_id(3)
        accounts = [
            (ALICE, BalanceRecord(free=100, reserved=5)),
            (b, BalanceRecord(free=50, reserved=0)),
            (c, BalanceRecord(free=0, reserved=0)),
        ]

        snapshot = reconcile(BLOCK, accounts, exclusions, issuance(155))

        assert snapshot.entries == (NewAccountEntry(b, 50), NewAccountEntry(c, 0))
        assert snapshot.total_issuance == 155
        assert snapshot.new_issuance == 50
        assert snapshot.accounts_seen == 3
        assert snapshot.excluded_count == 1
        assert snapshot.block == BLOCK

    def test_stream_order_is_kept(self, exclusions):
        ids = [account_id(n) for n in (9, 3, 5)]
        accounts = [(a, BalanceRecord(free=1, reserved=0)) for a in ids]

        snapshot = reconcile(BLOCK, accounts, exclusions, issuance(3))

        assert [e.account_id for e in snapshot.entries] == ids

    def test_partition_is_total(self, exclusions):
        """Test that every account is either excluded or new, never both."""
        accounts = [(ALICE, BalanceRecord(free=1, reserved=1))]
        accounts += [(account_id(n), BalanceRecord(free=n, reserved=0)) for n in range(1, 6)]

        snapshot = reconcile(BLOCK, accounts, exclusions, issuance(2 + 15))

        assert snapshot.excluded_count + len(snapshot.entries) == snapshot.accounts_seen
        assert all(e.account_id not in exclusions for e in snapshot.entries)

    def test_reserved_balance_on_new_account(self, exclusions):
        d = account_id(4)
        accounts = [(d, BalanceRecord(free=10, reserved=1))]
        fetch = issuance(11)

        with pytest.raises(UnexpectedReservedBalance) as exc:
            reconcile(BLOCK, accounts, exclusions, fetch)

        assert exc.value.account == ss58_encode(d)
        assert exc.value.reserved == 1
        assert fetch.calls == []

    def test_issuance_mismatch(self, exclusions):
        accounts = [(account_id(2), BalanceRecord(free=50, reserved=0))]

        with pytest.raises(IssuanceMismatch) as exc:
            reconcile(BLOCK, accounts, exclusions, issuance(51))

        assert exc.value.accumulated == 50
        assert exc.value.expected == 51

    def test_issuance_fetched_after_stream(self, exclusions):
        """Test that total issuance is read once, for the same block, after the stream."""
        events = []

        def accounts():
            events.append("stream")
            yield account_id(2), BalanceRecord(free=5, reserved=0)
            events.append("done")

        def fetch(block):
            events.append(("issuance", block))
            return 5

        reconcile(BLOCK, accounts(), exclusions, fetch)

        assert events == ["stream", "done", ("issuance", BLOCK)]

    def test_u128_sums_do_not_overflow(self, exclusions):
        big = 2**128 - 1
        accounts = [
            (account_id(1), BalanceRecord(free=big, reserved=0)),
            (account_id(2), BalanceRecord(free=big, reserved=0)),
        ]

        snapshot = reconcile(BLOCK, accounts, exclusions, issuance(2 * big))

        assert snapshot.total_issuance == 2 * big

    def test_against_node_stream(self, exclusions, make_node):
        node = make_node(
            [(ALICE, 100, 5), (account_id(2), 50, 0), (account_id(3), 0, 0)],
            total_issuance=155,
        )

        snapshot = reconcile(
            BLOCK,
            iter_accounts(node, BLOCK, page_size=2),
            exclusions,
            lambda b: fetch_total_issuance(node, b),
        )

        assert sorted(e.account_id for e in snapshot.entries) == [account_id(2), account_id(3)]
        assert set(node.state_reads) == {BLOCK_HASH}
