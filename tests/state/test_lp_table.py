from __future__ import annotations

import pytest

from pairswap.errors import AmmError, ErrorKind
from pairswap.state.lp import LPTable
from pairswap.state.pools import PoolKey
from pairswap.state.rewards import RewardTable


KEY = PoolKey.of("token-a", "token-b")
OTHER = PoolKey.of("token-a", "token-c")


def test_credit_and_debit_track_balance() -> None:
    lp = LPTable()
    assert lp.credit("alice", KEY, 100) == 100
    assert lp.credit("alice", KEY, 50) == 150
    assert lp.debit("alice", KEY, 40) == 110
    assert lp.share_balance("alice", KEY) == 110
    assert lp.share_balance("alice", OTHER) == 0


def test_debit_to_zero_removes_position() -> None:
    lp = LPTable()
    lp.credit("alice", KEY, 10)
    lp.debit("alice", KEY, 10)
    assert not lp.has_position("alice", KEY)
    assert lp.get_all_balances() == {}


def test_debit_beyond_balance_is_insufficient_shares() -> None:
    lp = LPTable()
    lp.credit("alice", KEY, 10)
    with pytest.raises(AmmError) as exc:
        lp.debit("alice", KEY, 11)
    assert exc.value.kind is ErrorKind.INSUFFICIENT_SHARES
    assert lp.share_balance("alice", KEY) == 10


def test_totals_are_per_pool() -> None:
    lp = LPTable()
    lp.credit("alice", KEY, 10)
    lp.credit("bob", KEY, 5)
    lp.credit("bob", OTHER, 7)
    assert lp.total_for_pool(KEY) == 15
    assert lp.total_for_pool(OTHER) == 7


def test_negative_set_is_rejected() -> None:
    with pytest.raises(ValueError):
        LPTable().set("alice", KEY, -1)


def test_reward_table_overwrites() -> None:
    rewards = RewardTable()
    assert rewards.get("alice", "token-a") == 0
    rewards.record("alice", "token-a", 500)
    rewards.record("alice", "token-a", 20)
    assert rewards.get("alice", "token-a") == 20
    assert rewards.get_all() == {("alice", "token-a"): 20}
