"""Invariant checkers for pools and the aggregate AMM state.

Each function returns True when the invariant holds. `check_pool()` and
`check_all()` return the list of violated invariant IDs (empty = all pass).
The engine runs `check_pool()` on every planned pool record before touching
the gateway; `check_all()` is the whole-state audit exposed as `verify()`.
"""

from __future__ import annotations

from typing import Callable

from ..state.pools import PoolState
from .math import MAX_AMOUNT
from .state import AmmState


def inv_reserves_positive_when_live(p: PoolState) -> bool:
    if p.total_shares == 0:
        return True
    return p.reserve0 > 0 and p.reserve1 > 0


def inv_drained_when_no_shares(p: PoolState) -> bool:
    if p.total_shares > 0:
        return True
    return p.reserve0 == 0 and p.reserve1 == 0


def inv_reserves_bounded(p: PoolState) -> bool:
    return 0 <= p.reserve0 < MAX_AMOUNT and 0 <= p.reserve1 < MAX_AMOUNT


def inv_shares_bounded(p: PoolState) -> bool:
    return 0 <= p.total_shares < MAX_AMOUNT


POOL_INVARIANTS: dict[str, Callable[[PoolState], bool]] = {
    "inv_reserves_positive_when_live": inv_reserves_positive_when_live,
    "inv_drained_when_no_shares": inv_drained_when_no_shares,
    "inv_reserves_bounded": inv_reserves_bounded,
    "inv_shares_bounded": inv_shares_bounded,
}


def check_pool(pool: PoolState) -> list[str]:
    """Return list of violated pool invariant IDs (empty = all pass)."""
    return [inv_id for inv_id, check_fn in POOL_INVARIANTS.items() if not check_fn(pool)]


def swap_product_non_decreasing(before: PoolState, after: PoolState) -> bool:
    return after.get_constant_product() >= before.get_constant_product()


def check_all(state: AmmState) -> list[str]:
    """
    Audit every pool plus the cross-table laws:
    - share conservation (positions sum to total_shares per pool)
    - no position in an unknown pool
    - governance rate within its bound
    """
    violations: list[str] = []
    for pool in state.pools:
        violations.extend(f"{pool.key}:{inv_id}" for inv_id in check_pool(pool))

    held = {key for _, key in state.positions.get_all_balances()}
    for key in sorted(held):
        if key not in state.pools:
            violations.append(f"{key}:inv_position_without_pool")

    for pool in state.pools:
        if state.positions.total_for_pool(pool.key) != pool.total_shares:
            violations.append(f"{pool.key}:inv_share_conservation")

    gov = state.governance
    if gov.reward_rate > gov.max_reward_rate:
        violations.append("governance:inv_reward_rate_bounded")
    return violations
