"""
Liquidity management planning: create pool, add/remove liquidity.

These are pure functions over `PoolState`. They compute the post-state and the
amounts to move; the engine performs the transfers and commits the result.
All amounts are in canonical orientation (index 0 is `key.asset0`).
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from ..errors import AmmError, ErrorKind
from ..state.balances import Amount
from ..state.pools import PoolKey, PoolState
from .cpmm import compute_share_burn, optimal_amount1
from .math import checked_add, checked_sub, require_amount


@dataclass(frozen=True)
class AddLiquidityPlan:
    pool_after: PoolState
    amount0: Amount
    amount1: Amount
    optimal1: Amount
    shares_minted: Amount


@dataclass(frozen=True)
class RemoveLiquidityPlan:
    pool_after: PoolState
    shares_burned: Amount
    amount0: Amount
    amount1: Amount


def plan_create_pool(
    key: PoolKey,
    amount0: Amount,
    amount1: Amount,
    created_at: int = 0,
) -> PoolState:
    """
    Initial pool state for a first deposit.

    The initial share grant equals the asset0 deposit. This is a deliberate
    simplification (not a geometric mean); share value is tracked in asset0
    units from then on.
    """
    require_amount(amount0, name="amount0")
    require_amount(amount1, name="amount1")
    return PoolState(
        key=key,
        reserve0=amount0,
        reserve1=amount1,
        total_shares=amount0,
        created_at=created_at,
    )


def plan_add_liquidity(pool: PoolState, amount0: Amount, amount1: Amount) -> AddLiquidityPlan:
    """
    Plan a deposit into an existing pool.

    The asset1 side is bounded above by the reserve ratio:
        optimal1 = floor(amount0 * reserve1 / reserve0)
        require amount1 <= optimal1

    Under-supplying asset1 is accepted; there is no lower bound. The supplied
    amounts (not the optimal ones) are added to reserves, and `amount0` shares
    are minted.
    """
    require_amount(amount0, name="amount0")
    require_amount(amount1, name="amount1")
    if not pool.is_live:
        raise AmmError(ErrorKind.INVALID_AMOUNT, f"pool {pool.key} has been fully withdrawn")

    optimal1 = optimal_amount1(amount0, pool.reserve0, pool.reserve1)
    if amount1 > optimal1:
        raise AmmError(
            ErrorKind.INVALID_AMOUNT,
            f"amount1 ({amount1}) exceeds reserve-proportional optimum ({optimal1})",
        )

    pool_after = replace(
        pool,
        reserve0=checked_add(pool.reserve0, amount0, name="reserve0"),
        reserve1=checked_add(pool.reserve1, amount1, name="reserve1"),
        total_shares=checked_add(pool.total_shares, amount0, name="total_shares"),
    )
    return AddLiquidityPlan(
        pool_after=pool_after,
        amount0=amount0,
        amount1=amount1,
        optimal1=optimal1,
        shares_minted=amount0,
    )


def plan_remove_liquidity(pool: PoolState, shares: Amount) -> RemoveLiquidityPlan:
    """
    Plan a pro-rata withdrawal:
        amount0 = floor(shares * reserve0 / total_shares)
        amount1 = floor(shares * reserve1 / total_shares)
    """
    require_amount(shares, name="shares")
    amount0, amount1 = compute_share_burn(shares, pool.reserve0, pool.reserve1, pool.total_shares)
    pool_after = replace(
        pool,
        reserve0=checked_sub(pool.reserve0, amount0, name="reserve0"),
        reserve1=checked_sub(pool.reserve1, amount1, name="reserve1"),
        total_shares=checked_sub(pool.total_shares, shares, name="total_shares"),
    )
    return RemoveLiquidityPlan(
        pool_after=pool_after,
        shares_burned=shares,
        amount0=amount0,
        amount1=amount1,
    )
