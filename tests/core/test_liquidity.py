from __future__ import annotations

import pytest

from pairswap.core.liquidity import plan_add_liquidity, plan_create_pool, plan_remove_liquidity
from pairswap.errors import AmmError, ErrorKind
from pairswap.state.pools import PoolKey, PoolState


KEY = PoolKey.of("token-a", "token-b")


def _pool(r0: int, r1: int, total: int) -> PoolState:
    return PoolState(key=KEY, reserve0=r0, reserve1=r1, total_shares=total)


def test_create_pool_mints_asset0_amount_as_shares() -> None:
    pool = plan_create_pool(KEY, 1_000_000, 2_000_000, created_at=7)
    assert (pool.reserve0, pool.reserve1) == (1_000_000, 2_000_000)
    assert pool.total_shares == 1_000_000
    assert pool.created_at == 7


def test_create_pool_rejects_zero_amount() -> None:
    with pytest.raises(AmmError) as exc:
        plan_create_pool(KEY, 1_000, 0)
    assert exc.value.kind is ErrorKind.INVALID_AMOUNT


def test_add_liquidity_at_ratio() -> None:
    plan = plan_add_liquidity(_pool(1_000_000, 1_000_000, 1_000_000), 100_000, 100_000)
    assert plan.optimal1 == 100_000
    assert plan.shares_minted == 100_000
    after = plan.pool_after
    assert (after.reserve0, after.reserve1, after.total_shares) == (1_100_000, 1_100_000, 1_100_000)


def test_add_liquidity_accepts_under_supplied_asset1() -> None:
    plan = plan_add_liquidity(_pool(1_000, 2_000, 1_000), 100, 1)
    assert plan.optimal1 == 200
    assert plan.pool_after.reserve1 == 2_001
    assert plan.shares_minted == 100


def test_add_liquidity_rejects_over_supplied_asset1() -> None:
    with pytest.raises(AmmError, match="optimum") as exc:
        plan_add_liquidity(_pool(1_000, 2_000, 1_000), 100, 201)
    assert exc.value.kind is ErrorKind.INVALID_AMOUNT


def test_add_liquidity_rejects_drained_pool() -> None:
    with pytest.raises(AmmError, match="fully withdrawn"):
        plan_add_liquidity(_pool(0, 0, 0), 100, 100)


def test_remove_liquidity_half() -> None:
    plan = plan_remove_liquidity(_pool(1_100_000, 1_100_000, 1_100_000), 550_000)
    assert (plan.amount0, plan.amount1) == (550_000, 550_000)
    after = plan.pool_after
    assert (after.reserve0, after.reserve1, after.total_shares) == (550_000, 550_000, 550_000)


def test_remove_all_shares_drains_pool() -> None:
    plan = plan_remove_liquidity(_pool(1_234, 5_678, 999), 999)
    assert (plan.amount0, plan.amount1) == (1_234, 5_678)
    assert not plan.pool_after.is_live
    assert (plan.pool_after.reserve0, plan.pool_after.reserve1) == (0, 0)


def test_remove_liquidity_floors_in_favor_of_pool() -> None:
    plan = plan_remove_liquidity(_pool(10, 7, 3), 1)
    assert (plan.amount0, plan.amount1) == (3, 2)
    assert (plan.pool_after.reserve0, plan.pool_after.reserve1) == (7, 5)


def test_remove_liquidity_rejects_zero_shares() -> None:
    with pytest.raises(AmmError) as exc:
        plan_remove_liquidity(_pool(10, 10, 10), 0)
    assert exc.value.kind is ErrorKind.INVALID_AMOUNT
