"""
Core AMM algorithms
"""

from .cpmm import (
    SwapExactInResult,
    amount_after_fee,
    compute_share_burn,
    optimal_amount1,
    swap_exact_in,
)
from .invariants import check_all, check_pool
from .liquidity import (
    AddLiquidityPlan,
    RemoveLiquidityPlan,
    plan_add_liquidity,
    plan_create_pool,
    plan_remove_liquidity,
)
from .math import DEFAULT_FEE_BPS, FEE_DENOM, MAX_AMOUNT
from .rewards import compute_reward
from .state import AmmState
from .types import Effect, Event, OpResult, SwapQuote

__all__ = [
    "SwapExactInResult",
    "amount_after_fee",
    "compute_share_burn",
    "optimal_amount1",
    "swap_exact_in",
    "check_all",
    "check_pool",
    "AddLiquidityPlan",
    "RemoveLiquidityPlan",
    "plan_add_liquidity",
    "plan_create_pool",
    "plan_remove_liquidity",
    "DEFAULT_FEE_BPS",
    "FEE_DENOM",
    "MAX_AMOUNT",
    "compute_reward",
    "AmmState",
    "Effect",
    "Event",
    "OpResult",
    "SwapQuote",
]
