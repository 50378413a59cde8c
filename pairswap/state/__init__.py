"""
State tables for pairswap
"""

from .balances import Amount, AssetId, BalanceTable, Identity
from .governance import GovernanceState
from .lp import LPTable
from .pools import PoolKey, PoolState, PoolTable
from .rewards import RewardTable

__all__ = [
    "Amount",
    "AssetId",
    "BalanceTable",
    "Identity",
    "GovernanceState",
    "LPTable",
    "PoolKey",
    "PoolState",
    "PoolTable",
    "RewardTable",
]
