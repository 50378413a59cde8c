"""Aggregate state for the AMM core."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..state.governance import GovernanceState
from ..state.lp import LPTable
from ..state.pools import PoolTable
from ..state.rewards import RewardTable


@dataclass
class AmmState:
    """
    The four persisted tables plus the operation sequence counter.

    `pools`, `positions` and `rewards` are mutated in place by the engine's
    commit step; `governance` is an immutable record that commits replace.
    """

    governance: GovernanceState
    pools: PoolTable = field(default_factory=PoolTable)
    positions: LPTable = field(default_factory=LPTable)
    rewards: RewardTable = field(default_factory=RewardTable)
    seq: int = 0
