"""
Governance singleton: owner identity, reward rate and the asset allowlist.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import FrozenSet

from .balances import AssetId, Identity


@dataclass(frozen=True)
class GovernanceState:
    """
    Immutable governance record. Owner-gated setters return a new record.

    Attributes:
        owner: Identity allowed to mutate this record
        reward_rate: Reward units granted per share on each claim
        max_reward_rate: Upper bound accepted by `with_reward_rate`
        allowed: Assets eligible for pooling
    """

    owner: Identity
    reward_rate: int = 0
    max_reward_rate: int = 10_000
    allowed: FrozenSet[AssetId] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not isinstance(self.owner, str) or not self.owner:
            raise ValueError("owner must be a non-empty string")
        for name, v in (("reward_rate", self.reward_rate), ("max_reward_rate", self.max_reward_rate)):
            if not isinstance(v, int) or isinstance(v, bool) or v < 0:
                raise ValueError(f"{name} must be a non-negative int: {v!r}")
        if self.reward_rate > self.max_reward_rate:
            raise ValueError(
                f"reward_rate ({self.reward_rate}) exceeds max_reward_rate ({self.max_reward_rate})"
            )
        if not isinstance(self.allowed, frozenset):
            object.__setattr__(self, "allowed", frozenset(self.allowed))

    def is_owner(self, identity: Identity) -> bool:
        return identity == self.owner

    def is_allowed(self, asset: AssetId) -> bool:
        return asset in self.allowed

    def with_allowed(self, asset: AssetId) -> "GovernanceState":
        return replace(self, allowed=self.allowed | {asset})

    def with_reward_rate(self, rate: int) -> "GovernanceState":
        return replace(self, reward_rate=rate)

    def with_owner(self, owner: Identity) -> "GovernanceState":
        return replace(self, owner=owner)
