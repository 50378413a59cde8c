"""Result and event types returned by the engine.

All types are frozen dataclasses. Amounts in an ``Effect`` are reported in the
caller's argument order (``amount_a`` belongs to the first asset the caller
named), while ``reserve0_after``/``reserve1_after`` follow the canonical key.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Optional

from ..errors import AmmError, ErrorKind
from ..state.balances import AssetId, Identity
from ..state.pools import PoolKey


@unique
class Event(Enum):
    POOL_CREATED = "PoolCreated"
    LIQUIDITY_ADDED = "LiquidityAdded"
    LIQUIDITY_REMOVED = "LiquidityRemoved"
    SWAPPED = "Swapped"
    REWARD_CLAIMED = "RewardClaimed"
    TOKEN_ALLOWED = "TokenAllowed"
    REWARD_RATE_SET = "RewardRateSet"
    OWNERSHIP_TRANSFERRED = "OwnershipTransferred"


@dataclass(frozen=True)
class Effect:
    """Observables emitted by a committed operation. Unused fields stay 0/None."""

    event: Event
    actor: Identity
    seq: int = 0
    key: Optional[PoolKey] = None
    asset: Optional[AssetId] = None   # swap input / reward asset / allowlisted asset
    amount_a: int = 0
    amount_b: int = 0
    shares: int = 0                   # minted or burned
    shares_after: int = 0             # actor's balance after the operation
    amount_in: int = 0
    amount_out: int = 0
    fee: int = 0
    reward: int = 0
    rate: int = 0
    reserve0_after: int = 0
    reserve1_after: int = 0
    total_shares_after: int = 0
    new_owner: Optional[Identity] = None


@dataclass(frozen=True)
class OpResult:
    """
    Discriminated result of a public operation.

    ``ok=True`` carries an ``effect``; ``ok=False`` carries the rejection kind,
    its numeric code and a human-readable detail.
    """

    ok: bool
    effect: Optional[Effect] = None
    error: Optional[ErrorKind] = None
    code: Optional[int] = None
    detail: Optional[str] = None

    @classmethod
    def success(cls, effect: Effect) -> "OpResult":
        return cls(ok=True, effect=effect)

    @classmethod
    def failure(cls, exc: AmmError) -> "OpResult":
        return cls(ok=False, error=exc.kind, code=exc.kind.code, detail=exc.detail)

    def unwrap(self) -> Effect:
        """Return the effect, or raise the rejection as ``AmmError``."""
        if self.ok and self.effect is not None:
            return self.effect
        raise AmmError(self.error or ErrorKind.INVARIANT_VIOLATION, self.detail)


@dataclass(frozen=True)
class SwapQuote:
    key: PoolKey
    asset_in: AssetId
    asset_out: AssetId
    amount_in: int
    amount_in_after_fee: int
    fee: int
    amount_out: int
    reserve_in_after: int
    reserve_out_after: int
