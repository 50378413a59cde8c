"""Guard functions shared by the engine's public operations.

Each guard returns the validated value or raises ``AmmError`` with the
rejection kind; none of them touch state.
"""

from __future__ import annotations

from ..errors import AmmError, ErrorKind
from ..state.balances import AssetId, Identity
from ..state.governance import GovernanceState
from ..state.pools import require_asset_id
from .math import is_int


def require_identity(identity: object, *, name: str = "caller") -> Identity:
    if not isinstance(identity, str) or not identity:
        raise AmmError(ErrorKind.UNAUTHORIZED, f"{name} must be a non-empty identity")
    return identity


def require_owner(gov: GovernanceState, caller: Identity) -> None:
    if not gov.is_owner(caller):
        raise AmmError(ErrorKind.UNAUTHORIZED, f"{caller} is not the owner")


def require_allowed(gov: GovernanceState, asset: AssetId) -> None:
    if not gov.is_allowed(asset):
        raise AmmError(ErrorKind.ASSET_NOT_ALLOWED, asset)


def require_reward_rate(gov: GovernanceState, rate: object) -> int:
    if not is_int(rate) or rate < 0:
        raise AmmError(ErrorKind.INVALID_AMOUNT, f"rate must be a non-negative int: {rate!r}")
    if rate > gov.max_reward_rate:
        raise AmmError(
            ErrorKind.MAX_RATE_EXCEEDED,
            f"rate {rate} exceeds maximum {gov.max_reward_rate}",
        )
    return rate


def require_min_out(actual: int, minimum: object, *, name: str) -> None:
    if not is_int(minimum) or minimum < 0:
        raise AmmError(ErrorKind.INVALID_AMOUNT, f"{name} must be a non-negative int")
    if actual < minimum:
        raise AmmError(ErrorKind.SLIPPAGE_EXCEEDED, f"{name}: {actual} < {minimum}")


def require_new_asset(asset: object) -> AssetId:
    return require_asset_id(asset, name="asset")
