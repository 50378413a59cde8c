"""Bounded integer arithmetic for reserves, shares and rewards.

Every quantity the core stores is an int in [0, MAX_AMOUNT). Keeping both
factors below 2**64 keeps every intermediate product below 2**128, so a port to
a fixed-width host stays overflow-free. Helpers raise ``AmmError`` with
``INVALID_AMOUNT`` instead of wrapping.
"""

from __future__ import annotations

from ..errors import AmmError, ErrorKind


MAX_AMOUNT: int = 1 << 64  # exclusive upper bound for reserves, shares, rewards
FEE_DENOM: int = 10_000
DEFAULT_FEE_BPS: int = 30  # 0.3%


def is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def require_amount(value: object, *, name: str = "amount", allow_zero: bool = False) -> int:
    """Return `value` if it is an int in (0, MAX_AMOUNT) (or [0, ...) with allow_zero)."""
    if not is_int(value):
        raise AmmError(ErrorKind.INVALID_AMOUNT, f"{name} must be an int")
    lo = 0 if allow_zero else 1
    if value < lo:
        raise AmmError(ErrorKind.INVALID_AMOUNT, f"{name} must be >= {lo}: {value}")
    if value >= MAX_AMOUNT:
        raise AmmError(ErrorKind.INVALID_AMOUNT, f"{name} exceeds bound: {value}")
    return value


def require_bounded(value: int, *, name: str) -> int:
    if value < 0 or value >= MAX_AMOUNT:
        raise AmmError(ErrorKind.INVALID_AMOUNT, f"{name} out of range: {value}")
    return value


def checked_add(a: int, b: int, *, name: str = "sum") -> int:
    return require_bounded(a + b, name=name)


def checked_sub(a: int, b: int, *, name: str = "difference") -> int:
    return require_bounded(a - b, name=name)


def checked_mul(a: int, b: int, *, name: str = "product") -> int:
    return require_bounded(a * b, name=name)


def mul_div_floor(a: int, b: int, denominator: int) -> int:
    """floor(a * b / denominator) for non-negative operands."""
    if denominator <= 0:
        raise AmmError(ErrorKind.INVALID_AMOUNT, "division by a non-positive denominator")
    if a < 0 or b < 0:
        raise AmmError(ErrorKind.INVALID_AMOUNT, "operands must be non-negative")
    return (a * b) // denominator


def require_fee_bps(fee_bps: object) -> int:
    if not is_int(fee_bps) or not (0 <= fee_bps < FEE_DENOM):
        raise ValueError(f"fee_bps must be in [0, {FEE_DENOM}): {fee_bps!r}")
    return fee_bps
