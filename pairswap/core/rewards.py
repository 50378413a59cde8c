"""
Flat yield accrual.

`reward = shares * rate`. Elapsed periods are not considered and each claim
replaces the previous pending amount.
"""

from __future__ import annotations

from ..errors import AmmError, ErrorKind
from .math import checked_mul, is_int


def compute_reward(shares: int, rate: int, *, min_shares: int) -> int:
    """
    Reward owed for a position of `shares` at `rate`.

    Raises:
        AmmError(UNAUTHORIZED): no position (zero shares)
        AmmError(INSUFFICIENT_FUNDS): position below `min_shares`
        AmmError(INVALID_AMOUNT): reward would exceed the numeric bound
    """
    if not is_int(rate) or rate < 0:
        raise AmmError(ErrorKind.INVALID_AMOUNT, f"rate must be a non-negative int: {rate!r}")
    if shares <= 0:
        raise AmmError(ErrorKind.UNAUTHORIZED, "no liquidity position")
    if shares < min_shares:
        raise AmmError(
            ErrorKind.INSUFFICIENT_FUNDS,
            f"position of {shares} shares is below the reward threshold ({min_shares})",
        )
    return checked_mul(shares, rate, name="reward")
