"""
Constant Product Market Maker (CPMM) pricing.

Integer-only operations with floor rounding; every rounding step favors the
pool.

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Deterministic Rounding
- Time Complexity: O(1) per operation
- Invariant: After each swap, x' * y' >= x * y
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..errors import AmmError, ErrorKind
from ..state.balances import Amount
from .math import FEE_DENOM, checked_add, checked_sub, mul_div_floor, require_amount, require_fee_bps


@dataclass(frozen=True)
class SwapExactInResult:
    amount_in: int
    amount_in_after_fee: int
    fee: int
    amount_out: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int


def amount_after_fee(amount_in: Amount, fee_bps: int) -> Amount:
    """floor(amount_in * (FEE_DENOM - fee_bps) / FEE_DENOM)."""
    return mul_div_floor(amount_in, FEE_DENOM - fee_bps, FEE_DENOM)


def swap_exact_in(
    reserve_in: Amount,
    reserve_out: Amount,
    amount_in: Amount,
    fee_bps: int,
) -> SwapExactInResult:
    """
    Compute output amount and post-swap reserves for an exact-in swap.

    This implements:
        amount_in_after_fee = floor(amount_in * (FEE_DENOM - fee_bps) / FEE_DENOM)
        amount_out = floor(reserve_out * amount_in_after_fee / (reserve_in + amount_in_after_fee))

    Post-swap reserves:
        new_reserve_in = reserve_in + amount_in  (fee stays in pool)
        new_reserve_out = reserve_out - amount_out

    Raises:
        AmmError(INVALID_AMOUNT): zero/overflowing input, a zero output, or an
            output that would drain the reserve
        AmmError(INVARIANT_VIOLATION): if the product would decrease
    """
    require_fee_bps(fee_bps)
    require_amount(amount_in, name="amount_in")
    if reserve_in <= 0 or reserve_out <= 0:
        raise AmmError(ErrorKind.INVALID_AMOUNT, "cannot swap against an empty reserve")

    net_in = amount_after_fee(amount_in, fee_bps)
    amount_out = mul_div_floor(reserve_out, net_in, reserve_in + net_in)

    if amount_out <= 0:
        raise AmmError(ErrorKind.INVALID_AMOUNT, "amount_out is zero (trade too small)")
    if amount_out >= reserve_out:
        raise AmmError(ErrorKind.INVALID_AMOUNT, "amount_out would drain reserve_out")

    new_reserve_in = checked_add(reserve_in, amount_in, name="reserve_in")
    new_reserve_out = checked_sub(reserve_out, amount_out, name="reserve_out")

    k_before = reserve_in * reserve_out
    k_after = new_reserve_in * new_reserve_out
    if k_after < k_before:
        raise AmmError(
            ErrorKind.INVARIANT_VIOLATION,
            f"new_k ({k_after}) < old_k ({k_before})",
        )

    return SwapExactInResult(
        amount_in=amount_in,
        amount_in_after_fee=net_in,
        fee=amount_in - net_in,
        amount_out=amount_out,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=k_before,
        k_after=k_after,
    )


def optimal_amount1(amount0: Amount, reserve0: Amount, reserve1: Amount) -> Amount:
    """
    Reserve-proportional counterpart for a deposit of `amount0`:
        optimal1 = floor(amount0 * reserve1 / reserve0)
    """
    if reserve0 <= 0:
        raise AmmError(ErrorKind.INVALID_AMOUNT, "cannot price a deposit against an empty reserve")
    return mul_div_floor(amount0, reserve1, reserve0)


def compute_share_burn(
    shares: Amount,
    reserve0: Amount,
    reserve1: Amount,
    total_shares: Amount,
) -> Tuple[Amount, Amount]:
    """
    Compute asset amounts returned for redeeming `shares`.

    Formula:
        amount0 = floor(shares * reserve0 / total_shares)
        amount1 = floor(shares * reserve1 / total_shares)
    """
    if total_shares <= 0:
        raise AmmError(ErrorKind.INSUFFICIENT_SHARES, "pool has no outstanding shares")
    if shares <= 0:
        raise AmmError(ErrorKind.INVALID_AMOUNT, f"shares must be positive: {shares}")
    if shares > total_shares:
        raise AmmError(
            ErrorKind.INSUFFICIENT_SHARES,
            f"cannot redeem more than supply: {shares} > {total_shares}",
        )
    amount0 = mul_div_floor(shares, reserve0, total_shares)
    amount1 = mul_div_floor(shares, reserve1, total_shares)
    return amount0, amount1
