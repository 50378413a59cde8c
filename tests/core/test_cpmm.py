from __future__ import annotations

import pytest

from pairswap.core.cpmm import amount_after_fee, compute_share_burn, optimal_amount1, swap_exact_in
from pairswap.core.math import MAX_AMOUNT
from pairswap.errors import AmmError, ErrorKind


def test_swap_exact_in_reference_numbers() -> None:
    res = swap_exact_in(reserve_in=1_000_000, reserve_out=1_000_000, amount_in=10_000, fee_bps=30)

    assert res.amount_in_after_fee == 9_970
    assert res.fee == 30
    assert res.amount_out == 9_872
    assert (res.new_reserve_in, res.new_reserve_out) == (1_010_000, 990_128)
    assert res.k_after > res.k_before


def test_fee_stays_in_pool() -> None:
    # The full input (not the fee-reduced figure) is added to reserve_in.
    res = swap_exact_in(reserve_in=500, reserve_out=800, amount_in=100, fee_bps=30)
    assert res.new_reserve_in == 600
    assert res.new_reserve_out == 800 - res.amount_out


def test_zero_fee_product_is_preserved_up_to_floor() -> None:
    res = swap_exact_in(reserve_in=1_000, reserve_out=1_000, amount_in=1_000, fee_bps=0)
    assert res.amount_out == 500
    assert res.k_after == res.k_before


def test_amount_after_fee_floors() -> None:
    assert amount_after_fee(10_000, 30) == 9_970
    assert amount_after_fee(1, 30) == 0
    assert amount_after_fee(333, 30) == 332


@pytest.mark.parametrize("amount_in", [0, -1, MAX_AMOUNT])
def test_swap_rejects_out_of_range_input(amount_in: int) -> None:
    with pytest.raises(AmmError) as exc:
        swap_exact_in(reserve_in=1_000, reserve_out=1_000, amount_in=amount_in, fee_bps=30)
    assert exc.value.kind is ErrorKind.INVALID_AMOUNT


def test_swap_rejects_dust_trade_with_zero_output() -> None:
    with pytest.raises(AmmError, match="trade too small") as exc:
        swap_exact_in(reserve_in=1_000_000, reserve_out=1_000, amount_in=100, fee_bps=30)
    assert exc.value.kind is ErrorKind.INVALID_AMOUNT


def test_swap_never_drains_output_reserve() -> None:
    # reserve_out=1 can never pay out without draining.
    with pytest.raises(AmmError) as exc:
        swap_exact_in(reserve_in=1, reserve_out=1, amount_in=10**12, fee_bps=0)
    assert exc.value.kind is ErrorKind.INVALID_AMOUNT


def test_swap_rejects_empty_reserves() -> None:
    with pytest.raises(AmmError, match="empty reserve"):
        swap_exact_in(reserve_in=0, reserve_out=0, amount_in=10, fee_bps=30)


def test_swap_rejects_invalid_fee() -> None:
    with pytest.raises(ValueError, match="fee_bps"):
        swap_exact_in(reserve_in=10, reserve_out=10, amount_in=1, fee_bps=10_000)


def test_swap_rejects_bool_amount() -> None:
    with pytest.raises(AmmError):
        swap_exact_in(reserve_in=10, reserve_out=10, amount_in=True, fee_bps=0)


def test_optimal_amount1_floors() -> None:
    assert optimal_amount1(100_000, 1_000_000, 1_000_000) == 100_000
    assert optimal_amount1(10, 3, 1) == 3
    assert optimal_amount1(1, 3, 1) == 0


def test_optimal_amount1_rejects_empty_reserve() -> None:
    with pytest.raises(AmmError):
        optimal_amount1(10, 0, 10)


def test_compute_share_burn_pro_rata_with_floor() -> None:
    assert compute_share_burn(550_000, 1_100_000, 1_100_000, 1_100_000) == (550_000, 550_000)
    assert compute_share_burn(1, 10, 7, 3) == (3, 2)


def test_compute_share_burn_rejects_more_than_supply() -> None:
    with pytest.raises(AmmError) as exc:
        compute_share_burn(11, 100, 100, 10)
    assert exc.value.kind is ErrorKind.INSUFFICIENT_SHARES
