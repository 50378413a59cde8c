from __future__ import annotations

import pytest

from pairswap.core.math import MAX_AMOUNT
from pairswap.core.rewards import compute_reward
from pairswap.errors import AmmError, ErrorKind


def test_reward_is_shares_times_rate() -> None:
    assert compute_reward(1_000_000, 2, min_shares=1) == 2_000_000
    assert compute_reward(5, 0, min_shares=1) == 0


def test_no_position_is_unauthorized() -> None:
    with pytest.raises(AmmError) as exc:
        compute_reward(0, 2, min_shares=1)
    assert exc.value.kind is ErrorKind.UNAUTHORIZED


def test_position_below_threshold_is_insufficient_funds() -> None:
    with pytest.raises(AmmError) as exc:
        compute_reward(999, 2, min_shares=1_000)
    assert exc.value.kind is ErrorKind.INSUFFICIENT_FUNDS
    assert compute_reward(1_000, 2, min_shares=1_000) == 2_000


def test_reward_overflow_is_rejected() -> None:
    with pytest.raises(AmmError) as exc:
        compute_reward(MAX_AMOUNT - 1, 2, min_shares=1)
    assert exc.value.kind is ErrorKind.INVALID_AMOUNT


@pytest.mark.parametrize("rate", [-1, True, "2"])
def test_bad_rate_is_invalid_amount(rate) -> None:
    with pytest.raises(AmmError) as exc:
        compute_reward(10, rate, min_shares=1)
    assert exc.value.kind is ErrorKind.INVALID_AMOUNT
