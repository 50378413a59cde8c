from __future__ import annotations

import pytest

from pairswap.errors import AmmError, ErrorKind
from pairswap.state.pools import PoolKey, PoolState, PoolTable


def test_pair_and_reverse_resolve_to_same_key() -> None:
    assert PoolKey.of("token-b", "token-a") == PoolKey.of("token-a", "token-b")
    key = PoolKey.of("token-b", "token-a")
    assert (key.asset0, key.asset1) == ("token-a", "token-b")
    assert str(key) == "token-a/token-b"


def test_same_asset_is_rejected() -> None:
    with pytest.raises(AmmError) as exc:
        PoolKey.of("token-a", "token-a")
    assert exc.value.kind is ErrorKind.SAME_ASSET


@pytest.mark.parametrize("bad", ["", "   ", " token-a", None, 7, "x" * 257])
def test_malformed_asset_is_invalid_pair(bad) -> None:
    with pytest.raises(AmmError) as exc:
        PoolKey.of(bad, "token-b")
    assert exc.value.kind is ErrorKind.INVALID_PAIR


def test_direct_construction_requires_canonical_order() -> None:
    with pytest.raises(ValueError, match="canonical order"):
        PoolKey("token-b", "token-a")


def test_other_side() -> None:
    key = PoolKey.of("token-a", "token-b")
    assert key.other("token-b") == "token-a"
    assert key.other("token-a") == "token-b"
    with pytest.raises(ValueError):
        key.other("token-c")


def test_pool_state_orientation() -> None:
    pool = PoolState(key=PoolKey.of("token-a", "token-b"), reserve0=100, reserve1=300, total_shares=100)
    assert pool.oriented("token-a") == (100, 300)
    assert pool.oriented("token-b") == (300, 100)
    moved = pool.with_reserves_for("token-b", 310, 97)
    assert (moved.reserve0, moved.reserve1) == (97, 310)
    assert pool.get_constant_product() == 30_000


def test_pool_state_rejects_negative_values() -> None:
    with pytest.raises(ValueError):
        PoolState(key=PoolKey.of("token-a", "token-b"), reserve0=-1, reserve1=1, total_shares=1)


def test_pool_table_insert_put_require() -> None:
    table = PoolTable()
    key = PoolKey.of("token-a", "token-b")
    pool = PoolState(key=key, reserve0=1, reserve1=1, total_shares=1)

    with pytest.raises(AmmError) as missing:
        table.require(key)
    assert missing.value.kind is ErrorKind.POOL_NOT_FOUND
    with pytest.raises(AmmError):
        table.put(pool)

    table.insert(pool)
    with pytest.raises(AmmError) as dup:
        table.insert(pool)
    assert dup.value.kind is ErrorKind.POOL_ALREADY_EXISTS

    table.put(PoolState(key=key, reserve0=2, reserve1=2, total_shares=1))
    assert table.require(key).reserve0 == 2
    assert len(table) == 1 and key in table


def test_pool_table_iterates_in_key_order() -> None:
    table = PoolTable()
    for a, b in (("z", "y"), ("b", "a"), ("m", "c")):
        table.insert(PoolState(key=PoolKey.of(a, b), reserve0=1, reserve1=1, total_shares=1))
    assert [str(p.key) for p in table] == ["a/b", "c/m", "y/z"]
