"""
Pool state and the pool table for pairswap.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterator, Optional, Tuple

from ..errors import AmmError, ErrorKind
from .balances import Amount, AssetId


MAX_ASSET_ID_LEN = 256


def require_asset_id(asset: object, *, name: str = "asset") -> AssetId:
    """Reject identities that cannot be ordered or stored (InvalidPair)."""
    if not isinstance(asset, str) or not asset.strip():
        raise AmmError(ErrorKind.INVALID_PAIR, f"{name} must be a non-empty string")
    if asset != asset.strip():
        raise AmmError(ErrorKind.INVALID_PAIR, f"{name} must not carry surrounding whitespace")
    if len(asset) > MAX_ASSET_ID_LEN:
        raise AmmError(ErrorKind.INVALID_PAIR, f"{name} too long")
    return asset


@dataclass(frozen=True, order=True)
class PoolKey:
    """
    Canonical, unordered asset pair.

    Construct through `PoolKey.of(a, b)`; the two assets are sorted so that a
    pair and its reverse resolve to the same key.
    """

    asset0: AssetId
    asset1: AssetId

    def __post_init__(self) -> None:
        if self.asset0 >= self.asset1:
            raise ValueError(
                f"Assets must be in canonical order: {self.asset0} < {self.asset1}"
            )

    @classmethod
    def of(cls, asset_a: object, asset_b: object) -> "PoolKey":
        a = require_asset_id(asset_a, name="asset_a")
        b = require_asset_id(asset_b, name="asset_b")
        if a == b:
            raise AmmError(ErrorKind.SAME_ASSET, f"{a} paired with itself")
        if a < b:
            return cls(a, b)
        return cls(b, a)

    def other(self, asset: AssetId) -> AssetId:
        if asset == self.asset0:
            return self.asset1
        if asset == self.asset1:
            return self.asset0
        raise ValueError(f"Asset {asset} not in pool {self}")

    def __str__(self) -> str:
        return f"{self.asset0}/{self.asset1}"


@dataclass(frozen=True)
class PoolState:
    """
    State of a liquidity pool.

    Attributes:
        key: Canonical asset pair
        reserve0: Reserve held for key.asset0
        reserve1: Reserve held for key.asset1
        total_shares: Sum of all holders' liquidity shares
        created_at: Engine sequence number of the creating operation
    """

    key: PoolKey
    reserve0: Amount
    reserve1: Amount
    total_shares: Amount
    created_at: int = 0

    def __post_init__(self) -> None:
        if self.reserve0 < 0 or self.reserve1 < 0:
            raise ValueError(
                f"Reserves must be non-negative: ({self.reserve0}, {self.reserve1})"
            )
        if self.total_shares < 0:
            raise ValueError(f"Total shares must be non-negative: {self.total_shares}")

    @property
    def asset0(self) -> AssetId:
        return self.key.asset0

    @property
    def asset1(self) -> AssetId:
        return self.key.asset1

    @property
    def is_live(self) -> bool:
        """A pool whose shares were all redeemed is inert but stays addressable."""
        return self.total_shares > 0

    def get_reserve(self, asset: AssetId) -> Amount:
        """
        Get reserve for a specific asset.

        Raises:
            ValueError: If asset is not in this pool
        """
        if asset == self.key.asset0:
            return self.reserve0
        if asset == self.key.asset1:
            return self.reserve1
        raise ValueError(f"Asset {asset} not in pool {self.key}")

    def oriented(self, asset_in: AssetId) -> Tuple[Amount, Amount]:
        """Return (reserve_in, reserve_out) with `asset_in` as the input side."""
        return self.get_reserve(asset_in), self.get_reserve(self.key.other(asset_in))

    def with_reserves_for(self, asset_in: AssetId, reserve_in: Amount, reserve_out: Amount) -> "PoolState":
        """Copy with reserves given in `asset_in` orientation."""
        if asset_in == self.key.asset0:
            return replace(self, reserve0=reserve_in, reserve1=reserve_out)
        if asset_in == self.key.asset1:
            return replace(self, reserve0=reserve_out, reserve1=reserve_in)
        raise ValueError(f"Asset {asset_in} not in pool {self.key}")

    def get_constant_product(self) -> int:
        return self.reserve0 * self.reserve1

    def __repr__(self) -> str:
        return (
            f"PoolState(key={self.key}, "
            f"reserves=({self.reserve0}, {self.reserve1}), "
            f"total_shares={self.total_shares})"
        )


class PoolTable:
    """
    Pool registry storage: canonical PoolKey -> PoolState.

    Pools are never deleted. Records are immutable; updates replace the record.
    """

    def __init__(self) -> None:
        self._pools: Dict[PoolKey, PoolState] = {}

    def get(self, key: PoolKey) -> Optional[PoolState]:
        return self._pools.get(key)

    def __contains__(self, key: PoolKey) -> bool:
        return key in self._pools

    def require(self, key: PoolKey) -> PoolState:
        pool = self._pools.get(key)
        if pool is None:
            raise AmmError(ErrorKind.POOL_NOT_FOUND, str(key))
        return pool

    def insert(self, pool: PoolState) -> None:
        if pool.key in self._pools:
            raise AmmError(ErrorKind.POOL_ALREADY_EXISTS, str(pool.key))
        self._pools[pool.key] = pool

    def put(self, pool: PoolState) -> None:
        if pool.key not in self._pools:
            raise AmmError(ErrorKind.POOL_NOT_FOUND, str(pool.key))
        self._pools[pool.key] = pool

    def keys(self) -> list[PoolKey]:
        return sorted(self._pools)

    def __iter__(self) -> Iterator[PoolState]:
        for key in self.keys():
            yield self._pools[key]

    def __len__(self) -> int:
        return len(self._pools)

    def __repr__(self) -> str:
        return f"PoolTable({len(self._pools)} pools)"
