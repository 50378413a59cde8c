"""
Thread-safe facade over `AmmEngine`.

Operations on the same canonical pool key are serialized by one lock per key.
Governance operations take the governance lock, and pool operations that read
governance (create_pool reads the allowlist, claims read the reward rate) take
it too, after the pool lock.

Pool creation also takes the registry lock while it inserts, so two creators of
different pairs never race on the shared pool table.

Lock order is always pool -> governance -> registry. The engine hands out
sequence numbers under its own lock, so every commit gets a distinct `seq` even
when operations on different pools run in parallel.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Tuple

from ..core.types import OpResult
from ..errors import AmmError
from ..state.balances import Amount, AssetId, Identity
from ..state.pools import PoolKey
from .engine import AmmEngine


class SerializedAmm:
    def __init__(self, engine: AmmEngine) -> None:
        self._engine = engine
        self._registry_lock = threading.Lock()
        self._governance_lock = threading.RLock()
        self._pool_locks: Dict[PoolKey, threading.RLock] = {}

    @property
    def engine(self) -> AmmEngine:
        return self._engine

    def _lock_for(self, key: PoolKey) -> threading.RLock:
        with self._registry_lock:
            lock = self._pool_locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._pool_locks[key] = lock
            return lock

    @contextmanager
    def _pool(self, asset_a: AssetId, asset_b: AssetId, *, governance: bool = False) -> Iterator[None]:
        try:
            key = PoolKey.of(asset_a, asset_b)
        except AmmError:
            # Malformed pair: let the engine produce the rejection result.
            with self._governance_lock:
                yield
            return
        with self._lock_for(key):
            if governance:
                with self._governance_lock:
                    yield
            else:
                yield

    def create_pool(self, caller: Identity, asset_a: AssetId, asset_b: AssetId, amount_a: Amount, amount_b: Amount) -> OpResult:
        with self._pool(asset_a, asset_b, governance=True):
            with self._registry_lock:
                return self._engine.create_pool(caller, asset_a, asset_b, amount_a, amount_b)

    def add_liquidity(self, caller: Identity, asset_a: AssetId, asset_b: AssetId, amount_a: Amount, amount_b: Amount) -> OpResult:
        with self._pool(asset_a, asset_b):
            return self._engine.add_liquidity(caller, asset_a, asset_b, amount_a, amount_b)

    def remove_liquidity(self, caller: Identity, asset_a: AssetId, asset_b: AssetId, shares: Amount, **kwargs) -> OpResult:
        with self._pool(asset_a, asset_b):
            return self._engine.remove_liquidity(caller, asset_a, asset_b, shares, **kwargs)

    def swap(self, caller: Identity, asset_in: AssetId, asset_out: AssetId, amount_in: Amount, **kwargs) -> OpResult:
        with self._pool(asset_in, asset_out):
            return self._engine.swap(caller, asset_in, asset_out, amount_in, **kwargs)

    def claim_yield_rewards(self, caller: Identity, asset_a: AssetId, asset_b: AssetId) -> OpResult:
        with self._pool(asset_a, asset_b, governance=True):
            return self._engine.claim_yield_rewards(caller, asset_a, asset_b)

    def add_allowed_token(self, caller: Identity, asset: AssetId) -> OpResult:
        with self._governance_lock:
            return self._engine.add_allowed_token(caller, asset)

    def set_reward_rate(self, caller: Identity, rate: int) -> OpResult:
        with self._governance_lock:
            return self._engine.set_reward_rate(caller, rate)

    def transfer_ownership(self, caller: Identity, new_owner: Identity) -> OpResult:
        with self._governance_lock:
            return self._engine.transfer_ownership(caller, new_owner)

    def pool_lock_count(self) -> int:
        with self._registry_lock:
            return len(self._pool_locks)

    def known_keys(self) -> Tuple[PoolKey, ...]:
        with self._registry_lock:
            return tuple(sorted(self._pool_locks))
