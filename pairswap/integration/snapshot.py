"""
AMM state snapshot encoding.

Goals:
- Deterministic JSON serialization for hashing and durable storage.
- Round-trippable into `AmmState`.
- Explicit versioning.

Layout: pool table keyed by canonical pair, position table keyed by
(holder, pair), reward table keyed by (holder, asset), governance singleton.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

from ..core.invariants import check_all
from ..core.math import MAX_AMOUNT
from ..core.state import AmmState
from ..state.canonical import canonical_json_bytes, commit, commit_hex
from ..state.governance import GovernanceState
from ..state.lp import LPTable
from ..state.pools import PoolKey, PoolState, PoolTable
from ..state.rewards import RewardTable


AMM_SNAPSHOT_VERSION = 1


def _require_str(value: Any, *, name: str, max_len: int = 512) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string")
    if not value:
        raise ValueError(f"{name} must be non-empty")
    if len(value) > max_len:
        raise ValueError(f"{name} too large")
    return value


def _require_int(value: Any, *, name: str, bounded: bool = True) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    if bounded and value >= MAX_AMOUNT:
        raise ValueError(f"{name} exceeds bound")
    return int(value)


def _entries(snapshot: Mapping[str, Any], name: str, max_entries: int) -> List[Mapping[str, Any]]:
    raw = snapshot.get(name)
    if raw is None:
        raw = []
    if not isinstance(raw, list):
        raise TypeError(f"snapshot.{name} must be a list")
    if len(raw) > max_entries:
        raise ValueError(f"too many {name} entries: {len(raw)} > {max_entries}")
    for entry in raw:
        if not isinstance(entry, Mapping):
            raise TypeError(f"snapshot.{name} entries must be objects")
    return raw


def _pool_key(entry: Mapping[str, Any], *, name: str) -> PoolKey:
    asset0 = _require_str(entry.get("asset0"), name=f"{name}.asset0")
    asset1 = _require_str(entry.get("asset1"), name=f"{name}.asset1")
    return PoolKey(asset0, asset1)


@dataclass(frozen=True)
class AmmSnapshot:
    """
    Deterministic, versioned snapshot of `AmmState`.

    The commitment is *not* included inside `data` to avoid self-reference.
    """

    version: int
    data: Dict[str, Any]

    def canonical_bytes(self) -> bytes:
        return canonical_json_bytes(self.data)

    def commitment_bytes(self) -> bytes:
        return commit("amm_snapshot", self.version, self.canonical_bytes())

    def commitment_hex(self) -> str:
        return commit_hex("amm_snapshot", self.version, self.canonical_bytes())


def snapshot_from_state(state: AmmState, *, version: int = AMM_SNAPSHOT_VERSION) -> AmmSnapshot:
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("version must be a positive int")

    pools_entries = [
        {
            "asset0": pool.asset0,
            "asset1": pool.asset1,
            "reserve0": int(pool.reserve0),
            "reserve1": int(pool.reserve1),
            "total_shares": int(pool.total_shares),
            "created_at": int(pool.created_at),
        }
        for pool in state.pools
    ]

    position_entries = [
        {"holder": holder, "asset0": key.asset0, "asset1": key.asset1, "shares": int(shares)}
        for (holder, key), shares in state.positions.get_all_balances().items()
    ]
    position_entries.sort(key=lambda e: (e["holder"], e["asset0"], e["asset1"]))

    reward_entries = [
        {"holder": holder, "asset": asset, "amount": int(amount)}
        for (holder, asset), amount in state.rewards.get_all().items()
    ]
    reward_entries.sort(key=lambda e: (e["holder"], e["asset"]))

    gov = state.governance
    data: Dict[str, Any] = {
        "version": int(version),
        "seq": int(state.seq),
        "pools": pools_entries,
        "positions": position_entries,
        "rewards": reward_entries,
        "governance": {
            "owner": gov.owner,
            "reward_rate": int(gov.reward_rate),
            "max_reward_rate": int(gov.max_reward_rate),
            "allowed": sorted(gov.allowed),
        },
    }
    return AmmSnapshot(version=version, data=data)


def state_from_snapshot(
    snapshot: Mapping[str, Any],
    *,
    max_pools: int = 50_000,
    max_positions: int = 200_000,
    max_rewards: int = 200_000,
    max_allowed: int = 10_000,
) -> AmmState:
    """
    Rebuild `AmmState` from snapshot data, failing closed on malformed input
    or on a state that violates any invariant (e.g. share conservation).
    """
    if not isinstance(snapshot, Mapping):
        raise TypeError("snapshot must be a mapping")

    version = snapshot.get("version", AMM_SNAPSHOT_VERSION)
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("snapshot.version must be a positive int")
    if version != AMM_SNAPSHOT_VERSION:
        raise ValueError(f"unsupported snapshot version: {version}")

    gov_obj = snapshot.get("governance")
    if not isinstance(gov_obj, Mapping):
        raise ValueError("snapshot.governance is required")
    allowed_raw = gov_obj.get("allowed", [])
    if not isinstance(allowed_raw, list) or len(allowed_raw) > max_allowed:
        raise ValueError("governance.allowed must be a bounded list")
    governance = GovernanceState(
        owner=_require_str(gov_obj.get("owner"), name="governance.owner"),
        reward_rate=_require_int(gov_obj.get("reward_rate", 0), name="governance.reward_rate"),
        max_reward_rate=_require_int(gov_obj.get("max_reward_rate", 0), name="governance.max_reward_rate"),
        allowed=frozenset(_require_str(a, name="governance.allowed[]", max_len=256) for a in allowed_raw),
    )

    pools = PoolTable()
    for entry in _entries(snapshot, "pools", max_pools):
        key = _pool_key(entry, name="pool")
        if key in pools:
            raise ValueError(f"duplicate pool entry: {key}")
        pools.insert(
            PoolState(
                key=key,
                reserve0=_require_int(entry.get("reserve0", 0), name="pool.reserve0"),
                reserve1=_require_int(entry.get("reserve1", 0), name="pool.reserve1"),
                total_shares=_require_int(entry.get("total_shares", 0), name="pool.total_shares"),
                created_at=_require_int(entry.get("created_at", 0), name="pool.created_at", bounded=False),
            )
        )

    positions = LPTable()
    for entry in _entries(snapshot, "positions", max_positions):
        holder = _require_str(entry.get("holder"), name="position.holder")
        key = _pool_key(entry, name="position")
        shares = _require_int(entry.get("shares"), name="position.shares")
        if positions.has_position(holder, key):
            raise ValueError(f"duplicate position entry: ({holder}, {key})")
        if shares == 0:
            raise ValueError("position entries must be non-zero")
        positions.set(holder, key, shares)

    rewards = RewardTable()
    seen_rewards: set[tuple[str, str]] = set()
    for entry in _entries(snapshot, "rewards", max_rewards):
        holder = _require_str(entry.get("holder"), name="reward.holder")
        asset = _require_str(entry.get("asset"), name="reward.asset", max_len=256)
        if (holder, asset) in seen_rewards:
            raise ValueError(f"duplicate reward entry: ({holder}, {asset})")
        seen_rewards.add((holder, asset))
        rewards.record(holder, asset, _require_int(entry.get("amount"), name="reward.amount"))

    state = AmmState(
        governance=governance,
        pools=pools,
        positions=positions,
        rewards=rewards,
        seq=_require_int(snapshot.get("seq", 0), name="seq", bounded=False),
    )
    violations = check_all(state)
    if violations:
        raise ValueError(f"snapshot violates invariants: {', '.join(violations)}")
    return state


def save_snapshot(path: Union[str, Path], state: AmmState) -> str:
    """Write the snapshot as canonical JSON; return its commitment."""
    snap = snapshot_from_state(state)
    Path(path).write_bytes(snap.canonical_bytes())
    return snap.commitment_hex()


def load_snapshot(path: Union[str, Path]) -> AmmState:
    obj = json.loads(Path(path).read_text(encoding="utf-8"))
    return state_from_snapshot(obj)
