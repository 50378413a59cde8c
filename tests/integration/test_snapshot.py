from __future__ import annotations

import copy
from pathlib import Path

import pytest

from pairswap import AmmConfig, AmmEngine, InMemoryToken
from pairswap.integration.snapshot import (
    AMM_SNAPSHOT_VERSION,
    load_snapshot,
    save_snapshot,
    snapshot_from_state,
    state_from_snapshot,
)


A, B, C = "token-a", "token-b", "token-c"


def _busy_engine() -> AmmEngine:
    tokens = {asset: InMemoryToken(asset, asset.upper()) for asset in (A, B, C)}
    for token in tokens.values():
        token.mint("alice", 10_000_000)
        token.mint("bob", 10_000_000)
    engine = AmmEngine(AmmConfig(owner="owner", allowed_tokens=(A, B, C)), tokens)
    engine.create_pool("alice", A, B, 1_000_000, 2_000_000).unwrap()
    engine.create_pool("bob", C, A, 50_000, 70_000).unwrap()
    engine.add_liquidity("bob", A, B, 10_000, 20_000).unwrap()
    engine.swap("bob", B, A, 5_000).unwrap()
    engine.set_reward_rate("owner", 3).unwrap()
    engine.claim_yield_rewards("bob", B, A).unwrap()
    return engine


def test_snapshot_round_trip_preserves_commitment() -> None:
    engine = _busy_engine()
    snap = snapshot_from_state(engine.state)

    restored = state_from_snapshot(snap.data)
    again = snapshot_from_state(restored)

    assert again.canonical_bytes() == snap.canonical_bytes()
    assert again.commitment_hex() == snap.commitment_hex()
    assert restored.seq == engine.state.seq
    assert restored.rewards.get("bob", A) == 30_000


def test_snapshot_layout() -> None:
    data = snapshot_from_state(_busy_engine().state).data
    assert data["version"] == AMM_SNAPSHOT_VERSION
    assert [(p["asset0"], p["asset1"]) for p in data["pools"]] == [(A, B), (A, C)]
    assert data["governance"]["allowed"] == [A, B, C]
    assert data["governance"]["reward_rate"] == 3


def test_commitment_changes_with_state() -> None:
    engine = _busy_engine()
    before = snapshot_from_state(engine.state).commitment_hex()
    engine.swap("alice", A, B, 1_000).unwrap()
    assert snapshot_from_state(engine.state).commitment_hex() != before


def test_save_and_load(tmp_path: Path) -> None:
    engine = _busy_engine()
    path = tmp_path / "amm.json"

    commitment = save_snapshot(path, engine.state)
    restored = load_snapshot(path)

    assert snapshot_from_state(restored).commitment_hex() == commitment
    resumed = AmmEngine(engine.config, {}, state=restored)
    assert resumed.get_pool(A, B) == engine.get_pool(A, B)
    assert resumed.verify() == []


def test_rejects_share_conservation_break() -> None:
    data = copy.deepcopy(snapshot_from_state(_busy_engine().state).data)
    data["positions"][0]["shares"] += 1
    with pytest.raises(ValueError, match="inv_share_conservation"):
        state_from_snapshot(data)


def test_rejects_non_canonical_pool_order() -> None:
    data = copy.deepcopy(snapshot_from_state(_busy_engine().state).data)
    pool = data["pools"][0]
    pool["asset0"], pool["asset1"] = pool["asset1"], pool["asset0"]
    with pytest.raises(ValueError, match="canonical order"):
        state_from_snapshot(data)


def test_rejects_duplicate_and_zero_positions() -> None:
    data = copy.deepcopy(snapshot_from_state(_busy_engine().state).data)
    dup = copy.deepcopy(data)
    dup["positions"].append(dict(dup["positions"][0]))
    with pytest.raises(ValueError, match="duplicate position"):
        state_from_snapshot(dup)

    zero = copy.deepcopy(data)
    zero["positions"][0]["shares"] = 0
    with pytest.raises(ValueError, match="non-zero"):
        state_from_snapshot(zero)


def test_rejects_unknown_version_and_floats() -> None:
    data = copy.deepcopy(snapshot_from_state(_busy_engine().state).data)
    with pytest.raises(ValueError, match="unsupported"):
        state_from_snapshot({**data, "version": 2})

    floaty = copy.deepcopy(data)
    floaty["pools"][0]["reserve0"] = 1.0
    with pytest.raises(TypeError):
        state_from_snapshot(floaty)
