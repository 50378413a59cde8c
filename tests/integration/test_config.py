from __future__ import annotations

from pathlib import Path

import pytest

from pairswap.integration.config import AmmConfig, config_from_env, config_from_mapping, load_config


def test_load_yaml_config(tmp_path: Path) -> None:
    path = tmp_path / "amm.yaml"
    path.write_text(
        "owner: SP2-OWNER\n"
        "custody: SP2-OWNER.pairswap\n"
        "fee_bps: 25\n"
        "min_reward_shares: 1000\n"
        "reward_rate: 2\n"
        "allowed_tokens: [token-a, token-b]\n",
        encoding="utf-8",
    )

    cfg = load_config(path)

    assert cfg.owner == "SP2-OWNER"
    assert cfg.fee_bps == 25
    assert cfg.allowed_tokens == ("token-a", "token-b")
    gov = cfg.initial_governance()
    assert gov.reward_rate == 2
    assert gov.is_allowed("token-b")


def test_defaults() -> None:
    cfg = config_from_mapping({"owner": "owner"})
    assert cfg.fee_bps == 30
    assert cfg.custody == "pairswap-custody"
    assert cfg.max_reward_rate == 10_000
    assert cfg.allowed_tokens == ()


def test_empty_yaml_requires_owner(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    with pytest.raises(TypeError):
        load_config(path)


def test_unknown_keys_are_rejected() -> None:
    with pytest.raises(ValueError, match="unknown config keys: fee"):
        config_from_mapping({"owner": "owner", "fee": 30})


@pytest.mark.parametrize(
    "data",
    [
        {"owner": ""},
        {"owner": "x", "custody": "x"},
        {"owner": "x", "fee_bps": 10_000},
        {"owner": "x", "reward_rate": 5, "max_reward_rate": 4},
        {"owner": "x", "allowed_tokens": "token-a"},
        {"owner": "x", "min_reward_shares": -1},
    ],
)
def test_invalid_config_is_rejected(data) -> None:
    with pytest.raises(ValueError):
        config_from_mapping(data)


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    base = AmmConfig(owner="owner", fee_bps=30)
    monkeypatch.setenv("PAIRSWAP_OWNER", "ops")
    monkeypatch.setenv("PAIRSWAP_FEE_BPS", "5")
    monkeypatch.setenv("PAIRSWAP_MIN_REWARD_SHARES", "not-a-number")

    cfg = config_from_env(base)

    assert cfg.owner == "ops"
    assert cfg.fee_bps == 5
    assert cfg.min_reward_shares == base.min_reward_shares


def test_env_fee_is_clamped(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PAIRSWAP_FEE_BPS", "123456")
    assert config_from_env(AmmConfig(owner="owner")).fee_bps == 9_999
