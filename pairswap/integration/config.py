"""
Engine configuration.

`AmmConfig` can be built directly, loaded from a YAML mapping, and adjusted
from environment variables (deployment overrides).

Example YAML:

    owner: SP2-OWNER
    custody: SP2-OWNER.pairswap
    fee_bps: 30
    min_reward_shares: 1000
    reward_rate: 2
    max_reward_rate: 10000
    allowed_tokens: [token-a, token-b]
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Tuple, Union

import yaml

from ..core.math import DEFAULT_FEE_BPS, MAX_AMOUNT, require_fee_bps
from ..state.governance import GovernanceState


ENV_PREFIX = "PAIRSWAP_"


@dataclass(frozen=True)
class AmmConfig:
    owner: str
    # Identity holding pooled reserves at the gateway.
    custody: str = "pairswap-custody"

    # Swap fee in basis points of FEE_DENOM (10_000). 30 => 0.3%.
    fee_bps: int = DEFAULT_FEE_BPS

    # Reward accrual: claims below `min_reward_shares` are rejected.
    min_reward_shares: int = 1
    reward_rate: int = 0
    max_reward_rate: int = 10_000

    # Initial allowlist; governance may extend it later.
    allowed_tokens: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for name in ("owner", "custody"):
            v = getattr(self, name)
            if not isinstance(v, str) or not v.strip():
                raise ValueError(f"{name} must be a non-empty string")
        if self.owner == self.custody:
            raise ValueError("custody identity must differ from owner")
        require_fee_bps(self.fee_bps)
        for name in ("min_reward_shares", "reward_rate", "max_reward_rate"):
            v = getattr(self, name)
            if not isinstance(v, int) or isinstance(v, bool) or not (0 <= v < MAX_AMOUNT):
                raise ValueError(f"{name} must be an int in [0, 2**64): {v!r}")
        if self.reward_rate > self.max_reward_rate:
            raise ValueError("reward_rate must not exceed max_reward_rate")
        if isinstance(self.allowed_tokens, str):
            raise ValueError("allowed_tokens must be a sequence of asset ids")
        tokens = tuple(self.allowed_tokens)
        for t in tokens:
            if not isinstance(t, str) or not t.strip():
                raise ValueError(f"allowed token must be a non-empty string: {t!r}")
        object.__setattr__(self, "allowed_tokens", tokens)

    def initial_governance(self) -> GovernanceState:
        return GovernanceState(
            owner=self.owner,
            reward_rate=self.reward_rate,
            max_reward_rate=self.max_reward_rate,
            allowed=frozenset(self.allowed_tokens),
        )


def config_from_mapping(data: Mapping[str, Any]) -> AmmConfig:
    if not isinstance(data, Mapping):
        raise TypeError("config must be a mapping")
    known = {f.name for f in fields(AmmConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"unknown config keys: {', '.join(map(str, unknown))}")
    kwargs = dict(data)
    if "allowed_tokens" in kwargs:
        raw = kwargs["allowed_tokens"]
        if raw is None:
            raw = ()
        if isinstance(raw, str) or not isinstance(raw, (list, tuple)):
            raise ValueError("allowed_tokens must be a list")
        kwargs["allowed_tokens"] = tuple(raw)
    return AmmConfig(**kwargs)


def load_config(path: Union[str, Path]) -> AmmConfig:
    """Load an `AmmConfig` from a YAML file."""
    obj = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if obj is None:
        obj = {}
    if not isinstance(obj, Mapping):
        raise TypeError("config YAML must be a mapping")
    return config_from_mapping(obj)


def _env_int(name: str, default: int, *, lo: int, hi: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return int(default)
    try:
        v = int(raw.strip())
    except ValueError:
        return int(default)
    if v < lo:
        return int(lo)
    if v > hi:
        return int(hi)
    return int(v)


def _env_str(name: str, default: str) -> str:
    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def config_from_env(base: AmmConfig) -> AmmConfig:
    """Apply PAIRSWAP_* environment overrides on top of `base`."""
    return replace(
        base,
        owner=_env_str(ENV_PREFIX + "OWNER", base.owner),
        custody=_env_str(ENV_PREFIX + "CUSTODY", base.custody),
        fee_bps=_env_int(ENV_PREFIX + "FEE_BPS", base.fee_bps, lo=0, hi=9_999),
        min_reward_shares=_env_int(
            ENV_PREFIX + "MIN_REWARD_SHARES", base.min_reward_shares, lo=0, hi=MAX_AMOUNT - 1
        ),
        max_reward_rate=_env_int(
            ENV_PREFIX + "MAX_REWARD_RATE", base.max_reward_rate, lo=base.reward_rate, hi=MAX_AMOUNT - 1
        ),
    )
