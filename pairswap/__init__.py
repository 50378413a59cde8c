"""pairswap: constant-product AMM core for two-asset liquidity pools.

Public API:
- `AmmEngine(config, tokens)` with create_pool / add_liquidity /
  remove_liquidity / swap / claim_yield_rewards and the owner-gated
  governance setters; every operation returns an `OpResult`.
- `SerializedAmm(engine)` for multi-threaded hosts.
- `snapshot_from_state` / `state_from_snapshot` for persistence.
"""

from .core.types import Effect, Event, OpResult, SwapQuote
from .errors import AmmError, ErrorKind, InvariantError
from .integration import (
    AmmConfig,
    AmmEngine,
    InMemoryToken,
    SerializedAmm,
    TokenTransferGateway,
    load_config,
    snapshot_from_state,
    state_from_snapshot,
)
from .state.pools import PoolKey, PoolState

__version__ = "0.1.0"

__all__ = [
    "AmmConfig",
    "AmmEngine",
    "AmmError",
    "Effect",
    "ErrorKind",
    "Event",
    "InMemoryToken",
    "InvariantError",
    "OpResult",
    "PoolKey",
    "PoolState",
    "SerializedAmm",
    "SwapQuote",
    "TokenTransferGateway",
    "load_config",
    "snapshot_from_state",
    "state_from_snapshot",
]
