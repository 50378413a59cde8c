"""
Engine shell: gateways, configuration, persistence and the public operations.
"""

from .config import AmmConfig, config_from_env, config_from_mapping, load_config
from .custody import CustodyJournal
from .engine import AmmEngine
from .serialized import SerializedAmm
from .snapshot import AmmSnapshot, load_snapshot, save_snapshot, snapshot_from_state, state_from_snapshot
from .tokens import InMemoryToken, TokenTransferGateway, TransferRecord

__all__ = [
    "AmmConfig",
    "config_from_env",
    "config_from_mapping",
    "load_config",
    "CustodyJournal",
    "AmmEngine",
    "SerializedAmm",
    "AmmSnapshot",
    "load_snapshot",
    "save_snapshot",
    "snapshot_from_state",
    "state_from_snapshot",
    "InMemoryToken",
    "TokenTransferGateway",
    "TransferRecord",
]
