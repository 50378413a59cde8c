"""Rejection kinds and the exception used to carry them.

Guards inside the core raise ``AmmError``; the engine catches it at the
operation boundary and returns an ``OpResult`` instead (see
``pairswap.core.types``). Callers that prefer exceptions use
``OpResult.unwrap()``.
"""

from __future__ import annotations

from enum import Enum, unique
from typing import Optional


@unique
class ErrorKind(Enum):
    INVALID_AMOUNT = "InvalidAmount"
    INVALID_PAIR = "InvalidPair"
    SAME_ASSET = "SameAsset"
    ASSET_NOT_ALLOWED = "AssetNotAllowed"
    POOL_NOT_FOUND = "PoolNotFound"
    POOL_ALREADY_EXISTS = "PoolAlreadyExists"
    UNAUTHORIZED = "Unauthorized"
    INSUFFICIENT_SHARES = "InsufficientShares"
    INSUFFICIENT_FUNDS = "InsufficientFunds"
    TRANSFER_FAILED = "TransferFailed"
    MAX_RATE_EXCEEDED = "MaxRateExceeded"
    SLIPPAGE_EXCEEDED = "SlippageExceeded"
    INVARIANT_VIOLATION = "InvariantViolation"

    @property
    def code(self) -> int:
        return ERROR_CODES[self]


# Stable numeric codes; never renumber an existing kind.
ERROR_CODES: dict[ErrorKind, int] = {
    ErrorKind.INVALID_AMOUNT: 100,
    ErrorKind.INVALID_PAIR: 101,
    ErrorKind.SAME_ASSET: 102,
    ErrorKind.ASSET_NOT_ALLOWED: 103,
    ErrorKind.POOL_NOT_FOUND: 104,
    ErrorKind.POOL_ALREADY_EXISTS: 105,
    ErrorKind.UNAUTHORIZED: 106,
    ErrorKind.INSUFFICIENT_SHARES: 107,
    ErrorKind.INSUFFICIENT_FUNDS: 108,
    ErrorKind.TRANSFER_FAILED: 109,
    ErrorKind.MAX_RATE_EXCEEDED: 110,
    ErrorKind.SLIPPAGE_EXCEEDED: 111,
    ErrorKind.INVARIANT_VIOLATION: 112,
}


class AmmError(Exception):
    """Raised when an operation is rejected. Carries the rejection kind."""

    def __init__(self, kind: ErrorKind, detail: Optional[str] = None) -> None:
        self.kind = kind
        self.detail = detail
        message = kind.value if not detail else f"{kind.value}: {detail}"
        super().__init__(message)

    @property
    def code(self) -> int:
        return self.kind.code


class InvariantError(AmmError):
    """Raised when a planned post-state violates one or more invariants."""

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(ErrorKind.INVARIANT_VIOLATION, ", ".join(violations))
