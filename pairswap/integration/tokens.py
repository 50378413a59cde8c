"""
Token transfer gateway contract and an in-memory implementation.

The core consumes one gateway per asset. A gateway moves a quantity between two
identities and reports success or failure; it never partially succeeds.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol, runtime_checkable

from ..state.balances import Amount, BalanceTable, Identity


@runtime_checkable
class TokenTransferGateway(Protocol):
    name: str
    symbol: str
    decimals: int
    token_uri: Optional[str]

    def transfer(
        self,
        amount: Amount,
        sender: Identity,
        recipient: Identity,
        memo: Optional[str] = None,
    ) -> bool:
        ...

    def balance_of(self, identity: Identity) -> Amount:
        ...

    def total_supply(self) -> Amount:
        ...


@dataclass(frozen=True)
class TransferRecord:
    amount: Amount
    sender: Identity
    recipient: Identity
    memo: Optional[str]
    ok: bool


class InMemoryToken:
    """
    Fungible token over a `BalanceTable`.

    `halted` makes every transfer fail, which lets callers exercise the
    failure/rollback path without a real chain. Every attempt, successful or
    not, is appended to `transfers`.
    """

    def __init__(
        self,
        name: str,
        symbol: str,
        decimals: int = 6,
        token_uri: Optional[str] = None,
    ) -> None:
        if not isinstance(decimals, int) or isinstance(decimals, bool) or not (0 <= decimals <= 38):
            raise ValueError(f"decimals must be in [0, 38]: {decimals!r}")
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self.token_uri = token_uri
        self.halted = False
        self.transfers: List[TransferRecord] = []
        self._balances = BalanceTable()

    def mint(self, identity: Identity, amount: Amount) -> None:
        if amount <= 0:
            raise ValueError(f"mint amount must be positive: {amount}")
        self._balances.credit(identity, amount)

    def transfer(
        self,
        amount: Amount,
        sender: Identity,
        recipient: Identity,
        memo: Optional[str] = None,
    ) -> bool:
        ok = (
            not self.halted
            and isinstance(amount, int)
            and amount > 0
            and sender != recipient
            and self._balances.get(sender) >= amount
        )
        if ok:
            self._balances.move(sender, recipient, amount)
        self.transfers.append(TransferRecord(amount, sender, recipient, memo, ok))
        return ok

    def balance_of(self, identity: Identity) -> Amount:
        return self._balances.get(identity)

    def total_supply(self) -> Amount:
        return self._balances.total()

    def __repr__(self) -> str:
        return f"InMemoryToken({self.symbol}, supply={self._balances.total()})"
