"""
Liquidity share tracking for pairswap pools.

Shares are scoped per canonical pool key and are tracked separately from token
balances. Only the engine mutates this table, in the same commit as the pool
record it mirrors.
"""

from __future__ import annotations

from typing import Dict, Tuple

from ..errors import AmmError, ErrorKind
from .balances import Amount, Identity
from .pools import PoolKey


class LPTable:
    """
    Share table mapping (holder, pool_key) -> shares.

    Notes:
    - Shares are always non-negative.
    - Zero balances are omitted to keep the table sparse; a holder at zero has
      no position.
    """

    def __init__(self) -> None:
        self._shares: Dict[Tuple[Identity, PoolKey], Amount] = {}

    def share_balance(self, holder: Identity, key: PoolKey) -> Amount:
        """Shares held by `holder` in `key`. Returns 0 if there is no position."""
        return self._shares.get((holder, key), 0)

    def has_position(self, holder: Identity, key: PoolKey) -> bool:
        return (holder, key) in self._shares

    def set(self, holder: Identity, key: PoolKey, amount: Amount) -> None:
        if amount < 0:
            raise ValueError(f"Share balance cannot be negative: {amount}")
        if amount == 0:
            self._shares.pop((holder, key), None)
        else:
            self._shares[(holder, key)] = amount

    def credit(self, holder: Identity, key: PoolKey, amount: Amount) -> Amount:
        """Add `amount` shares to a position and return the new balance."""
        if amount < 0:
            raise ValueError(f"Credit must be non-negative: {amount}")
        new_balance = self.share_balance(holder, key) + amount
        self.set(holder, key, new_balance)
        return new_balance

    def debit(self, holder: Identity, key: PoolKey, amount: Amount) -> Amount:
        """
        Remove `amount` shares from a position and return the new balance.

        Raises:
            AmmError(INSUFFICIENT_SHARES): if amount exceeds the held balance
        """
        if amount < 0:
            raise ValueError(f"Debit must be non-negative: {amount}")
        current = self.share_balance(holder, key)
        if amount > current:
            raise AmmError(
                ErrorKind.INSUFFICIENT_SHARES,
                f"{holder} holds {current} shares of {key}, cannot remove {amount}",
            )
        self.set(holder, key, current - amount)
        return current - amount

    def total_for_pool(self, key: PoolKey) -> Amount:
        return sum(amount for (_, k), amount in self._shares.items() if k == key)

    def get_all_balances(self) -> Dict[Tuple[Identity, PoolKey], Amount]:
        return dict(self._shares)

    def __repr__(self) -> str:
        return f"LPTable({len(self._shares)} entries)"
