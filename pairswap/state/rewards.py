"""
Pending yield ledger: (holder, asset) -> amount owed but not yet paid out.
"""

from __future__ import annotations

from typing import Dict, Tuple

from .balances import Amount, AssetId, Identity


class RewardTable:
    """
    Pending rewards are overwritten by each accrual, never accumulated.

    Payout happens outside this package; the table only records what is owed.
    """

    def __init__(self) -> None:
        self._pending: Dict[Tuple[Identity, AssetId], Amount] = {}

    def get(self, holder: Identity, asset: AssetId) -> Amount:
        return self._pending.get((holder, asset), 0)

    def record(self, holder: Identity, asset: AssetId, amount: Amount) -> None:
        """Replace the pending amount for (holder, asset)."""
        if amount < 0:
            raise ValueError(f"Pending reward cannot be negative: {amount}")
        self._pending[(holder, asset)] = amount

    def get_all(self) -> Dict[Tuple[Identity, AssetId], Amount]:
        return dict(self._pending)

    def __repr__(self) -> str:
        return f"RewardTable({len(self._pending)} entries)"
