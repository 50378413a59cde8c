"""
Holder balances for a single asset, as kept by the in-memory token gateway.
"""

from typing import Dict


# Type aliases
Identity = str  # holder or custody principal
AssetId = str  # asset identity (contract principal, mint address, ticker...)
Amount = int  # non-negative; the core bounds it by MAX_AMOUNT


class BalanceTable:
    """identity -> amount. Entries that reach zero are dropped."""

    def __init__(self):
        self._balances: Dict[Identity, Amount] = {}

    def get(self, identity: Identity) -> Amount:
        return self._balances.get(identity, 0)

    def credit(self, identity: Identity, amount: Amount) -> None:
        if amount < 0:
            raise ValueError(f"credit must be non-negative: {amount}")
        if amount:
            self._balances[identity] = self.get(identity) + amount

    def debit(self, identity: Identity, amount: Amount) -> None:
        """
        Raises:
            ValueError: negative amount, or more than `identity` holds
        """
        if amount < 0:
            raise ValueError(f"debit must be non-negative: {amount}")
        held = self.get(identity)
        if amount > held:
            raise ValueError(f"{identity} holds {held}, cannot debit {amount}")
        if amount == held:
            self._balances.pop(identity, None)
        else:
            self._balances[identity] = held - amount

    def move(self, sender: Identity, recipient: Identity, amount: Amount) -> None:
        self.debit(sender, amount)
        self.credit(recipient, amount)

    def total(self) -> Amount:
        return sum(self._balances.values())

    def __len__(self) -> int:
        return len(self._balances)

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} holders)"
