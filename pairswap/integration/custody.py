"""
Operation-scoped transfer journal.

An operation may need several gateway transfers. Each gateway call is atomic on
its own, so if a later transfer fails the journal reverses the ones that
already went through, leaving balances as they were before the operation.
"""

from __future__ import annotations

import logging
from typing import List, Mapping, Optional, Tuple

from ..errors import AmmError, ErrorKind
from ..state.balances import Amount, AssetId, Identity
from .tokens import TokenTransferGateway

logger = logging.getLogger(__name__)


class CustodyJournal:
    def __init__(
        self,
        tokens: Mapping[AssetId, TokenTransferGateway],
        custody: Identity,
        memo: Optional[str] = None,
    ) -> None:
        self._tokens = tokens
        self._custody = custody
        self._memo = memo
        self._done: List[Tuple[AssetId, Amount, Identity, Identity]] = []

    def _gateway(self, asset: AssetId) -> TokenTransferGateway:
        gateway = self._tokens.get(asset)
        if gateway is None:
            raise AmmError(ErrorKind.TRANSFER_FAILED, f"no gateway for {asset}")
        return gateway

    def _move(self, asset: AssetId, amount: Amount, sender: Identity, recipient: Identity) -> None:
        if amount == 0:
            return
        gateway = self._gateway(asset)
        try:
            ok = gateway.transfer(amount, sender, recipient, self._memo)
        except Exception as exc:
            # Gateway failures are opaque to the core.
            logger.info("gateway for %s raised %s", asset, type(exc).__name__)
            ok = False
        if not ok:
            raise AmmError(
                ErrorKind.TRANSFER_FAILED,
                f"{amount} {asset} from {sender} to {recipient}",
            )
        self._done.append((asset, amount, sender, recipient))

    def pull(self, asset: AssetId, amount: Amount, holder: Identity) -> None:
        """Move `amount` of `asset` from `holder` into custody."""
        self._move(asset, amount, holder, self._custody)

    def push(self, asset: AssetId, amount: Amount, holder: Identity) -> None:
        """Move `amount` of `asset` from custody to `holder`."""
        self._move(asset, amount, self._custody, holder)

    def rollback(self) -> None:
        """
        Reverse completed transfers, newest first.

        A reversal that fails leaves custody out of balance with the pool
        table; it is logged and reported as TRANSFER_FAILED.
        """
        failed: List[str] = []
        while self._done:
            asset, amount, sender, recipient = self._done.pop()
            gateway = self._gateway(asset)
            try:
                ok = gateway.transfer(amount, recipient, sender, self._memo)
            except Exception:
                logger.exception("reversal of %s %s raised", amount, asset)
                ok = False
            if not ok:
                logger.error(
                    "could not reverse transfer of %s %s from %s to %s",
                    amount, asset, sender, recipient,
                )
                failed.append(f"{amount} {asset}")
        if failed:
            raise AmmError(ErrorKind.TRANSFER_FAILED, f"unreversed transfers: {', '.join(failed)}")
