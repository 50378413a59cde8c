"""
AMM execution engine.

This is the imperative shell around the functional core:
- Validates caller input and consults the allowlist.
- Plans the post-state with the pure planners in `pairswap.core`.
- Checks pool invariants on the planned records.
- Moves tokens through the per-asset gateways (compensating on failure).
- Commits the planned records and returns an `OpResult`.

Every public operation either commits fully or leaves state untouched, and
each commit takes the next sequence number atomically. Table access is
single-writer; wrap the engine in `SerializedAmm` for multi-threaded hosts.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from ..core.cpmm import swap_exact_in
from ..core.guards import (
    require_allowed,
    require_identity,
    require_min_out,
    require_new_asset,
    require_owner,
    require_reward_rate,
)
from ..core.invariants import check_all, check_pool, swap_product_non_decreasing
from ..core.liquidity import plan_add_liquidity, plan_create_pool, plan_remove_liquidity
from ..core.math import require_amount
from ..core.rewards import compute_reward
from ..core.state import AmmState
from ..core.types import Effect, Event, OpResult, SwapQuote
from ..errors import AmmError, ErrorKind, InvariantError
from ..state.balances import Amount, AssetId, Identity
from ..state.pools import PoolKey, PoolState
from .config import AmmConfig
from .custody import CustodyJournal
from .tokens import TokenTransferGateway

logger = logging.getLogger(__name__)


def _orient(key: PoolKey, asset_a: AssetId, amount_a: Amount, amount_b: Amount) -> Tuple[Amount, Amount]:
    """Map caller-ordered amounts onto (asset0, asset1)."""
    if asset_a == key.asset0:
        return amount_a, amount_b
    return amount_b, amount_a


def _require_valid(pool: PoolState) -> None:
    violations = check_pool(pool)
    if violations:
        raise InvariantError(violations)


class AmmEngine:
    def __init__(
        self,
        config: AmmConfig,
        tokens: Mapping[AssetId, TokenTransferGateway],
        state: Optional[AmmState] = None,
    ) -> None:
        self._config = config
        self._tokens: Dict[AssetId, TokenTransferGateway] = dict(tokens)
        self._state = state if state is not None else AmmState(governance=config.initial_governance())
        self._seq_lock = threading.Lock()

    @property
    def config(self) -> AmmConfig:
        return self._config

    @property
    def state(self) -> AmmState:
        return self._state

    def register_token(self, asset: AssetId, gateway: TokenTransferGateway) -> None:
        """Attach the gateway that moves `asset`. Host wiring, not a governed operation."""
        self._tokens[require_new_asset(asset)] = gateway

    # ------------------------------------------------------------------
    # Operation boundary
    # ------------------------------------------------------------------

    def _run(self, op: str, fn: Callable[..., Effect], *args, **kwargs) -> OpResult:
        try:
            effect = fn(*args, **kwargs)
        except AmmError as exc:
            logger.info("%s rejected: %s", op, exc)
            return OpResult.failure(exc)
        logger.debug("%s committed: seq=%d event=%s", op, effect.seq, effect.event.value)
        return OpResult.success(effect)

    def _caller(self, caller: object) -> Identity:
        ident = require_identity(caller)
        if ident == self._config.custody:
            raise AmmError(ErrorKind.UNAUTHORIZED, "custody identity cannot act as caller")
        return ident

    def _journal(self, op: str) -> CustodyJournal:
        return CustodyJournal(self._tokens, self._config.custody, memo=f"pairswap:{op}")

    def _transfer(self, op: str, moves: List[Tuple[str, AssetId, Amount, Identity]]) -> None:
        """Run ("pull"|"push", asset, amount, holder) moves as one unit."""
        journal = self._journal(op)
        try:
            for direction, asset, amount, holder in moves:
                if direction == "pull":
                    journal.pull(asset, amount, holder)
                else:
                    journal.push(asset, amount, holder)
        except AmmError:
            journal.rollback()
            raise

    def _advance_seq(self) -> int:
        """Claim the next sequence number. Called only once a commit can no longer fail."""
        with self._seq_lock:
            self._state.seq += 1
            return self._state.seq

    # ------------------------------------------------------------------
    # Pool registry
    # ------------------------------------------------------------------

    def create_pool(
        self,
        caller: Identity,
        asset_a: AssetId,
        asset_b: AssetId,
        amount_a: Amount,
        amount_b: Amount,
    ) -> OpResult:
        return self._run("create_pool", self._create_pool, caller, asset_a, asset_b, amount_a, amount_b)

    def _create_pool(self, caller, asset_a, asset_b, amount_a, amount_b) -> Effect:
        caller = self._caller(caller)
        key = PoolKey.of(asset_a, asset_b)
        gov = self._state.governance
        require_allowed(gov, key.asset0)
        require_allowed(gov, key.asset1)
        require_amount(amount_a, name="amount_a")
        require_amount(amount_b, name="amount_b")
        if key in self._state.pools:
            raise AmmError(ErrorKind.POOL_ALREADY_EXISTS, str(key))

        amount0, amount1 = _orient(key, asset_a, amount_a, amount_b)
        pool = plan_create_pool(key, amount0, amount1)
        _require_valid(pool)

        self._transfer("create_pool", [
            ("pull", asset_a, amount_a, caller),
            ("pull", asset_b, amount_b, caller),
        ])

        seq = self._advance_seq()
        pool = replace(pool, created_at=seq)
        self._state.pools.insert(pool)
        shares_after = self._state.positions.credit(caller, key, pool.total_shares)
        return Effect(
            event=Event.POOL_CREATED,
            actor=caller,
            seq=seq,
            key=key,
            amount_a=amount_a,
            amount_b=amount_b,
            shares=pool.total_shares,
            shares_after=shares_after,
            reserve0_after=pool.reserve0,
            reserve1_after=pool.reserve1,
            total_shares_after=pool.total_shares,
        )

    def add_liquidity(
        self,
        caller: Identity,
        asset_a: AssetId,
        asset_b: AssetId,
        amount_a: Amount,
        amount_b: Amount,
    ) -> OpResult:
        return self._run("add_liquidity", self._add_liquidity, caller, asset_a, asset_b, amount_a, amount_b)

    def _add_liquidity(self, caller, asset_a, asset_b, amount_a, amount_b) -> Effect:
        caller = self._caller(caller)
        key = PoolKey.of(asset_a, asset_b)
        pool = self._state.pools.require(key)
        require_amount(amount_a, name="amount_a")
        require_amount(amount_b, name="amount_b")

        amount0, amount1 = _orient(key, asset_a, amount_a, amount_b)
        plan = plan_add_liquidity(pool, amount0, amount1)
        _require_valid(plan.pool_after)

        self._transfer("add_liquidity", [
            ("pull", asset_a, amount_a, caller),
            ("pull", asset_b, amount_b, caller),
        ])

        seq = self._advance_seq()
        self._state.pools.put(plan.pool_after)
        shares_after = self._state.positions.credit(caller, key, plan.shares_minted)
        return Effect(
            event=Event.LIQUIDITY_ADDED,
            actor=caller,
            seq=seq,
            key=key,
            amount_a=amount_a,
            amount_b=amount_b,
            shares=plan.shares_minted,
            shares_after=shares_after,
            reserve0_after=plan.pool_after.reserve0,
            reserve1_after=plan.pool_after.reserve1,
            total_shares_after=plan.pool_after.total_shares,
        )

    def remove_liquidity(
        self,
        caller: Identity,
        asset_a: AssetId,
        asset_b: AssetId,
        shares: Amount,
        *,
        min_amount_a: Amount = 0,
        min_amount_b: Amount = 0,
    ) -> OpResult:
        return self._run(
            "remove_liquidity",
            self._remove_liquidity,
            caller, asset_a, asset_b, shares, min_amount_a, min_amount_b,
        )

    def _remove_liquidity(self, caller, asset_a, asset_b, shares, min_amount_a, min_amount_b) -> Effect:
        caller = self._caller(caller)
        key = PoolKey.of(asset_a, asset_b)
        pool = self._state.pools.require(key)
        require_amount(shares, name="shares")
        held = self._state.positions.share_balance(caller, key)
        if held == 0:
            raise AmmError(ErrorKind.UNAUTHORIZED, f"{caller} has no position in {key}")
        if shares > held:
            raise AmmError(
                ErrorKind.INSUFFICIENT_SHARES,
                f"{caller} holds {held} shares of {key}, cannot remove {shares}",
            )

        plan = plan_remove_liquidity(pool, shares)
        out_a, out_b = _orient(key, asset_a, plan.amount0, plan.amount1)
        require_min_out(out_a, min_amount_a, name="min_amount_a")
        require_min_out(out_b, min_amount_b, name="min_amount_b")
        _require_valid(plan.pool_after)

        self._transfer("remove_liquidity", [
            ("push", asset_a, out_a, caller),
            ("push", asset_b, out_b, caller),
        ])

        seq = self._advance_seq()
        self._state.pools.put(plan.pool_after)
        shares_after = self._state.positions.debit(caller, key, shares)
        return Effect(
            event=Event.LIQUIDITY_REMOVED,
            actor=caller,
            seq=seq,
            key=key,
            amount_a=out_a,
            amount_b=out_b,
            shares=shares,
            shares_after=shares_after,
            reserve0_after=plan.pool_after.reserve0,
            reserve1_after=plan.pool_after.reserve1,
            total_shares_after=plan.pool_after.total_shares,
        )

    # ------------------------------------------------------------------
    # Swap engine
    # ------------------------------------------------------------------

    def _quote(self, asset_in, asset_out, amount_in) -> Tuple[PoolState, PoolState, SwapQuote]:
        key = PoolKey.of(asset_in, asset_out)
        pool = self._state.pools.require(key)
        require_amount(amount_in, name="amount_in")
        reserve_in, reserve_out = pool.oriented(asset_in)
        res = swap_exact_in(reserve_in, reserve_out, amount_in, self._config.fee_bps)
        pool_after = pool.with_reserves_for(asset_in, res.new_reserve_in, res.new_reserve_out)
        quote = SwapQuote(
            key=key,
            asset_in=asset_in,
            asset_out=asset_out,
            amount_in=amount_in,
            amount_in_after_fee=res.amount_in_after_fee,
            fee=res.fee,
            amount_out=res.amount_out,
            reserve_in_after=res.new_reserve_in,
            reserve_out_after=res.new_reserve_out,
        )
        return pool, pool_after, quote

    def quote_swap(self, asset_in: AssetId, asset_out: AssetId, amount_in: Amount) -> SwapQuote:
        """Price a swap without changing state. Raises `AmmError` on rejection."""
        _, _, quote = self._quote(asset_in, asset_out, amount_in)
        return quote

    def swap(
        self,
        caller: Identity,
        asset_in: AssetId,
        asset_out: AssetId,
        amount_in: Amount,
        *,
        min_amount_out: Amount = 0,
    ) -> OpResult:
        return self._run("swap", self._swap, caller, asset_in, asset_out, amount_in, min_amount_out)

    def _swap(self, caller, asset_in, asset_out, amount_in, min_amount_out) -> Effect:
        caller = self._caller(caller)
        pool, pool_after, quote = self._quote(asset_in, asset_out, amount_in)
        require_min_out(quote.amount_out, min_amount_out, name="min_amount_out")
        _require_valid(pool_after)
        if not swap_product_non_decreasing(pool, pool_after):
            raise InvariantError(["inv_swap_product_non_decreasing"])

        # Input first; output only once custody holds the input.
        self._transfer("swap", [
            ("pull", asset_in, amount_in, caller),
            ("push", asset_out, quote.amount_out, caller),
        ])

        seq = self._advance_seq()
        self._state.pools.put(pool_after)
        return Effect(
            event=Event.SWAPPED,
            actor=caller,
            seq=seq,
            key=quote.key,
            asset=asset_in,
            amount_in=amount_in,
            amount_out=quote.amount_out,
            fee=quote.fee,
            reserve0_after=pool_after.reserve0,
            reserve1_after=pool_after.reserve1,
            total_shares_after=pool_after.total_shares,
        )

    # ------------------------------------------------------------------
    # Reward accrual
    # ------------------------------------------------------------------

    def claim_yield_rewards(self, caller: Identity, asset_a: AssetId, asset_b: AssetId) -> OpResult:
        return self._run("claim_yield_rewards", self._claim, caller, asset_a, asset_b)

    def _claim(self, caller, asset_a, asset_b) -> Effect:
        caller = self._caller(caller)
        key = PoolKey.of(asset_a, asset_b)
        # A pair without a pool holds no positions, so it falls through to Unauthorized.
        shares = self._state.positions.share_balance(caller, key)
        rate = self._state.governance.reward_rate
        reward = compute_reward(shares, rate, min_shares=self._config.min_reward_shares)

        seq = self._advance_seq()
        # Primary asset is the canonical asset0, whatever order the caller used.
        self._state.rewards.record(caller, key.asset0, reward)
        return Effect(
            event=Event.REWARD_CLAIMED,
            actor=caller,
            seq=seq,
            key=key,
            asset=key.asset0,
            shares_after=shares,
            reward=reward,
            rate=rate,
        )

    # ------------------------------------------------------------------
    # Governance
    # ------------------------------------------------------------------

    def add_allowed_token(self, caller: Identity, asset: AssetId) -> OpResult:
        return self._run("add_allowed_token", self._add_allowed_token, caller, asset)

    def _add_allowed_token(self, caller, asset) -> Effect:
        caller = require_identity(caller)
        require_owner(self._state.governance, caller)
        asset = require_new_asset(asset)
        seq = self._advance_seq()
        self._state.governance = self._state.governance.with_allowed(asset)
        return Effect(event=Event.TOKEN_ALLOWED, actor=caller, seq=seq, asset=asset)

    def set_reward_rate(self, caller: Identity, rate: int) -> OpResult:
        return self._run("set_reward_rate", self._set_reward_rate, caller, rate)

    def _set_reward_rate(self, caller, rate) -> Effect:
        caller = require_identity(caller)
        gov = self._state.governance
        require_owner(gov, caller)
        rate = require_reward_rate(gov, rate)
        seq = self._advance_seq()
        self._state.governance = gov.with_reward_rate(rate)
        return Effect(event=Event.REWARD_RATE_SET, actor=caller, seq=seq, rate=rate)

    def transfer_ownership(self, caller: Identity, new_owner: Identity) -> OpResult:
        return self._run("transfer_ownership", self._transfer_ownership, caller, new_owner)

    def _transfer_ownership(self, caller, new_owner) -> Effect:
        caller = require_identity(caller)
        gov = self._state.governance
        require_owner(gov, caller)
        new_owner = require_identity(new_owner, name="new_owner")
        if new_owner == self._config.custody:
            raise AmmError(ErrorKind.UNAUTHORIZED, "custody identity cannot own governance")
        seq = self._advance_seq()
        self._state.governance = gov.with_owner(new_owner)
        return Effect(event=Event.OWNERSHIP_TRANSFERRED, actor=caller, seq=seq, new_owner=new_owner)

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------

    def get_pool(self, asset_a: AssetId, asset_b: AssetId) -> Optional[PoolState]:
        return self._state.pools.get(PoolKey.of(asset_a, asset_b))

    def share_balance(self, holder: Identity, asset_a: AssetId, asset_b: AssetId) -> Amount:
        return self._state.positions.share_balance(holder, PoolKey.of(asset_a, asset_b))

    def pending_reward(self, holder: Identity, asset: AssetId) -> Amount:
        return self._state.rewards.get(holder, asset)

    @property
    def reward_rate(self) -> int:
        return self._state.governance.reward_rate

    @property
    def owner(self) -> Identity:
        return self._state.governance.owner

    def is_allowed(self, asset: AssetId) -> bool:
        return self._state.governance.is_allowed(asset)

    def quote_remove(self, asset_a: AssetId, asset_b: AssetId, shares: Amount) -> Tuple[Amount, Amount]:
        """Amounts (in caller order) that redeeming `shares` would return now."""
        key = PoolKey.of(asset_a, asset_b)
        pool = self._state.pools.require(key)
        plan = plan_remove_liquidity(pool, shares)
        return _orient(key, asset_a, plan.amount0, plan.amount1)

    def verify(self) -> List[str]:
        """Whole-state invariant audit (empty list = consistent)."""
        return check_all(self._state)
