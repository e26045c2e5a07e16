import logging
import random
from enum import Enum
from typing import Optional

from solana.rpc.async_api import AsyncClient
from solders.pubkey import Pubkey

import engine
from config import Config
from models import Holdings
from pools import Pool
from solana_helpers import ensure_token_account, get_holdings, submit_transaction

logger = logging.getLogger(__name__)


class CycleOutcome(Enum):
    SKIPPED = "skipped"
    RATIO_FAILED = "ratio_failed"
    DECISION_FAILED = "decision_failed"
    SWAP_FAILED = "swap_failed"
    EXECUTED = "executed"


class TradeCycle:
    """Compute the target ratio, decide a trade and execute the swap.

    Each stage catches and logs its own failures so a bad cycle ends quietly;
    the caller only sees exceptions raised outside those stages.
    """

    def __init__(self, config: Config, client: AsyncClient, pool: Pool, rng=random) -> None:
        self.config = config
        self.client = client
        self.pool = pool
        self.rng = rng
        self.owner = config.wallet.pubkey()
        self.token_mint = Pubkey.from_string(config.token_mint)
        self.token_account: Optional[Pubkey] = None

    async def prepare_token_account(self) -> Pubkey:
        return await ensure_token_account(self.client, self.config.wallet, self.token_mint,
                                          self.config.unit_budget, self.config.unit_price)

    async def fetch_holdings(self) -> Holdings:
        return await get_holdings(self.client, self.owner, self.token_mint)

    async def run(self) -> CycleOutcome:
        config = self.config
        try:
            # retried every cycle until the associated token account exists
            if self.token_account is None:
                self.token_account = await self.prepare_token_account()
            holdings = await self.fetch_holdings()
            if not holdings.is_tradable:
                logger.info("Insufficient balance for trading.")
                return CycleOutcome.SKIPPED
            pool_state = await self.pool.fetch_current()
            pool_state.check_pair(config.wsol_mint, config.token_mint)
            ratios = engine.compute_ratios(holdings, pool_state, config.wsol_mint,
                                           config.random_factor, self.rng)
            logger.info(f"Bot ratio = {ratios.bot_ratio:.6f}, pool ratio = {ratios.pool_ratio:.6f}, "
                        f"noisy target = {ratios.target_ratio:.6f}")
            logger.info(f"Bot ratio / pool ratio = {ratios.bot_ratio / ratios.pool_ratio:.6f}")
        except Exception as e:
            logger.error(f"Error in trade cycle ratio calculation: {e!r}")
            return CycleOutcome.RATIO_FAILED

        try:
            decision = engine.decide_trade(
                ratios, holdings, pool_state,
                base_mint=config.wsol_mint,
                token_mint=config.token_mint,
                buys_per_sell=config.buys_per_sell,
                random_decision_threshold=config.random_decision_threshold,
                min_fraction=config.min_trade_fraction,
                max_fraction=config.max_trade_fraction,
                rng=self.rng,
            )
        except Exception as e:
            logger.error(f"Error in trade cycle deciding trade action: {e!r}")
            return CycleOutcome.DECISION_FAILED

        try:
            quote = await self.pool.quote(decision.input_amount, decision.direction, config.slippage_bps)
            transaction = await self.pool.swap(quote, self.owner)
            await submit_transaction(self.client, transaction, config.wallet)
        except Exception as e:
            logger.error(f"Swap failed: {e!r}")
            return CycleOutcome.SWAP_FAILED
        return CycleOutcome.EXECUTED
