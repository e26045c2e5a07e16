"""Ratio and decision logic for one trade cycle.

Every random draw goes through the ``rng`` argument so callers can pass a
seeded ``random.Random`` (or a stub) and get reproducible decisions.
"""
import logging
import math
import random
from decimal import ROUND_FLOOR, Decimal
from typing import Optional

from errors import PoolStateError
from models import Direction, Holdings, PoolState, Ratios, TradeDecision
from settings import RATIO_SCALE

logger = logging.getLogger(__name__)


def bot_ratio(holdings: Holdings) -> float:
    return holdings.token_amount * RATIO_SCALE / holdings.sol_lamports


def pool_ratio(pool_state: PoolState, base_mint: str) -> float:
    base_reserve, token_reserve = pool_state.reserves_for(base_mint)
    if base_reserve == 0 or token_reserve == 0:
        raise PoolStateError(f"Pool has an empty reserve: base={base_reserve}, token={token_reserve}")
    return token_reserve * RATIO_SCALE / base_reserve


def noisy_target(ratio: float, random_factor: float, rng=random) -> float:
    noise = rng.uniform(-random_factor, random_factor)
    return ratio * (1 + noise)


def compute_ratios(holdings: Holdings, pool_state: PoolState, base_mint: str,
                   random_factor: float, rng=random) -> Optional[Ratios]:
    """Return None when either holding is empty; the cycle then skips trading."""
    if not holdings.is_tradable:
        return None
    current = pool_ratio(pool_state, base_mint)
    return Ratios(
        bot_ratio=bot_ratio(holdings),
        pool_ratio=current,
        target_ratio=noisy_target(current, random_factor, rng),
    )


def draw_trade_fraction(min_fraction: float, max_fraction: float, rng=random) -> float:
    return rng.uniform(min_fraction, max_fraction)


def random_buy_threshold(buys_per_sell: float) -> float:
    # k / (k + 1) of random decisions are buys, so random buys:sells is exactly k:1
    return buys_per_sell / (buys_per_sell + 1)


def choose_direction(ratios: Ratios, buys_per_sell: float, random_decision_threshold: float,
                     rng=random):
    """Return (direction, natural)."""
    natural = rng.random() < random_decision_threshold
    if natural:
        buy = ratios.bot_ratio < ratios.target_ratio
    else:
        buy = rng.random() < random_buy_threshold(buys_per_sell)
    return (Direction.BUY if buy else Direction.SELL), natural


def buy_amount(sol_lamports: int, trade_fraction: float, buys_per_sell: float) -> int:
    lamports = math.floor(sol_lamports * trade_fraction)
    shrunk = Decimal(lamports) / Decimal(str(buys_per_sell))
    return int(shrunk.to_integral_value(rounding=ROUND_FLOOR))


def sell_amount(token_amount: int, trade_fraction: float) -> int:
    return math.floor(token_amount * trade_fraction)


def decide_trade(ratios: Ratios, holdings: Holdings, pool_state: PoolState, base_mint: str,
                 token_mint: str, buys_per_sell: float, random_decision_threshold: float,
                 min_fraction: float, max_fraction: float, rng=random) -> TradeDecision:
    trade_fraction = draw_trade_fraction(min_fraction, max_fraction, rng)
    direction, natural = choose_direction(ratios, buys_per_sell, random_decision_threshold, rng)

    if direction is Direction.BUY:
        input_mint = base_mint
        amount = buy_amount(holdings.sol_lamports, trade_fraction, buys_per_sell)
    else:
        input_mint = token_mint
        amount = sell_amount(holdings.token_amount, trade_fraction)

    decision = TradeDecision(
        direction=direction,
        input_mint=input_mint,
        output_mint=pool_state.other_mint(input_mint),
        input_amount=amount,
        natural=natural,
        trade_fraction=trade_fraction,
    )
    reason = "to approach noisy target ratio" if natural else "to follow random action"
    verb = "Buying" if direction is Direction.BUY else "Selling"
    logger.info(f"{verb} tokens {reason} (fraction={trade_fraction:.4f}, amount={amount})")
    return decision
