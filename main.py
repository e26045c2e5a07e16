import asyncio
import logging
import random
from typing import Awaitable, Callable

import aiohttp
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Confirmed

from bot import TradeCycle
from config import Config, load_config
from http_client import HttpClient
from logging_config import setup_logging
from pools import create_pool
from settings import HTTP_TIMEOUT

logger = logging.getLogger(__name__)


def next_delay_ms(config: Config, rng=random) -> float:
    return rng.uniform(config.min_interval_ms, config.max_interval_ms)


async def run_forever(cycle: Callable[[], Awaitable[object]], config: Config, rng=random,
                      sleep: Callable[[float], Awaitable[None]] = asyncio.sleep) -> int:
    """Run trade cycles back to back; stops only when ``config.cycles`` is set."""
    completed = 0
    while not config.cycles or completed < config.cycles:
        try:
            await cycle()
            delay = next_delay_ms(config, rng)
            logger.info(f"Waiting {round(delay / 1000)}s until next trade.")
        except Exception:
            logger.exception("Error in main trading loop")
            delay = config.error_delay_ms
            logger.warning(f"Error occurred. Waiting {delay / 1000:.0f}s before retrying...")
        completed += 1
        if config.cycles and completed >= config.cycles:
            break
        await sleep(delay / 1000)
    return completed


async def main() -> None:
    config = load_config()
    setup_logging(config.log_level)
    logger.info(f"Wallet Successfully Loaded: {config.wallet.pubkey()}")

    async with AsyncClient(config.rpc_url, Confirmed) as client, aiohttp.ClientSession() as session:
        pool = create_pool(config, HttpClient(session, HTTP_TIMEOUT), client)
        trade_cycle = TradeCycle(config, client, pool)
        logger.info("Bot initialized. Starting trading loop...")
        await run_forever(trade_cycle.run, config)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
