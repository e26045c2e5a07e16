import logging
from abc import ABC, abstractmethod
from typing import Dict, Tuple

from solana.rpc.async_api import AsyncClient
from solders.pubkey import Pubkey
from solders.transaction import VersionedTransaction

from config import Config
from http_client import HttpClient
from jupiter import JupiterClient
from meteora import MeteoraClient, damm_pool_mints, parse_damm_pool, parse_dlmm_pair
from models import Direction, PoolState, SwapQuote
from solana_helpers import get_mint_decimals

logger = logging.getLogger(__name__)


class Pool(ABC):
    """One Meteora pool: current state, quotes and unsigned swap transactions."""

    dex_labels: Tuple[str, ...] = ()

    def __init__(self, address: str, base_mint: str, token_mint: str,
                 meteora: MeteoraClient, jupiter: JupiterClient, unit_price: int) -> None:
        self.address = address
        self.base_mint = base_mint
        self.token_mint = token_mint
        self.meteora = meteora
        self.jupiter = jupiter
        self.unit_price = unit_price

    @abstractmethod
    async def fetch_current(self) -> PoolState:
        ...

    def mints_for(self, direction: Direction) -> Tuple[str, str]:
        if direction is Direction.BUY:
            return self.base_mint, self.token_mint
        return self.token_mint, self.base_mint

    async def quote(self, amount_in: int, direction: Direction, slippage_bps: int) -> SwapQuote:
        in_mint, out_mint = self.mints_for(direction)
        return await self.jupiter.get_quote(self.address, in_mint, out_mint, amount_in,
                                            slippage_bps, self.dex_labels)

    async def swap(self, quote: SwapQuote, owner: Pubkey) -> VersionedTransaction:
        return await self.jupiter.get_swap_transaction(quote, str(owner), self.unit_price)


class DlmmPool(Pool):
    dex_labels = ("Meteora DLMM",)

    async def fetch_current(self) -> PoolState:
        payload = await self.meteora.get_dlmm_pair(self.address)
        return parse_dlmm_pair(payload)


class DammPool(Pool):
    dex_labels = ("Meteora",)

    def __init__(self, *args, client: AsyncClient, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.client = client
        self._decimals: Dict[str, int] = {}

    async def decimals_for(self, mint: str) -> int:
        if mint not in self._decimals:
            self._decimals[mint] = await get_mint_decimals(self.client, Pubkey.from_string(mint))
        return self._decimals[mint]

    async def fetch_current(self) -> PoolState:
        payload = await self.meteora.get_damm_pool(self.address)
        decimals = {mint: await self.decimals_for(mint) for mint in damm_pool_mints(payload)}
        return parse_damm_pool(payload, decimals)


def create_pool(config: Config, http: HttpClient, client: AsyncClient) -> Pool:
    meteora = MeteoraClient(http)
    jupiter = JupiterClient(http, config.jupiter_api_url)
    args = (config.pool_address, config.wsol_mint, config.token_mint, meteora, jupiter, config.unit_price)
    # POOL_TYPE is already restricted to DLMM or DAMM by config.validate
    if config.pool_type == "DLMM":
        pool = DlmmPool(*args)
    else:
        pool = DammPool(*args, client=client)
    logger.info(f"Using {config.pool_type} pool {config.pool_address}")
    return pool
