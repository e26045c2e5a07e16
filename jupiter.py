import base64
import logging
from typing import Any, Dict, Iterable

from solders.transaction import VersionedTransaction

from errors import QuoteError, SwapError
from http_client import HttpClient
from models import SwapQuote

logger = logging.getLogger(__name__)


def apply_slippage(out_amount: int, slippage_bps: int) -> int:
    return out_amount - out_amount * slippage_bps // 10_000


class JupiterClient:
    """Quotes and builds swaps through one specific pool via the Jupiter swap API."""

    def __init__(self, http: HttpClient, base_url: str) -> None:
        self.http = http
        self.base_url = base_url.rstrip("/")

    def quote_params(self, in_mint: str, out_mint: str, amount: int, slippage_bps: int,
                     dexes: Iterable[str]) -> Dict[str, str]:
        return {
            "inputMint": in_mint,
            "outputMint": out_mint,
            "amount": str(amount),
            "slippageBps": str(slippage_bps),
            "swapMode": "ExactIn",
            "onlyDirectRoutes": "true",
            "dexes": ",".join(dexes),
        }

    def parse_quote(self, response: Dict[str, Any], pool_address: str, in_mint: str, out_mint: str,
                    amount: int, slippage_bps: int) -> SwapQuote:
        if "outAmount" not in response:
            raise QuoteError(f"Jupiter quote response missing outAmount: {response.get('error', response)}")
        try:
            out_amount = int(response["outAmount"])
        except (TypeError, ValueError):
            raise QuoteError("Jupiter outAmount is not parseable as int") from None

        route_plan = response.get("routePlan") or []
        amm_keys = [step.get("swapInfo", {}).get("ammKey") for step in route_plan]
        if amm_keys != [pool_address]:
            raise QuoteError(f"Quoted route {amm_keys} does not go through pool {pool_address}")

        min_out = apply_slippage(out_amount, slippage_bps)
        route = dict(response)
        route["slippageBps"] = slippage_bps
        route["otherAmountThreshold"] = str(min_out)
        return SwapQuote(
            input_mint=in_mint,
            output_mint=out_mint,
            in_amount=amount,
            out_amount=out_amount,
            min_out=min_out,
            route=route,
        )

    async def get_quote(self, pool_address: str, in_mint: str, out_mint: str, amount: int,
                        slippage_bps: int, dexes: Iterable[str]) -> SwapQuote:
        params = self.quote_params(in_mint, out_mint, amount, slippage_bps, dexes)
        response = await self.http.get_json(f"{self.base_url}/quote", params=params)
        quote = self.parse_quote(response, pool_address, in_mint, out_mint, amount, slippage_bps)
        logger.debug(f"Quote: {amount} {in_mint} -> {quote.out_amount} {out_mint} (min {quote.min_out})")
        return quote

    async def get_swap_transaction(self, quote: SwapQuote, user_public_key: str,
                                   unit_price: int) -> VersionedTransaction:
        payload = {
            "quoteResponse": quote.route,
            "userPublicKey": user_public_key,
            "wrapAndUnwrapSol": True,
            "dynamicComputeUnitLimit": True,
            "computeUnitPriceMicroLamports": unit_price,
        }
        response = await self.http.post_json(f"{self.base_url}/swap", payload)
        swap_transaction = response.get("swapTransaction")
        if not swap_transaction:
            raise SwapError(f"No swap transaction in response: {response.get('error', response)}")
        return VersionedTransaction.from_bytes(base64.b64decode(swap_transaction))
