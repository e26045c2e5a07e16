import logging
from decimal import ROUND_FLOOR, Decimal, InvalidOperation
from typing import Any, Dict, Mapping

from errors import PoolStateError
from http_client import HttpClient
from models import PoolState
from settings import DAMM_API_URL, DLMM_API_URL

logger = logging.getLogger(__name__)


def parse_dlmm_pair(payload: Dict[str, Any]) -> PoolState:
    try:
        return PoolState(
            mint_x=str(payload["mint_x"]),
            mint_y=str(payload["mint_y"]),
            reserve_x=int(payload["reserve_x_amount"]),
            reserve_y=int(payload["reserve_y_amount"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise PoolStateError(f"Malformed DLMM pair response: {e}") from e


def _raw_amount(ui_amount: Any, decimals: int) -> int:
    try:
        scaled = Decimal(str(ui_amount)) * (Decimal(10) ** decimals)
    except InvalidOperation:
        raise PoolStateError(f"Unparseable pool token amount: {ui_amount!r}") from None
    return int(scaled.to_integral_value(rounding=ROUND_FLOOR))


def damm_pool_mints(payload: Dict[str, Any]):
    mints = payload.get("pool_token_mints") or []
    if len(mints) != 2:
        raise PoolStateError("Malformed DAMM pool response: expected two pool_token_mints")
    return str(mints[0]), str(mints[1])


def parse_damm_pool(payload: Dict[str, Any], decimals: Mapping[str, int]) -> PoolState:
    """DAMM reports UI amounts, so they are scaled back to raw units with the mint decimals."""
    mint_a, mint_b = damm_pool_mints(payload)
    amounts = payload.get("pool_token_amounts") or []
    if len(amounts) != 2:
        raise PoolStateError("Malformed DAMM pool response: expected two pool_token_amounts")
    try:
        decimals_a, decimals_b = decimals[mint_a], decimals[mint_b]
    except KeyError as e:
        raise PoolStateError(f"Missing decimals for mint {e}") from e
    return PoolState(
        mint_x=mint_a,
        mint_y=mint_b,
        reserve_x=_raw_amount(amounts[0], decimals_a),
        reserve_y=_raw_amount(amounts[1], decimals_b),
    )


class MeteoraClient:
    def __init__(self, http: HttpClient, dlmm_api_url: str = DLMM_API_URL,
                 damm_api_url: str = DAMM_API_URL) -> None:
        self.http = http
        self.dlmm_api_url = dlmm_api_url.rstrip("/")
        self.damm_api_url = damm_api_url.rstrip("/")

    async def get_dlmm_pair(self, pool_address: str) -> Dict[str, Any]:
        return await self.http.get_json(f"{self.dlmm_api_url}/pair/{pool_address}")

    async def get_damm_pool(self, pool_address: str) -> Dict[str, Any]:
        payload = await self.http.get_json(f"{self.damm_api_url}/pools", params={"address": pool_address})
        if isinstance(payload, list):
            if not payload:
                raise PoolStateError(f"DAMM pool {pool_address} not found")
            payload = payload[0]
        return payload
