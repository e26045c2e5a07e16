import logging
from typing import Any, Dict, Optional

import aiohttp

logger = logging.getLogger(__name__)


class HttpClient:
    def __init__(self, session: aiohttp.ClientSession, timeout: float) -> None:
        self.session = session
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        logger.debug(f"GET {url} params={params}")
        async with self.session.get(url, params=params, timeout=self.timeout) as response:
            response.raise_for_status()
            return await response.json()

    async def post_json(self, url: str, payload: Dict[str, Any]) -> Any:
        logger.debug(f"POST {url}")
        async with self.session.post(url, json=payload, timeout=self.timeout) as response:
            response.raise_for_status()
            return await response.json()
