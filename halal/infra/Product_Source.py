"""Product sources: the lookup port and its Open Food Facts implementation."""
import logging
from typing import Any, Dict, Optional, Protocol

import httpx

from halal.domain.Errors import ProductNetworkError, ProductNotFound
from halal.utilities.config import HTTP_TIMEOUT, OFF_BASE_URL, USER_AGENT

logger = logging.getLogger(__name__)


class ProductSource(Protocol):
    async def fetch(self, identifier: str) -> Dict[str, Any]:
        """Return the product document for identifier.

        Raises ProductNotFound when no product exists and ProductNetworkError
        on transport failures or non-success responses.
        """
        ...


class OpenFoodFactsSource:
    """Looks products up on Open Food Facts (API v2).

    A shared httpx.AsyncClient can be injected; otherwise a short-lived client
    is opened per request.
    """

    def __init__(self, base_url: str = OFF_BASE_URL, timeout: float = HTTP_TIMEOUT,
                 client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    def product_url(self, identifier: str) -> str:
        return f"{self.base_url}/api/v2/product/{identifier}.json"

    async def _get(self, url: str) -> httpx.Response:
        headers = {"User-Agent": USER_AGENT}
        if self._client is not None:
            return await self._client.get(url, headers=headers, timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(url, headers=headers)

    async def fetch(self, identifier: str) -> Dict[str, Any]:
        url = self.product_url(identifier)
        try:
            response = await self._get(url)
        except httpx.HTTPError as e:
            logger.warning(f"Open Food Facts request failed for {identifier}: {e}")
            raise ProductNetworkError(identifier, str(e)) from e

        if not response.is_success:
            logger.warning(f"Open Food Facts answered {response.status_code} for {identifier}")
            raise ProductNetworkError(identifier, f"HTTP {response.status_code}", status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise ProductNetworkError(identifier, f"Invalid JSON response: {e}") from e

        product = data.get("product") if isinstance(data, dict) else None
        if not isinstance(product, dict) or not product:
            raise ProductNotFound(identifier)
        return product
