"""Open Food Facts API client."""

import logging
from dataclasses import dataclass
from typing import Protocol
from urllib.parse import quote

import httpx

_API_VERSIONS = ("v2", "v0")
_PRODUCT_FIELDS = (
    "product_name,brands,generic_name,serving_size,serving_quantity,nutriments"
)

_logger = logging.getLogger(__name__)


class OpenFoodFactsClient(Protocol):
    """Interface for Open Food Facts product lookups."""

    async def get_product(self, barcode: str) -> dict[str, object] | None:
        """Return the raw product for a barcode, or None when unknown."""

    async def search_products(
        self, query: str, page_size: int = 20
    ) -> dict[str, object]:
        """Search products by text and return raw API data."""


@dataclass
class HttpxOpenFoodFactsClient(OpenFoodFactsClient):
    """HTTPX-backed Open Food Facts client."""

    base_url: str
    user_agent: str
    http_client: httpx.AsyncClient
    timeout: float = 10.0

    @classmethod
    def create(
        cls, base_url: str, user_agent: str, timeout: float = 10.0
    ) -> "HttpxOpenFoodFactsClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            user_agent=user_agent,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def get_product(self, barcode: str) -> dict[str, object] | None:
        """Try each API version in turn; the first known product wins.

        Timeouts propagate. Other failures on one version move on to the
        next one.
        """
        for version in _API_VERSIONS:
            url = f"{self.base_url}/api/{version}/product/{quote(barcode)}.json"
            try:
                response = await self.http_client.get(
                    url,
                    params={"fields": _PRODUCT_FIELDS},
                    headers=self._headers(),
                    timeout=self.timeout,
                )
            except httpx.TimeoutException:
                raise
            except httpx.HTTPError as exc:
                _logger.warning(
                    "Product lookup %s failed on %s: %s", barcode, version, exc
                )
                continue
            if not response.is_success:
                continue
            try:
                payload = response.json()
            except ValueError:
                continue
            if not isinstance(payload, dict):
                continue
            product = payload.get("product")
            if payload.get("status") == 1 and isinstance(product, dict):
                return product
        return None

    async def search_products(
        self, query: str, page_size: int = 20
    ) -> dict[str, object]:
        """Search products by text."""
        response = await self.http_client.get(
            f"{self.base_url}/cgi/search.pl",
            params={
                "search_terms": query,
                "search_simple": 1,
                "action": "process",
                "json": 1,
                "page_size": page_size,
            },
            headers=self._headers(),
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    def _headers(self) -> dict[str, str]:
        return {"Accept": "application/json", "User-Agent": self.user_agent}
