"""USDA FoodData Central API client."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

import httpx

# Generic foods give stable per-100g values; branded entries vary by label.
GENERIC_DATA_TYPES = ("Foundation", "SR Legacy", "Survey (FNDDS)")


class FdcClient(Protocol):
    """Interface for FoodData Central lookups."""

    async def search_foods(self, query: str, page_size: int = 5) -> dict[str, object]:
        """Search generic foods by name and return raw API data."""

    async def get_food(
        self, fdc_id: int, nutrient_numbers: Sequence[str] = ()
    ) -> dict[str, object]:
        """Fetch one food, optionally limited to some nutrient numbers."""


@dataclass
class HttpxFdcClient(FdcClient):
    """FDC client over a shared httpx session; the key goes in X-Api-Key."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxFdcClient":
        return cls(
            api_key=api_key,
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
        )

    async def search_foods(self, query: str, page_size: int = 5) -> dict[str, object]:
        body = {
            "query": query,
            "pageSize": page_size,
            "dataType": list(GENERIC_DATA_TYPES),
        }
        return await self._send("POST", "/foods/search", json=body)

    async def get_food(
        self, fdc_id: int, nutrient_numbers: Sequence[str] = ()
    ) -> dict[str, object]:
        params = {"nutrients": list(nutrient_numbers)} if nutrient_numbers else None
        return await self._send("GET", f"/food/{fdc_id}", params=params)

    async def close(self) -> None:
        await self.http_client.aclose()

    async def _send(
        self, method: str, path: str, **kwargs: object
    ) -> dict[str, object]:
        response = await self.http_client.request(
            method,
            self.base_url + path,
            headers={"X-Api-Key": self.api_key},
            timeout=self.timeout_seconds,
            **kwargs,
        )
        response.raise_for_status()
        return response.json()
