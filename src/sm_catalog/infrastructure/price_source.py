"""Skinport price source adapter.

Fetches the tradable and non-tradable listings for CS2 (app_id 730, EUR)
concurrently and merges them into one CatalogItem per item name.

Merge is keyed by ``market_hash_name``: the non-tradable listing sets the
output order, and each record takes ``min_price`` from the tradable entry with
the same name (None when absent). The two listings are not assumed to share
ordering or length.
"""

import asyncio
import logging
from typing import Any

import httpx

from src.sm_catalog.domain.models import CatalogItem

logger = logging.getLogger(__name__)

SKINPORT_ITEMS_URL = "https://api.skinport.com/v1/items"
SKINPORT_APP_ID = 730
SKINPORT_CURRENCY = "EUR"
DEFAULT_TIMEOUT = 30.0


class PriceSourceError(Exception):
    """Upstream listing could not be fetched or parsed."""


def merge_listings(
    non_tradable: list[dict[str, Any]],
    tradable: list[dict[str, Any]],
) -> list[CatalogItem]:
    tradable_prices: dict[str, float | None] = {}
    for entry in tradable:
        name = entry.get("market_hash_name")
        # First occurrence wins if the upstream ever repeats a name
        if isinstance(name, str) and name not in tradable_prices:
            tradable_prices[name] = entry.get("min_price")

    items: list[CatalogItem] = []
    for entry in non_tradable:
        name = entry.get("market_hash_name")
        if not isinstance(name, str):
            logger.debug("Skipping listing entry without market_hash_name: %r", entry)
            continue
        items.append(
            CatalogItem(
                name=name,
                min_price_non_tradable=entry.get("min_price"),
                min_price_tradable=tradable_prices.get(name),
            )
        )
    return items


class PriceSourceClient:
    """Thin async client; the httpx.AsyncClient is owned by the application lifespan."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        base_url: str = SKINPORT_ITEMS_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._http = http
        self._base_url = base_url
        self._timeout = timeout

    async def fetch_listing(self, tradable: bool) -> list[dict[str, Any]]:
        params = {
            "app_id": SKINPORT_APP_ID,
            "currency": SKINPORT_CURRENCY,
            "tradable": int(tradable),
        }
        try:
            response = await self._http.get(
                self._base_url,
                params=params,
                headers={"Accept-Encoding": "gzip"},
                timeout=self._timeout,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise PriceSourceError(
                f"Price source returned {exc.response.status_code} (tradable={int(tradable)})"
            ) from exc
        except httpx.HTTPError as exc:
            raise PriceSourceError(f"Failed to contact price source: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise PriceSourceError("Price source returned invalid JSON") from exc
        if not isinstance(payload, list):
            raise PriceSourceError("Price source returned a non-list payload")
        return payload

    async def fetch_catalog(self) -> list[CatalogItem]:
        non_tradable, tradable = await asyncio.gather(
            self.fetch_listing(tradable=False),
            self.fetch_listing(tradable=True),
        )
        items = merge_listings(non_tradable, tradable)
        logger.info(
            "Fetched catalog: %d non-tradable, %d tradable, %d merged",
            len(non_tradable),
            len(tradable),
            len(items),
        )
        return items
