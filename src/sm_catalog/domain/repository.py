"""Protocols for the catalog pipeline's collaborators.

Unit tests inject doubles that conform to these; infrastructure provides the
redis- and httpx-backed implementations.
"""

from typing import Protocol

from src.sm_catalog.domain.models import CatalogItem


class PriceSourceProtocol(Protocol):
    async def fetch_catalog(self) -> list[CatalogItem]: ...


class CatalogCacheProtocol(Protocol):
    key: str

    async def get(self) -> list[CatalogItem] | None: ...

    async def set(self, items: list[CatalogItem]) -> None: ...
