"""CatalogRepository: the persisted catalog snapshot in the items table.

The snapshot is replaced wholesale after each clean fetch (no per-item upsert).
Transaction ownership: the CALLER opens it with `async with db.begin()` so the
delete and every insert batch commit together. The table lock
serializes concurrent replacements, so the table never holds two snapshots.
"""

from collections.abc import Iterator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_catalog.domain.models import CatalogItem

DEFAULT_BATCH_SIZE = 500

# Held until commit; overlapping replacements queue here instead of interleaving
_LOCK_ITEMS_SQL = text("LOCK TABLE items IN EXCLUSIVE MODE")

_DELETE_ITEMS_SQL = text("DELETE FROM items")

_INSERT_ITEM_SQL = text("""
    INSERT INTO items (name, min_price_non_tradable, min_price_tradable)
    VALUES (:name, :min_price_non_tradable, :min_price_tradable)
""")

_LIST_ITEMS_SQL = text("""
    SELECT name, min_price_non_tradable, min_price_tradable
    FROM items
    ORDER BY id
    LIMIT :limit OFFSET :offset
""")


def chunked(items: list[CatalogItem], size: int) -> Iterator[list[CatalogItem]]:
    for start in range(0, len(items), size):
        yield items[start:start + size]


class CatalogRepository:
    async def replace_items(
        self,
        db: AsyncSession,
        items: list[CatalogItem],
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> int:
        """Delete the previous snapshot and insert ``items`` in batches. Returns rows written."""
        await db.execute(_LOCK_ITEMS_SQL)
        await db.execute(_DELETE_ITEMS_SQL)
        for batch in chunked(items, batch_size):
            await db.execute(_INSERT_ITEM_SQL, [item.to_dict() for item in batch])
        return len(items)

    async def list_items(
        self, db: AsyncSession, limit: int, offset: int = 0
    ) -> list[CatalogItem]:
        result = await db.execute(_LIST_ITEMS_SQL, {"limit": limit, "offset": offset})
        return [
            CatalogItem(
                name=row.name,
                min_price_non_tradable=row.min_price_non_tradable,
                min_price_tradable=row.min_price_tradable,
            )
            for row in result.fetchall()
        ]
