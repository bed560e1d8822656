"""Domain models for sm_catalog: pure dataclasses, no I/O."""

import json
from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class CatalogItem:
    name: str
    min_price_non_tradable: float | None = None
    min_price_tradable: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "CatalogItem":
        return cls(
            name=raw["name"],
            min_price_non_tradable=raw.get("min_price_non_tradable"),
            min_price_tradable=raw.get("min_price_tradable"),
        )


def items_to_json(items: list[CatalogItem]) -> str:
    """Serialize a batch as one JSON array (cache value and stream chunk format)."""
    return json.dumps([item.to_dict() for item in items])


def items_from_json(raw: str) -> list[CatalogItem]:
    """Inverse of items_to_json. Raises ValueError/KeyError/TypeError on bad input."""
    payload = json.loads(raw)
    if not isinstance(payload, list):
        raise ValueError("catalog payload is not a JSON array")
    return [CatalogItem.from_dict(entry) for entry in payload]


# ---------------------------------------------------------------------------
# Fetch channel messages: a fetch task emits zero or more FetchPayload
# followed by exactly one FetchDone or FetchFailed.
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FetchPayload:
    items: list[CatalogItem] = field(default_factory=list)


@dataclass(frozen=True)
class FetchDone:
    pass


@dataclass(frozen=True)
class FetchFailed:
    error: BaseException


FetchMessage = FetchPayload | FetchDone | FetchFailed
