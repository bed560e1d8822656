"""Startup / shutdown of the application handles (builders patched)."""

from collections.abc import Iterator
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI
from redis.exceptions import ConnectionError as RedisConnectionError

from src.main import lifespan
from src.sm_catalog.application.service import CatalogService


@pytest.fixture
def handles() -> Iterator[SimpleNamespace]:
    h = SimpleNamespace(
        engine=AsyncMock(),
        redis=AsyncMock(),
        http=AsyncMock(),
        bootstrap=AsyncMock(),
        close_redis=AsyncMock(),
    )
    with (
        patch("src.main.build_engine", return_value=h.engine),
        patch("src.main.build_session_factory", return_value=MagicMock()),
        patch("src.main.build_redis", return_value=h.redis),
        patch("src.main.httpx.AsyncClient", return_value=h.http),
        patch("src.main.bootstrap", h.bootstrap),
        patch("src.main.close_redis", h.close_redis),
    ):
        yield h


def _assert_closed(h: SimpleNamespace) -> None:
    h.http.aclose.assert_awaited_once()
    h.close_redis.assert_awaited_once_with(h.redis)
    h.engine.dispose.assert_awaited_once()


async def test_clean_start_and_shutdown(handles: SimpleNamespace) -> None:
    app = FastAPI()
    async with lifespan(app):
        assert isinstance(app.state.catalog_service, CatalogService)
        handles.redis.ping.assert_awaited_once()
    _assert_closed(handles)


async def test_bootstrap_failure_still_closes_handles(handles: SimpleNamespace) -> None:
    handles.bootstrap.side_effect = ConnectionRefusedError(111, "Connection refused")

    with pytest.raises(ConnectionRefusedError):
        async with lifespan(FastAPI()):
            pass

    _assert_closed(handles)


async def test_redis_down_at_startup_is_not_fatal(handles: SimpleNamespace) -> None:
    handles.redis.ping.side_effect = RedisConnectionError("refused")
    app = FastAPI()

    async with lifespan(app):
        assert isinstance(app.state.catalog_service, CatalogService)

    _assert_closed(handles)
