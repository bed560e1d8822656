"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 3000
      or: python -m src.main   (listens on settings.PORT)
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError

from config.settings import settings
from src.sm_account.api.router import router as users_router
from src.sm_catalog.api.router import router as skins_router
from src.sm_catalog.application.service import CatalogService
from src.sm_catalog.infrastructure.cache import CatalogCache
from src.sm_catalog.infrastructure.price_source import DEFAULT_TIMEOUT, PriceSourceClient
from src.sm_common.bootstrap import bootstrap
from src.sm_common.database import build_engine, build_session_factory
from src.sm_common.errors import AppError, InternalError, ValidationFailedError
from src.sm_common.redis_client import build_redis, close_redis
from src.sm_common.response import error_response
from src.sm_gateway.api.router import router as auth_router
from src.sm_gateway.middleware.request_log import RequestLogMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: build store/cache/http handles, bootstrap tables. Shutdown: close them."""
    engine = build_engine(settings)
    session_factory = build_session_factory(engine)
    redis = build_redis(settings)
    http = httpx.AsyncClient(timeout=DEFAULT_TIMEOUT)
    catalog_service: CatalogService | None = None
    try:
        await bootstrap(engine, session_factory)
        try:
            await redis.ping()
        except RedisError:
            # Not fatal: catalog requests answer 503 until Redis is back
            logger.warning("Redis unreachable at startup: %s", settings.REDIS_URL)

        catalog_service = CatalogService(
            cache=CatalogCache(redis),
            source=PriceSourceClient(http),
            snapshot_sessions=session_factory,
        )
        app.state.engine = engine
        app.state.session_factory = session_factory
        app.state.redis = redis
        app.state.catalog_service = catalog_service
        logger.info("%s started on port %d", settings.APP_NAME, settings.PORT)
        yield
    finally:
        # In-flight catalog fetches finish their cache writes before the handles close
        if catalog_service is not None:
            await catalog_service.drain()
        await http.aclose()
        await close_redis(redis)
        await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    err = ValidationFailedError(f"Invalid {location}: {first.get('msg', 'bad input')}")
    return await app_error_handler(request, err)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # Full detail stays in the server log; the client gets a generic 500
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return await app_error_handler(request, InternalError())


app.include_router(auth_router)
app.include_router(users_router)
app.include_router(skins_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}


def run() -> None:
    uvicorn.run("src.main:app", host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    run()
