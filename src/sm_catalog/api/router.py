"""sm_catalog REST API: the cached price catalog and the persisted snapshot."""

import logging
from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_catalog.application.service import CacheHit, CatalogService, CatalogStream
from src.sm_catalog.domain.models import CatalogItem, items_to_json
from src.sm_catalog.infrastructure.persistence import CatalogRepository
from src.sm_common.database import get_db_session
from src.sm_common.errors import CatalogFetchError
from src.sm_common.response import ApiResponse, bind_request_id, success_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/skins", tags=["skins"])

_repo = CatalogRepository()


def get_catalog_service(request: Request) -> CatalogService:
    return request.app.state.catalog_service


async def _stream_chunks(
    first: list[CatalogItem], rest: CatalogStream
) -> AsyncIterator[str]:
    yield items_to_json(first)
    try:
        async for batch in rest:
            yield items_to_json(batch)
    except CatalogFetchError:
        # Headers are already sent; the client sees a truncated chunked body
        logger.exception("Catalog stream aborted after the first batch")
        raise


@router.get("/", response_model=None)
async def get_skins(
    request: Request,
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> ApiResponse | StreamingResponse:
    result = await service.get_catalog()
    if isinstance(result, CacheHit):
        data = [item.to_dict() for item in result.items]
        resp = success_response(data, "Skins retrieved successfully (from cache)")
        return bind_request_id(resp, request)

    # Wait for the first batch so an upfront fetch failure is still a JSON error
    first = await anext(result, None)
    if first is None:
        first = []
    return StreamingResponse(
        _stream_chunks(first, result),
        media_type="application/json",
    )


@router.get("/stored")
async def list_stored_skins(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    limit: int = Query(100, ge=1, le=1000, description="Items per page"),
    offset: int = Query(0, ge=0, description="Items to skip"),
) -> ApiResponse:
    items = await _repo.list_items(db, limit, offset)
    data = [item.to_dict() for item in items]
    return bind_request_id(success_response(data, "Stored skins retrieved successfully"), request)
