"""sm_account REST API: user reads and the buy (debit) endpoint, all require a Bearer token."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_account.application.schemas import BuyRequest, DebitResponse, UserResponse
from src.sm_account.application.service import LedgerService
from src.sm_common.database import get_db_session
from src.sm_common.response import ApiResponse, bind_request_id, success_response
from src.sm_gateway.auth.dependencies import get_current_user_id

router = APIRouter(prefix="/users", tags=["users"])

_service = LedgerService()


def get_ledger_service() -> LedgerService:
    return _service


@router.get("/")
async def list_users(
    _: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[LedgerService, Depends(get_ledger_service)],
    request: Request,
) -> ApiResponse:
    users = await service.list_users(db)
    data = [UserResponse.from_domain(u).model_dump() for u in users]
    return bind_request_id(success_response(data, "Users retrieved successfully"), request)


@router.get("/{user_id}")
async def get_user(
    user_id: Annotated[int, Path(gt=0)],
    _: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[LedgerService, Depends(get_ledger_service)],
    request: Request,
) -> ApiResponse:
    user = await service.get_user(db, user_id)
    data = UserResponse.from_domain(user).model_dump()
    return bind_request_id(success_response(data, "User retrieved successfully"), request)


@router.post("/buy")
async def buy(
    body: BuyRequest,
    _: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[LedgerService, Depends(get_ledger_service)],
    request: Request,
) -> ApiResponse:
    user = await service.debit(db, body.user_id, body.amount)
    data = DebitResponse.from_domain(user).model_dump()
    return bind_request_id(success_response(data, "Balance deducted successfully"), request)
