"""Auth API router: login and password change.

All endpoints return ApiResponse. request_id is read from request.state
(injected by RequestLogMiddleware).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.sm_common.database import get_db_session
from src.sm_common.response import ApiResponse, bind_request_id, success_response
from src.sm_gateway.auth.dependencies import get_current_user_id
from src.sm_gateway.user.schemas import ChangePasswordRequest, LoginRequest, LoginResponse
from src.sm_gateway.user.service import UserService

router = APIRouter(prefix="/users", tags=["auth"])
_service = UserService()


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="User login",
)
async def login(
    request: Request,
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    token = await _service.login(db, body.email, body.password)
    data = LoginResponse(token=token, expires_in=settings.JWT_EXPIRE_MINUTES * 60)
    return bind_request_id(success_response(data.model_dump(), "Login successful"), request)


@router.patch(
    "/change-password",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Change password",
)
async def change_password(
    request: Request,
    body: ChangePasswordRequest,
    _: Annotated[int, Depends(get_current_user_id)],
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    await _service.change_password(db, body.email, body.old_password, body.new_password)
    return bind_request_id(success_response(None, "Password changed successfully"), request)
