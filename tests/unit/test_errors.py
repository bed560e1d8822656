"""Tests for sm_common.errors and sm_common.response."""

from src.sm_common.errors import (
    AccountNotFoundError,
    AppError,
    CacheUnavailableError,
    CatalogFetchError,
    DebitRejectedError,
    InsufficientBalanceError,
    InvalidTokenError,
    MissingTokenError,
    RejectionReason,
    StoreError,
    UserNotFoundError,
)
from src.sm_common.response import ApiResponse, error_response, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500

    def test_custom_http_status(self) -> None:
        err = AppError(code=1006, message="User not found", http_status=404)
        assert err.http_status == 404

    def test_is_exception(self) -> None:
        err = AppError(code=1001, message="test")
        assert isinstance(err, Exception)


class TestDebitRejections:
    def test_insufficient_balance(self) -> None:
        err = InsufficientBalanceError(required=1500, available=1000)
        assert err.code == 2001
        assert err.http_status == 400
        assert err.reason is RejectionReason.INSUFFICIENT_BALANCE
        assert "1500" in err.message
        assert "1000" in err.message

    def test_account_not_found(self) -> None:
        err = AccountNotFoundError(42)
        assert err.code == 2002
        assert err.http_status == 400
        assert err.reason is RejectionReason.USER_NOT_FOUND

    def test_both_are_debit_rejections(self) -> None:
        assert isinstance(InsufficientBalanceError(1, 0), DebitRejectedError)
        assert isinstance(AccountNotFoundError(1), DebitRejectedError)


class TestStatusMapping:
    def test_auth_boundary(self) -> None:
        assert MissingTokenError().http_status == 403
        assert InvalidTokenError().http_status == 401

    def test_user_not_found_is_404(self) -> None:
        assert UserNotFoundError(7).http_status == 404

    def test_infrastructure_errors(self) -> None:
        assert CatalogFetchError().http_status == 502
        assert CacheUnavailableError().http_status == 503
        assert StoreError().http_status == 500


class TestApiResponse:
    def test_success(self) -> None:
        resp = success_response({"id": 1})
        assert resp.code == 0
        assert resp.message == "success"
        assert resp.data == {"id": 1}

    def test_success_with_message(self) -> None:
        resp = success_response([], "Users retrieved successfully")
        assert resp.message == "Users retrieved successfully"

    def test_error(self) -> None:
        resp = error_response(2001, "Insufficient balance")
        assert resp.code == 2001
        assert resp.message == "Insufficient balance"
        assert resp.data is None

    def test_serialization(self) -> None:
        resp = success_response({"balance": 600})
        d = resp.model_dump()
        assert isinstance(resp, ApiResponse)
        assert set(d) == {"code", "message", "data", "timestamp", "request_id"}
