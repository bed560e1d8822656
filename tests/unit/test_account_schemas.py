"""Tests for sm_account Pydantic schemas."""

import pytest
from pydantic import ValidationError

from src.sm_account.application.schemas import BuyRequest, DebitResponse, UserResponse
from src.sm_account.domain.models import User


class TestBuyRequest:
    def test_valid(self) -> None:
        req = BuyRequest.model_validate({"userId": 1, "amount": 400})
        assert req.user_id == 1
        assert req.amount == 400

    def test_whole_float_coerced(self) -> None:
        req = BuyRequest.model_validate({"userId": 1, "amount": 10.0})
        assert req.amount == 10
        assert isinstance(req.amount, int)

    def test_fractional_amount_rejected(self) -> None:
        with pytest.raises(ValidationError):
            BuyRequest.model_validate({"userId": 1, "amount": 10.5})

    @pytest.mark.parametrize("amount", [0, -100])
    def test_non_positive_amount_rejected(self, amount: int) -> None:
        with pytest.raises(ValidationError):
            BuyRequest.model_validate({"userId": 1, "amount": amount})

    def test_non_positive_user_rejected(self) -> None:
        with pytest.raises(ValidationError):
            BuyRequest.model_validate({"userId": 0, "amount": 1})


class TestResponses:
    def test_user_response(self) -> None:
        user = User(id=1, balance=1000, email="test@example.com")
        assert UserResponse.from_domain(user).model_dump() == {
            "id": 1,
            "balance": 1000,
            "email": "test@example.com",
        }

    def test_debit_response_hides_email(self) -> None:
        user = User(id=1, balance=600, email="test@example.com")
        assert DebitResponse.from_domain(user).model_dump() == {"id": 1, "balance": 600}
