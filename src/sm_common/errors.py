"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  2xxx: Account (balance ledger)
  3xxx: Catalog
  9xxx: System
"""

from enum import Enum


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth/User ---

class MissingTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Access denied! No token provided.", 403)


class InvalidTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Unauthorized! Invalid token.", 401)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid email or password", 401)


class InvalidPasswordError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "Invalid password", 400)


class SamePasswordError(AppError):
    def __init__(self) -> None:
        super().__init__(1005, "Old password and new password should not be the same", 400)


class UserNotFoundError(AppError):
    def __init__(self, ref: int | str) -> None:
        super().__init__(1006, f"User not found: {ref}", 404)


# --- 2xxx: Account ---

class RejectionReason(str, Enum):
    USER_NOT_FOUND = "USER_NOT_FOUND"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"


class DebitRejectedError(AppError):
    """Well-formed debit that violates a ledger rule. The transaction is rolled back."""

    def __init__(self, code: int, message: str, reason: RejectionReason) -> None:
        self.reason = reason
        super().__init__(code, message, 400)


class InsufficientBalanceError(DebitRejectedError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient balance: required {required}, available {available}",
            RejectionReason.INSUFFICIENT_BALANCE,
        )


class AccountNotFoundError(DebitRejectedError):
    def __init__(self, user_id: int) -> None:
        super().__init__(
            2002,
            f"Account not found for user {user_id}",
            RejectionReason.USER_NOT_FOUND,
        )


# --- 3xxx: Catalog ---

class CatalogFetchError(AppError):
    def __init__(self, detail: str = "Failed to fetch items") -> None:
        super().__init__(3001, detail, 502)


class CacheUnavailableError(AppError):
    def __init__(self) -> None:
        super().__init__(3002, "Internal server error (cache)", 503)


# --- 9xxx: System ---

class StoreError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Internal server error (store)", 500)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class ValidationFailedError(AppError):
    def __init__(self, detail: str = "Invalid request") -> None:
        super().__init__(9003, detail, 400)
