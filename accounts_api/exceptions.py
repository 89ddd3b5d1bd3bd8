"""
Custom exception classes and FastAPI exception handlers.

The service layer raises domain-specific errors without importing HTTP
concepts. The handler layer translates them into status codes and a
consistent JSON body: {"error": "<short title>", "message": "<detail>"}.

Exception hierarchy:
    AccountAPIError (base)
    ├── InvalidRequestError          — malformed input (400)
    ├── AccountNotFoundError         — unknown account id (404)
    ├── UnauthorizedAccessError      — account owned by another customer (403)
    ├── AccountStateConflictError    — lifecycle precondition violated (409)
    └── AccountNumberGenerationError — no unique account number found (500)

Request-shape failures detected by FastAPI itself (RequestValidationError)
are reported as 400 with one entry per violated constraint, and anything
unexpected becomes a 500 that carries no internal detail.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Base exception
# ---------------------------------------------------------------------------

class AccountAPIError(Exception):
    """Base exception for all Account API domain errors."""

    def __init__(self, detail: str = "An error occurred"):
        self.detail = detail
        super().__init__(self.detail)


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------

class InvalidRequestError(AccountAPIError):
    """
    Raised when request input violates one or more field constraints.

    Attributes:
        violations: One {"field": ..., "message": ...} entry per violation.
    """

    def __init__(self, detail: str, violations: list[dict[str, str]] | None = None):
        self.violations = violations or []
        super().__init__(detail)


class AccountNotFoundError(AccountAPIError):
    """Raised when a requested account does not exist."""

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Account not found: {account_id}")


class UnauthorizedAccessError(AccountAPIError):
    """Raised when a customer attempts to access an account they don't own."""

    def __init__(self, detail: str = "Account does not belong to customer"):
        super().__init__(detail)


class AccountStateConflictError(AccountAPIError):
    """Raised when a lifecycle transition's precondition does not hold."""


class AccountNumberGenerationError(AccountAPIError):
    """Raised when a unique account number cannot be established."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            f"Failed to generate a unique account number after {attempts} attempts"
        )


def _format_location(loc: tuple) -> str:
    """("body", "customerDetails", "firstName") -> "customerDetails.firstName"."""
    parts = [str(part) for part in loc]
    if len(parts) > 1 and parts[0] in ("body", "query", "header", "path"):
        parts = parts[1:]
    return ".".join(parts)


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register custom exception handlers with the FastAPI application.

    This is called once during app construction in main.py.
    """

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        violations = [
            {"field": _format_location(tuple(error["loc"])), "message": error["msg"]}
            for error in exc.errors()
        ]
        logger.warning(
            "Request validation failed on %s %s: %d violation(s)",
            request.method, request.url.path, len(violations),
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "Validation failed",
                "message": "; ".join(f"{v['field']}: {v['message']}" for v in violations),
                "violations": violations,
            },
        )

    @app.exception_handler(InvalidRequestError)
    async def invalid_request_handler(
        request: Request, exc: InvalidRequestError
    ) -> JSONResponse:
        logger.warning("Invalid request data: %s", exc.detail)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "Invalid request data",
                "message": exc.detail,
                "violations": exc.violations,
            },
        )

    @app.exception_handler(AccountNotFoundError)
    async def account_not_found_handler(
        request: Request, exc: AccountNotFoundError
    ) -> JSONResponse:
        logger.warning("Account not found: %s", exc.account_id)
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={
                "error": "Account not found",
                "message": exc.detail,
                "accountId": exc.account_id,
            },
        )

    @app.exception_handler(UnauthorizedAccessError)
    async def unauthorized_access_handler(
        request: Request, exc: UnauthorizedAccessError
    ) -> JSONResponse:
        # Nothing about the account itself goes into this body
        logger.warning("Access denied on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"error": "Access denied", "message": exc.detail},
        )

    @app.exception_handler(AccountStateConflictError)
    async def state_conflict_handler(
        request: Request, exc: AccountStateConflictError
    ) -> JSONResponse:
        logger.warning("Account cannot be closed: %s", exc.detail)
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"error": "Account cannot be closed", "message": exc.detail},
        )

    @app.exception_handler(AccountNumberGenerationError)
    async def generation_error_handler(
        request: Request, exc: AccountNumberGenerationError
    ) -> JSONResponse:
        logger.error("Account number generation failed after %d attempts", exc.attempts)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Account number generation failed", "message": exc.detail},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.error(
            "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error",
                "message": "An unexpected error occurred",
            },
        )
