"""
Custom exception classes and FastAPI exception handlers.

The service layer raises domain errors (a field failing its rule, an account
the backend cannot find) without importing HTTP concepts. The handlers
registered here translate them into JSON responses with a consistent shape:

    {"detail": "error message", "error_type": "..."}

Exception hierarchy:
    AccountPortalError (base)
    ├── FieldValidationError         — a field fails its format rule (400)
    │   └── NoChangesError           — an update that changes nothing (400)
    ├── AccountNotFoundError         — backend has no such account/customer (404)
    ├── ConcurrentModificationError  — backend reports a version conflict (409)
    └── UpstreamError                — backend failure of any other kind (500)
"""

import enum
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Base exception
# ---------------------------------------------------------------------------

class AccountPortalError(Exception):
    """Base exception for all Account Portal domain errors."""

    def __init__(self, detail: str = "An error occurred"):
        self.detail = detail
        super().__init__(self.detail)


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------

class FieldValidationError(AccountPortalError):
    """
    Raised when a request fails a field-level rule.

    Attributes:
        field: The first offending field, or None for whole-body errors.
        errors: Every offending field mapped to its message.
    """

    def __init__(
        self,
        field: str | None,
        detail: str,
        errors: dict[str, str] | None = None,
    ):
        self.field = field
        if errors is None:
            errors = {field: detail} if field else {}
        self.errors = errors
        super().__init__(detail)


class NoChangesError(FieldValidationError):
    """Raised when a submitted update matches the loaded record exactly."""

    def __init__(self):
        super().__init__(None, "No changes detected")


class AccountNotFoundError(AccountPortalError):
    """Raised when the backend reports the account or its customer missing."""

    def __init__(self, account_id: str, detail: str = "Account not found in the system"):
        self.account_id = account_id
        super().__init__(detail)


class ConcurrentModificationError(AccountPortalError):
    """Raised when the backend rejects an update made against a stale record."""

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(
            "Record was modified by another user. Please refresh and try again."
        )


class UpstreamErrorKind(str, enum.Enum):
    """Structured classification of a failed backend call."""

    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNEXPECTED = "unexpected"


class UpstreamError(AccountPortalError):
    """
    Raised by the upstream client when a call does not succeed.

    Attributes:
        kind: What went wrong, used by the service layer to remap the error.
        status_code: The backend's status, or None for transport failures.
    """

    def __init__(
        self,
        kind: UpstreamErrorKind,
        status_code: int | None = None,
        detail: str = "Upstream request failed",
    ):
        self.kind = kind
        self.status_code = status_code
        super().__init__(detail)


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register custom exception handlers with the FastAPI application.

    Called once during app creation in main.py.
    """

    @app.exception_handler(FieldValidationError)
    async def field_validation_handler(
        request: Request, exc: FieldValidationError
    ) -> JSONResponse:
        error_type = "no_changes" if isinstance(exc, NoChangesError) else "validation_error"
        return JSONResponse(
            status_code=400,
            content={
                "detail": exc.detail,
                "error_type": error_type,
                "field": exc.field,
                "errors": exc.errors,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # Malformed JSON and bad query parameters use the same 400 shape
        errors: dict[str, str] = {}
        for error in exc.errors():
            location = [str(part) for part in error.get("loc", ()) if part != "body"]
            errors[".".join(location) or "body"] = error.get("msg", "Invalid request")

        if any(error.get("type") == "json_invalid" for error in exc.errors()):
            detail = "Request body must be valid JSON"
        else:
            detail = next(iter(errors.values()), "Invalid request")
        return JSONResponse(
            status_code=400,
            content={
                "detail": detail,
                "error_type": "validation_error",
                "field": None,
                "errors": errors,
            },
        )

    @app.exception_handler(AccountNotFoundError)
    async def account_not_found_handler(
        request: Request, exc: AccountNotFoundError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content={"detail": exc.detail, "error_type": "account_not_found"},
        )

    @app.exception_handler(ConcurrentModificationError)
    async def concurrent_modification_handler(
        request: Request, exc: ConcurrentModificationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=409,
            content={"detail": exc.detail, "error_type": "concurrent_modification"},
        )

    @app.exception_handler(UpstreamError)
    async def upstream_error_handler(
        request: Request, exc: UpstreamError
    ) -> JSONResponse:
        logger.error(
            "Upstream failure on %s %s: kind=%s status=%s",
            request.method,
            request.url.path,
            exc.kind.value,
            exc.status_code,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": exc.detail, "error_type": "upstream_error"},
        )
