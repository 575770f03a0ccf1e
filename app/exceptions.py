# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors say HOW to fix, not just WHAT failed.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from lib.storage.base import StorageIntegrityError


class StorefrontException(Exception):
    """
    Base exception for the Storefront API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "STOREFRONT_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Lookup Exceptions
# =============================================================================

class NotFoundError(StorefrontException):
    """Raised when an entity ID doesn't exist."""

    def __init__(self, entity: str, entity_id: Any = None, message: str | None = None):
        details = {"id": entity_id} if entity_id is not None else {}
        super().__init__(
            message=message or f"{entity} not found",
            code=f"{entity.upper().replace(' ', '_')}_NOT_FOUND",
            status_code=404,
            suggestion=f"Check that the {entity.lower()} id is correct",
            details=details,
        )


# =============================================================================
# Auth Exceptions
# =============================================================================

class AuthenticationRequiredError(StorefrontException):
    """Raised when a route needs a logged-in user and none is present."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            message=message,
            code="UNAUTHORIZED",
            status_code=401,
            suggestion="Log in via POST /api/login and send the token as 'Authorization: Bearer <token>'",
        )


class InvalidCredentialsError(StorefrontException):
    """Raised when a username/password pair doesn't match."""

    def __init__(self):
        super().__init__(
            message="Invalid username or password",
            code="INVALID_CREDENTIALS",
            status_code=401,
        )


class PermissionDeniedError(StorefrontException):
    """Raised when the user's role or ownership doesn't allow the action."""

    def __init__(self, message: str = "Forbidden"):
        super().__init__(
            message=message,
            code="FORBIDDEN",
            status_code=403,
        )


# =============================================================================
# Request Exceptions
# =============================================================================

class ValidationFailedError(StorefrontException):
    """Raised when a request body fails business validation."""

    def __init__(self, message: str = "Validation failed", errors: list[Any] | None = None):
        super().__init__(
            message=message,
            code="VALIDATION_FAILED",
            status_code=400,
            details={"errors": errors} if errors else None,
        )


class DuplicateError(StorefrontException):
    """Raised when creating something that must be unique and already exists."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="DUPLICATE",
            status_code=400,
        )


class InsufficientStockError(StorefrontException):
    """Raised when a requested quantity exceeds available stock."""

    def __init__(self, product_name: str | None = None):
        message = (
            f"Not enough stock for {product_name}"
            if product_name
            else "Not enough stock available"
        )
        super().__init__(
            message=message,
            code="INSUFFICIENT_STOCK",
            status_code=400,
            suggestion="Lower the quantity or remove the item from the cart",
        )


class EmptyCartError(StorefrontException):
    """Raised when checking out without any cart items."""

    def __init__(self):
        super().__init__(
            message="Cart is empty",
            code="EMPTY_CART",
            status_code=400,
            suggestion="Add items with POST /api/cart/items before checking out",
        )


class ConflictError(StorefrontException):
    """Raised when a delete would break rows that still reference the target."""

    def __init__(self, message: str, suggestion: str | None = None):
        super().__init__(
            message=message,
            code="CONFLICT",
            status_code=409,
            suggestion=suggestion,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def storefront_exception_handler(
    request: Request,
    exc: StorefrontException
) -> JSONResponse:
    """
    Convert StorefrontException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request body/query validation errors.

    Reported as 400 so clients see one status for every validation failure.
    """
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Validation failed",
            "code": "VALIDATION_FAILED",
            "errors": jsonable_encoder(exc.errors()),
        }
    )


async def integrity_exception_handler(
    request: Request,
    exc: StorageIntegrityError
) -> JSONResponse:
    """Rows still referencing the target of a delete surface as 409."""
    return JSONResponse(
        status_code=409,
        content={
            "detail": exc.message,
            "code": "CONFLICT",
            "suggestion": exc.suggestion,
        }
    )
