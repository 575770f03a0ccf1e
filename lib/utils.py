# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

import secrets
from datetime import datetime, timezone
from typing import Any


# =============================================================================
# Identifier Utilities
# =============================================================================

def generate_public_id(prefix: str) -> str:
    """
    Build a human-facing identifier for a new row.

    Every entity has a numeric primary key plus a prefixed public id
    (PROD-, ORD-, PAY-, ...) made of 4 random bytes in hex.

    Example:
        generate_public_id("ORD")  # "ORD-9f86d081"
    """
    return f"{prefix}-{secrets.token_hex(4)}"


def utc_now() -> datetime:
    """Naive UTC timestamp, the form stored by every backend."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Base error class for application-specific errors.

    Provides actionable error messages following the principle:
    "Errors should tell HOW to fix, not just WHAT failed."

    Attributes:
        code: Error code for categorization
        message: Human-readable error message
        suggestion: Actionable suggestion for fixing the error
        details: Additional context for debugging

    Example:
        class MyStorageError(ApplicationError):
            def __init__(self, message: str, **kwargs):
                super().__init__(message, code="MY_STORAGE_ERROR", **kwargs)
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "details": self.details,
        }
