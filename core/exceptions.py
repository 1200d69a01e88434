"""
Custom exceptions for the sync pipeline with structured error context.

Every exception carries a human-readable message, a context dictionary
(which call, which resource, status code, ...) and optionally the original
exception it wraps. Transport adapters translate HTTP outcomes into the
typed errors below so callers dispatch on exception type rather than on
response attributes.

Exception Hierarchy:
    SyncException (base)
    ├── NotFoundError       (HTTP 404 - resource absent, drives create-on-miss)
    ├── RateLimitedError    (HTTP 409 - bank feed polled too early)
    ├── TransportError      (other HTTP status or network failure)
    ├── BankFeedError       (wrapped FIO api failure)
    └── CheckpointError     (checkpoint store failure)
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone


class SyncException(Exception):
    """
    Base exception for all sync-related errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (url, account, status code, etc.)
        original_exception: The original exception that was caught (if any)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.now(timezone.utc)

        self.context["error_timestamp"] = self.timestamp.isoformat()

        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Transport Errors
# ============================================================================

class NotFoundError(SyncException):
    """
    Resource not found (HTTP 404).

    Expected by the account reconciler: a missing account is created
    instead of being reported.
    """
    pass


class RateLimitedError(SyncException):
    """
    Bank feed refused the call because it came too early (HTTP 409).

    FIO allows one statement download per token every 20 seconds.
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None,
        retry_after: Optional[float] = None
    ):
        super().__init__(message, context, original_exception)
        self.retry_after = retry_after
        if retry_after:
            self.context["retry_after"] = retry_after


class TransportError(SyncException):
    """
    Any other failed HTTP exchange.

    Context should include:
        - url: The endpoint that failed (token redacted)
        - status_code: HTTP status code (absent for network failures)
        - response_body: Response body (truncated)
    """

    @property
    def status_code(self) -> Optional[int]:
        return self.context.get("status_code")


# ============================================================================
# Component Errors
# ============================================================================

class BankFeedError(SyncException):
    """Wrapped failure of a call to the FIO api."""
    pass


class CheckpointError(SyncException):
    """
    Exception raised when checkpoint management fails.

    Context should include:
        - namespace: Checkpoint namespace
        - account_number: Account the checkpoint belongs to
        - operation: Operation that failed (read, write)
    """
    pass
