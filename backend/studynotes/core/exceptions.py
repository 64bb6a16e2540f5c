"""
Custom exception classes for unified error handling.

Every failure the document-to-artifact pipeline can surface has its own class
so callers (and the HTTP layer) can tell them apart. Nothing here is retried
automatically; `retryable` only tells the caller whether trying again later
can help.
"""

from fastapi import HTTPException, status


class AppBaseError(Exception):
    """Base exception for all application errors."""
    status_code: int = status.HTTP_400_BAD_REQUEST
    retryable: bool = False

    def __init__(self, message: str, detail: str | None = None):
        self.message = message
        self.detail = detail
        super().__init__(message)


# ── Upload / extraction ──────────────────────────────────

class UnsupportedFormat(AppBaseError):
    """Raised when an upload declares a format other than plain text or PDF."""
    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE

    def __init__(self, declared_format: str | None):
        super().__init__(
            message=f"Unsupported file type: {declared_format or 'unknown'}",
            detail="Please upload PDF or TXT files.",
        )
        self.declared_format = declared_format


class ExtractionError(AppBaseError):
    """Raised when a supported document cannot be parsed (corrupt, encrypted)."""
    status_code = 422  # Unprocessable Content

    def __init__(self, message: str = "Could not read text from the document", detail: str | None = None):
        super().__init__(message=message, detail=detail)


# ── AI backend ───────────────────────────────────────────

class InvalidArtifactShape(AppBaseError):
    """Raised when the backend's structured output violates the artifact schema."""
    status_code = status.HTTP_502_BAD_GATEWAY
    retryable = True

    def __init__(self, detail: str):
        super().__init__(message="The AI returned a malformed result", detail=detail)


class RateLimited(AppBaseError):
    """Backend signaled throughput exhaustion (HTTP 429)."""
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    retryable = True

    def __init__(self, detail: str | None = None):
        super().__init__(message="Rate limit exceeded. Please try again later.", detail=detail)


class QuotaExceeded(AppBaseError):
    """Backend billing/credits exhausted (HTTP 402). Needs external action."""
    status_code = status.HTTP_402_PAYMENT_REQUIRED

    def __init__(self, detail: str | None = None):
        super().__init__(message="AI credits exhausted. Please add credits to the AI workspace.", detail=detail)


class BackendUnavailable(AppBaseError):
    """Any other backend failure: non-2xx, timeout, malformed response."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    retryable = True

    def __init__(self, detail: str | None = None):
        super().__init__(message="The AI service is unavailable", detail=detail)


# ── Quiz ─────────────────────────────────────────────────

class IncompleteQuiz(AppBaseError):
    """Raised when a quiz is submitted before every question has an answer."""

    def __init__(self, missing: int):
        super().__init__(
            message="Answer every question before submitting",
            detail=f"{missing} question(s) unanswered",
        )
        self.missing = missing


class AlreadyGraded(AppBaseError):
    """Raised on any attempt to change or re-submit a graded quiz."""
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, quiz_id: str):
        super().__init__(
            message="This quiz has already been graded",
            detail="Generate a new quiz to try again.",
        )
        self.quiz_id = quiz_id


class InvalidAnswer(AppBaseError):
    """Raised when an answer targets an unknown question or a non-existent option."""

    def __init__(self, detail: str):
        super().__init__(message="Invalid answer", detail=detail)


# ── Chat ─────────────────────────────────────────────────

class EmptyMessage(AppBaseError):
    """Raised when a chat message is empty after trimming whitespace."""

    def __init__(self):
        super().__init__(message="Message cannot be empty")


class NoPendingMessage(AppBaseError):
    """Raised when a reply is requested but the last message is not an unanswered user message."""
    status_code = status.HTTP_409_CONFLICT

    def __init__(self):
        super().__init__(
            message="There is no question waiting for a reply",
            detail="Send a message first.",
        )


# ── Identity / storage ───────────────────────────────────

class NotAuthenticated(AppBaseError):
    """Raised when the bearer token is missing, invalid or expired."""
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, detail: str = "Please sign in again."):
        super().__init__(message="Not authenticated", detail=detail)


class NotFoundError(AppBaseError):
    """Raised when a row does not exist or is not owned by the current user."""
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str, resource_id: str):
        super().__init__(message=f"{resource} not found", detail=resource_id)


class StorageError(AppBaseError):
    """Pass-through failure from the artifact store."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    retryable = True

    def __init__(self, detail: str | None = None):
        super().__init__(message="Storage operation failed", detail=detail)


# ── Utility: convert to HTTPException ────────────────────

def app_error_to_http(error: AppBaseError, status_code: int | None = None) -> HTTPException:
    """Convert an AppBaseError to an HTTPException with consistent JSON body."""
    return HTTPException(
        status_code=status_code or error.status_code,
        detail={
            "error": error.message,
            "detail": error.detail,
            "type": type(error).__name__,
            "retryable": error.retryable,
        },
    )
