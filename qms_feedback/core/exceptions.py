"""Custom exceptions for the feedback client.

Every failure raised by an API client is one of these; raw httpx, asyncio and
decoding errors are translated in ``qms_feedback.integrations.http``.
"""

from typing import Any


class FeedbackClientError(Exception):
    """Base exception for all feedback client exceptions."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        recoverable: bool = False,
    ):
        self.message = message
        self.error_code = error_code or "UNKNOWN_ERROR"
        self.details = details or {}
        self.recoverable = recoverable
        super().__init__(self.message)


# Transport Exceptions
class NetworkError(FeedbackClientError):
    """Raised on a transport-level failure."""

    def __init__(self, message: str = "Network error", details: dict | None = None):
        super().__init__(
            message=message,
            error_code="NETWORK_ERROR",
            details=details,
            recoverable=True,
        )


class NoConnectivityError(NetworkError):
    """Raised when the API host cannot be reached at all."""

    def __init__(
        self,
        message: str = "No internet connection. Please check your network settings.",
    ):
        super().__init__(message=message)
        self.error_code = "NO_CONNECTIVITY"


class RequestTimeoutError(FeedbackClientError):
    """Raised when a request exceeds the client-side timeout."""

    def __init__(self, timeout: float | None = None):
        super().__init__(
            message="Request timed out. Please try again.",
            error_code="TIMEOUT",
            details={"timeout": timeout},
            recoverable=True,
        )


# Response Exceptions
class MalformedResponseError(FeedbackClientError):
    """Raised when a response body cannot be decoded."""

    def __init__(
        self,
        message: str = "Data format error. Please contact support.",
        details: dict | None = None,
    ):
        super().__init__(
            message=message,
            error_code="MALFORMED_RESPONSE",
            details=details,
        )


class HttpStatusError(FeedbackClientError):
    """Raised when the API answers with an unexpected status code."""

    def __init__(self, status_code: int, message: str | None = None):
        super().__init__(
            message=message or f"Unexpected status code: {status_code}",
            error_code="HTTP_STATUS_ERROR",
            details={"status_code": status_code},
        )
        self.status_code = status_code


class ServerRejectionError(FeedbackClientError):
    """Raised when the API answers with ``success: false``."""

    def __init__(self, message: str = "Request rejected by server"):
        super().__init__(message=message, error_code="SERVER_REJECTION")


# Validation Exceptions
class ValidationError(FeedbackClientError):
    """Raised when a request is rejected before it is sent."""

    def __init__(self, message: str = "Validation failed", details: dict | None = None):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details=details,
            recoverable=True,
        )


class NoRatingError(ValidationError):
    """Raised when feedback is submitted without a 1-5 rating."""

    def __init__(self, rating: int | None = None):
        super().__init__(
            message="Please select a rating",
            details={"rating": rating},
        )
        self.error_code = "NO_RATING"


class DuplicateSubmissionError(ValidationError):
    """Raised when feedback for a ticket is already being submitted."""

    def __init__(self, ticket_number: str):
        super().__init__(
            message=f"Feedback for ticket {ticket_number} is already being submitted",
            details={"ticket_number": ticket_number},
        )
        self.error_code = "DUPLICATE_SUBMISSION"


class UnknownError(FeedbackClientError):
    """Raised for any failure not covered above."""

    def __init__(self, detail: str):
        super().__init__(
            message=f"An unexpected error occurred: {detail}",
            error_code="UNKNOWN_ERROR",
            details={"detail": detail},
        )
