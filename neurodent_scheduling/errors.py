"""Error taxonomy for the scheduling core.

Normalizer and validator errors never reach the network layer. Collaborator
failures are classified into AuthRequired / TransientFailure and surfaced
as-is; payment outcomes and submission rejections get their own types so
callers can word their messages correctly.
"""
from typing import List, Optional


class SchedulingError(Exception):
    """Base class for every error raised by this package."""
    pass


class FormatError(SchedulingError, ValueError):
    """Raised when a time or date string does not match the expected format."""
    pass


class ValidationError(SchedulingError):
    """Raised when an appointment draft breaks one or more booking rules."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Invalid appointment")


class AuthRequired(SchedulingError):
    """Raised on HTTP 401 from any collaborator API."""

    def __init__(self, message: str = "Please log in to continue"):
        super().__init__(message)


class TransientFailure(SchedulingError):
    """Raised on network errors, timeouts and 5xx responses (retryable)."""

    def __init__(
        self,
        message: str = "Service temporarily unavailable. Please try again.",
        cause: Optional[BaseException] = None,
        status_code: Optional[int] = None
    ):
        self.cause = cause
        self.status_code = status_code
        super().__init__(message)


class PaymentCancelled(SchedulingError):
    """Raised when the user dismisses the payment gateway checkout."""

    def __init__(self, message: str = "Payment cancelled by user"):
        super().__init__(message)


class PaymentUnavailable(SchedulingError):
    """Raised when the payment gateway SDK cannot be loaded."""

    def __init__(self, message: str = "Payment gateway not available"):
        super().__init__(message)


class SubmitConflict(SchedulingError):
    """
    Raised when the backend rejects a booking or reschedule after validation.

    payment_taken is True when the gateway already confirmed a payment for
    this attempt, in which case the user must be sent to support.
    """

    def __init__(
        self,
        message: str = "The selected slot is no longer available",
        payment_taken: bool = False,
        status_code: Optional[int] = None
    ):
        self.payment_taken = payment_taken
        self.status_code = status_code
        super().__init__(message)
