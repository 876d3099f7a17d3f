"""Booking and reschedule orchestration.

One call runs one attempt to a terminal state:

    IDLE -> VALIDATING -> INVALID
    VALIDATING -> PAYMENT_PENDING -> PAYMENT_FAILED | PAYMENT_CONFIRMED
    PAYMENT_CONFIRMED | VALIDATING -> SUBMITTING -> SUBMITTED | SUBMIT_FAILED

The orchestrator keeps no state between calls. It does not dedupe or retry;
callers guard against double submission (disable the button while a call
is in flight) and retry by calling again, which re-validates and re-pays.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from neurodent_scheduling.appointment_service import AppointmentService, SubmissionResult
from neurodent_scheduling.booking_window import BookingPurpose, clinic_now
from neurodent_scheduling.errors import (
    AuthRequired,
    PaymentCancelled,
    PaymentUnavailable,
    SchedulingError,
    SubmitConflict,
    TransientFailure,
)
from neurodent_scheduling.logging_config import generate_attempt_id, get_logger
from neurodent_scheduling.models import AppointmentDraft, AppointmentRecord, PaymentProof
from neurodent_scheduling.payment import CheckoutGateway, PaymentService
from neurodent_scheduling.validation import validate_appointment


SUPPORT_MESSAGE = (
    "Your payment was received but the appointment could not be confirmed. "
    "Please contact support with payment reference {payment_id}."
)
SUPPORT_HINT = "Please choose another slot or contact support if the problem persists."


class BookingState(str, Enum):
    """States of one booking or reschedule attempt."""
    IDLE = "idle"
    VALIDATING = "validating"
    INVALID = "invalid"
    PAYMENT_PENDING = "payment_pending"
    PAYMENT_FAILED = "payment_failed"
    PAYMENT_CONFIRMED = "payment_confirmed"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"
    SUBMIT_FAILED = "submit_failed"


class PaymentFailureReason(str, Enum):
    """Why the payment step ended without a payment."""
    CANCELLED = "cancelled"
    UNAVAILABLE = "unavailable"
    ORDER_FAILED = "order_failed"


# Pattern: Current state -> [allowed next states]
VALID_TRANSITIONS: Dict[BookingState, List[BookingState]] = {
    BookingState.IDLE: [BookingState.VALIDATING],
    BookingState.VALIDATING: [
        BookingState.INVALID,
        BookingState.PAYMENT_PENDING,
        BookingState.SUBMITTING,  # No payment required
    ],
    BookingState.PAYMENT_PENDING: [
        BookingState.PAYMENT_FAILED,
        BookingState.PAYMENT_CONFIRMED,
    ],
    BookingState.PAYMENT_CONFIRMED: [BookingState.SUBMITTING],
    BookingState.SUBMITTING: [
        BookingState.SUBMITTED,
        BookingState.SUBMIT_FAILED,
    ],
    BookingState.INVALID: [],
    BookingState.PAYMENT_FAILED: [],
    BookingState.SUBMITTED: [],
    BookingState.SUBMIT_FAILED: [],
}

TERMINAL_STATES = frozenset(state for state, nxt in VALID_TRANSITIONS.items() if not nxt)


def validate_transition(current: BookingState, intended: BookingState) -> bool:
    """
    Validate state transition.

    Example:
        >>> validate_transition(BookingState.PAYMENT_PENDING, BookingState.SUBMITTING)
        False
    """
    return intended in VALID_TRANSITIONS.get(current, [])


@dataclass
class BookingOutcome:
    """Terminal result of one attempt."""
    purpose: BookingPurpose
    attempt_id: str
    state: BookingState = BookingState.IDLE
    appointment: Optional[AppointmentRecord] = None
    errors: List[str] = field(default_factory=list)
    error: Optional[SchedulingError] = None
    payment_failure: Optional[PaymentFailureReason] = None
    payment_proof: Optional[PaymentProof] = None
    history: List[BookingState] = field(default_factory=lambda: [BookingState.IDLE])

    @property
    def succeeded(self) -> bool:
        return self.state == BookingState.SUBMITTED

    @property
    def payment_taken(self) -> bool:
        return self.payment_proof is not None

    @property
    def message(self) -> str:
        """User-facing message for the terminal state."""
        if self.state == BookingState.SUBMITTED:
            if self.purpose == BookingPurpose.RESCHEDULE:
                return "Appointment rescheduled successfully!"
            return "Appointment booked successfully!"
        if self.state == BookingState.INVALID:
            return self.errors[0]
        if self.state == BookingState.PAYMENT_FAILED:
            if self.payment_failure == PaymentFailureReason.CANCELLED:
                return "Payment was cancelled. Please try again if you want to book the appointment."
            if self.payment_failure == PaymentFailureReason.UNAVAILABLE:
                return "Payment gateway not available. Please try again later."
            return str(self.error) if self.error else "Error processing payment. Please try again."
        if self.state == BookingState.SUBMIT_FAILED:
            if self.payment_taken:
                return SUPPORT_MESSAGE.format(payment_id=self.payment_proof.gateway_payment_id)
            if isinstance(self.error, SubmitConflict):
                return f"{str(self.error).rstrip('.')}. {SUPPORT_HINT}"
            return str(self.error) if self.error else "Could not complete the request. Please try again."
        return ""

    def advance(self, state: BookingState):
        if not validate_transition(self.state, state):
            raise RuntimeError(f"Invalid booking transition {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)


class BookingOrchestrator:
    """Sequences validation, payment and submission for one attempt."""

    def __init__(
        self,
        appointments: AppointmentService,
        payments: Optional[PaymentService] = None,
        checkout: Optional[CheckoutGateway] = None,
        clock: Optional[Callable[[], datetime]] = None,
        logger=None
    ):
        """
        Args:
            appointments: Appointments API client
            payments: Payment backend (required for paid attempts)
            checkout: Gateway checkout (required for paid attempts)
            clock: Current clinic time (default: clinic_now)
            logger: structlog logger bound per attempt (default: module logger)
        """
        self.appointments = appointments
        self.payments = payments
        self.checkout = checkout
        self.clock = clock or clinic_now
        self.logger = logger or get_logger(__name__)

    def book(
        self,
        draft: Union[AppointmentDraft, Mapping[str, Any]],
        payment_required: bool = True,
        patient: Optional[Dict[str, Any]] = None
    ) -> BookingOutcome:
        """
        Book a new appointment.

        Paid bookings are submitted through payment verification, which books
        on the backend; unpaid bookings go to POST /appointments/book.
        """
        draft = self._coerce(draft)

        def submit(proof: Optional[PaymentProof]) -> SubmissionResult:
            if proof is not None:
                return self.payments.verify_payment(proof, draft)
            return self.appointments.book_appointment(draft)

        return self._run(BookingPurpose.BOOK, draft, payment_required, patient, submit)

    def reschedule(
        self,
        appointment_id: str,
        draft: Union[AppointmentDraft, Mapping[str, Any]],
        payment_required: bool = False,
        patient: Optional[Dict[str, Any]] = None
    ) -> BookingOutcome:
        """Move an existing appointment; same-day targets are rejected."""
        draft = self._coerce(draft)

        def submit(proof: Optional[PaymentProof]) -> SubmissionResult:
            return self.appointments.reschedule_appointment(appointment_id, draft, proof)

        return self._run(BookingPurpose.RESCHEDULE, draft, payment_required, patient, submit)

    def cancel(self, appointment_id: str) -> SubmissionResult:
        """
        Cancel an appointment.

        Raises:
            SubmitConflict: If the backend refused (e.g. already cancelled)
            AuthRequired, TransientFailure: From the HTTP layer
        """
        result = self.appointments.cancel_appointment(appointment_id)
        if not result.success:
            raise SubmitConflict(
                result.message or "Appointment could not be cancelled",
                status_code=result.status_code
            )
        return result

    @staticmethod
    def _coerce(draft) -> AppointmentDraft:
        if isinstance(draft, AppointmentDraft):
            return draft
        if isinstance(draft, Mapping):
            return AppointmentDraft.model_validate(dict(draft))
        raise TypeError(f"Expected AppointmentDraft or mapping, got {type(draft).__name__}")

    def _run(
        self,
        purpose: BookingPurpose,
        draft: AppointmentDraft,
        payment_required: bool,
        patient: Optional[Dict[str, Any]],
        submit: Callable[[Optional[PaymentProof]], SubmissionResult]
    ) -> BookingOutcome:
        if payment_required and (self.payments is None or self.checkout is None):
            raise ValueError("payment_required needs both a PaymentService and a CheckoutGateway")

        outcome = BookingOutcome(purpose=purpose, attempt_id=generate_attempt_id())
        log = self.logger.bind(attempt_id=outcome.attempt_id, purpose=purpose.value)

        outcome.advance(BookingState.VALIDATING)
        validation = validate_appointment(draft, now=self.clock(), purpose=purpose)
        if not validation.is_valid:
            outcome.errors = validation.errors
            outcome.advance(BookingState.INVALID)
            log.info("attempt_invalid", errors=validation.errors)
            return outcome

        proof = None
        if payment_required:
            proof = self._pay(outcome, draft, patient, log)
            if proof is None:
                return outcome

        outcome.advance(BookingState.SUBMITTING)
        try:
            result = submit(proof)
        except (AuthRequired, TransientFailure) as e:
            outcome.error = e
            outcome.advance(BookingState.SUBMIT_FAILED)
            log.error(
                "attempt_submit_error",
                error=str(e),
                error_type=type(e).__name__,
                payment_taken=outcome.payment_taken,
            )
            return outcome

        if not result.success:
            outcome.error = SubmitConflict(
                result.message or "The selected slot is no longer available",
                payment_taken=outcome.payment_taken,
                status_code=result.status_code,
            )
            outcome.advance(BookingState.SUBMIT_FAILED)
            log.error(
                "attempt_rejected",
                status=result.status_code,
                message=result.message,
                payment_taken=outcome.payment_taken,
            )
            return outcome

        outcome.appointment = result.appointment
        outcome.advance(BookingState.SUBMITTED)
        log.info(
            "attempt_submitted",
            appointment_id=result.appointment.id if result.appointment else None
        )
        return outcome

    def _pay(self, outcome: BookingOutcome, draft: AppointmentDraft, patient, log) -> Optional[PaymentProof]:
        """Run the payment step; returns the proof, or None after recording the failure."""
        outcome.advance(BookingState.PAYMENT_PENDING)
        try:
            order = self.payments.create_order(draft)
            proof = self.checkout.open(order, draft, patient)
        except PaymentCancelled as e:
            outcome.payment_failure = PaymentFailureReason.CANCELLED
            outcome.error = e
            log.info("payment_cancelled")
        except PaymentUnavailable as e:
            outcome.payment_failure = PaymentFailureReason.UNAVAILABLE
            outcome.error = e
            log.warning("payment_unavailable", error=str(e))
        except (AuthRequired, TransientFailure, SubmitConflict) as e:
            outcome.payment_failure = PaymentFailureReason.ORDER_FAILED
            outcome.error = e
            log.warning("payment_order_failed", error=str(e), error_type=type(e).__name__)
        else:
            outcome.payment_proof = proof
            outcome.advance(BookingState.PAYMENT_CONFIRMED)
            log.info("payment_confirmed", payment_id=proof.gateway_payment_id)
            return proof

        outcome.advance(BookingState.PAYMENT_FAILED)
        return None
