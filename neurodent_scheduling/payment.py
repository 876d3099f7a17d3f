"""Appointment fee payments through a hosted gateway checkout.

Flow: create an order on the backend, open the gateway checkout for it,
then hand the gateway's proof back to the backend for verification. The
backend books the appointment when verification succeeds.

The checkout itself is user-interactive and lives outside this package;
it is injected as a CheckoutGateway.
"""
from decimal import Decimal
from typing import Any, Dict, Optional, Protocol

from pydantic import ValidationError as PydanticValidationError

from neurodent_scheduling import config
from neurodent_scheduling.appointment_service import SubmissionResult, parse_submission
from neurodent_scheduling.errors import SubmitConflict
from neurodent_scheduling.http_client import ApiClient
from neurodent_scheduling.logging_config import get_logger
from neurodent_scheduling.models import AppointmentDraft, PaymentOrder, PaymentProof

logger = get_logger(__name__)

CURRENCY_SYMBOLS = {"INR": "₹", "USD": "$", "EUR": "€", "GBP": "£"}


class CheckoutGateway(Protocol):
    """
    Hosted payment checkout.

    open() blocks until the user pays or backs out. Implementations raise
    PaymentCancelled when the user dismisses the checkout and
    PaymentUnavailable when the gateway SDK cannot be loaded.
    """

    def open(
        self,
        order: PaymentOrder,
        draft: AppointmentDraft,
        patient: Optional[Dict[str, Any]] = None
    ) -> PaymentProof:
        ...


class PaymentService:
    """Backend side of the payment flow."""

    def __init__(
        self,
        client: Optional[ApiClient] = None,
        fee: Optional[int] = None,
        currency: Optional[str] = None
    ):
        """
        Args:
            client: API client (default: ApiClient())
            fee: Appointment fee in the smallest currency unit (default: APPOINTMENT_FEE)
            currency: ISO currency code (default: PAYMENT_CURRENCY)
        """
        self.client = client or ApiClient()
        self.fee = config.APPOINTMENT_FEE if fee is None else fee
        self.currency = currency or config.PAYMENT_CURRENCY

    def create_order(self, draft: AppointmentDraft) -> PaymentOrder:
        """
        Create a payment order for the appointment fee.

        Raises:
            AuthRequired, TransientFailure: From the HTTP layer
            SubmitConflict: If the backend refused to create the order or
                returned an order it could not parse
        """
        response = self.client.post("/payments/create-order", json={
            "amount": self.fee,
            "currency": self.currency,
            "appointmentData": draft.to_payload(),
        })

        if not response.ok or not response.data.get("orderId"):
            raise SubmitConflict(
                response.message or "Failed to create payment order",
                status_code=response.status_code
            )

        try:
            order = PaymentOrder.model_validate(response.data)
        except PydanticValidationError as e:
            logger.error("payment_order_malformed", error=str(e))
            raise SubmitConflict("Failed to create payment order", status_code=response.status_code)

        logger.info("payment_order_created", order_id=order.order_id, amount=order.amount)
        return order

    def verify_payment(self, proof: PaymentProof, draft: AppointmentDraft) -> SubmissionResult:
        """Verify a gateway payment; the backend books the appointment on success."""
        payload = proof.to_payload()
        payload["appointmentData"] = draft.to_payload()

        logger.info("payment_verify", order_id=proof.gateway_order_id)
        response = self.client.post("/payments/verify", json=payload)
        return parse_submission(response)

    def format_fee(self) -> str:
        """Fee for display, e.g. "₹500.00"."""
        return format_currency(self.fee, self.currency)


def format_currency(amount_minor: int, currency: str = "INR") -> str:
    """Format an amount given in the smallest currency unit."""
    amount = (Decimal(amount_minor) / 100).quantize(Decimal("0.01"))
    symbol = CURRENCY_SYMBOLS.get(currency.upper())
    if symbol:
        return f"{symbol}{amount:,}"
    return f"{amount:,} {currency.upper()}"
