"""
Payment domain service - Customer linking and payment intents.

The processor customer is attached to a user lazily and at most once:
either by the post-signup follow-up or on the first payment.
"""

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from .exceptions import InvalidPaymentRequest
from .models import PaymentIntentResult, User
from .ports import PaymentGateway, UserRepository

logger = logging.getLogger(__name__)

# Largest amount the processor accepts, in minor units
MAX_MINOR_UNITS = 99_999_999
MAX_AMOUNT = Decimal(MAX_MINOR_UNITS).scaleb(-2)


def to_minor_units(amount: Any) -> int:
    """
    Convert a major-unit amount (e.g. dollars) to minor units (cents).

    Raises:
        InvalidPaymentRequest: If the amount is not a positive number
    """
    if isinstance(amount, bool):
        raise InvalidPaymentRequest()
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise InvalidPaymentRequest() from None
    if not value.is_finite() or value <= 0 or value > MAX_AMOUNT:
        raise InvalidPaymentRequest()
    minor = int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    if minor <= 0:
        raise InvalidPaymentRequest()
    return minor


@dataclass
class PaymentService:
    users: UserRepository
    gateway: PaymentGateway
    default_currency: str = "cad"
    linking_enabled: bool = True

    def ensure_customer(self, user: User) -> str:
        """Return the user's processor customer id, creating it if absent."""
        if user.stripe_customer_id:
            return user.stripe_customer_id

        customer_id = self.gateway.create_customer(user)
        stored = self.users.attach_customer_id(user.id, customer_id)
        if stored != customer_id:
            logger.warning(
                "User %s already linked to customer %s; discarding %s",
                user.id,
                stored,
                customer_id,
            )
        return stored

    def create_intent(
        self,
        user: User,
        amount: Any,
        currency: str | None = None,
        order_data: dict[str, Any] | None = None,
    ) -> PaymentIntentResult:
        """
        Create a payment intent for an authenticated user.

        Raises:
            InvalidPaymentRequest: Non-positive or non-numeric amount
            PaymentProcessorError: Processor rejected a call
        """
        amount_minor = to_minor_units(amount)
        currency = (currency or self.default_currency).strip().lower()

        customer_id = self.ensure_customer(user)
        metadata = {str(k): str(v) for k, v in (order_data or {}).items()}
        metadata["userId"] = str(user.id)

        intent = self.gateway.create_payment_intent(customer_id, amount_minor, currency, metadata)
        logger.info("Payment intent %s created for user %s", intent.id, user.id)
        return PaymentIntentResult(
            client_secret=intent.client_secret,
            customer_id=customer_id,
            payment_intent_id=intent.id,
            amount_minor=amount_minor,
            currency=currency,
            metadata=metadata,
        )

    def link_customer(self, user_id: int) -> None:
        """
        Best-effort follow-up after account creation.

        Never raises: a failure only means the customer is created on first
        payment instead.
        """
        if not self.linking_enabled:
            logger.debug("Customer linking disabled; skipping user %s", user_id)
            return
        try:
            user = self.users.find_by_id(user_id)
            if user is None:
                logger.warning("Skipping customer link: user %s not found", user_id)
                return
            self.ensure_customer(user)
        except Exception:
            logger.warning("Customer link for user %s failed", user_id, exc_info=True)
