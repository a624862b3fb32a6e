"""
Stripe payment gateway adapter - Implements PaymentGateway protocol.

The API key is passed per call instead of being set on the stripe module,
so several gateways (tests, tenants) never share global state.
"""

import logging

import stripe

from src.domain.exceptions import PaymentProcessorError
from src.domain.models import PaymentIntent, User

logger = logging.getLogger(__name__)


def _shipping_address(user: User) -> dict[str, str] | None:
    if not user.street:
        return None
    address = {
        "line1": user.street,
        "city": user.city or "",
        "state": user.province or "",
        "postal_code": user.postal_code or "",
        "country": user.country or "CA",
    }
    if user.unit_number:
        address["line2"] = user.unit_number
    return address


class StripePaymentGateway:
    """
    Implements PaymentGateway protocol via the stripe SDK.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, api_key: str) -> None:
        self._api_key = api_key

    def create_customer(self, user: User) -> str:
        params: dict = {
            "email": user.email,
            "name": user.full_name or None,
            "phone": user.phone,
            "metadata": {"userId": str(user.id), "localCustomerEmail": user.email},
        }
        address = _shipping_address(user)
        if address is not None:
            params["address"] = address
            params["shipping"] = {"name": user.full_name or user.email, "address": address}

        try:
            customer = stripe.Customer.create(
                api_key=self._api_key,
                **{k: v for k, v in params.items() if v is not None},
            )
        except stripe.StripeError as e:
            logger.error("Stripe customer creation failed for user %s: %s", user.id, e)
            raise PaymentProcessorError() from e

        logger.info("Created Stripe customer %s for user %s", customer.id, user.id)
        return customer.id

    def create_payment_intent(
        self,
        customer_id: str,
        amount_minor: int,
        currency: str,
        metadata: dict[str, str],
    ) -> PaymentIntent:
        try:
            intent = stripe.PaymentIntent.create(
                api_key=self._api_key,
                amount=amount_minor,
                currency=currency,
                customer=customer_id,
                automatic_payment_methods={"enabled": True},
                metadata=metadata,
            )
        except stripe.StripeError as e:
            logger.error("Stripe payment intent failed for customer %s: %s", customer_id, e)
            raise PaymentProcessorError() from e

        return PaymentIntent(id=intent.id, client_secret=intent.client_secret)
