"""
Checkout routes.
"""

from fastapi import APIRouter, Depends

from src.api.dependencies import get_current_user, get_payment_service
from src.api.models import ErrorResponse, PaymentIntentRequest, PaymentIntentResponse
from src.domain.models import User
from src.domain.payments import PaymentService

router = APIRouter(tags=["payments"])


@router.post(
    "/create-payment-intent",
    response_model=PaymentIntentResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid amount"},
        401: {"model": ErrorResponse, "description": "Not logged in"},
        500: {"model": ErrorResponse, "description": "Payment processing failed"},
    },
    summary="Create a Stripe payment intent for the current user",
)
def create_payment_intent(
    request_data: PaymentIntentRequest,
    user: User = Depends(get_current_user),
    payments: PaymentService = Depends(get_payment_service),
) -> PaymentIntentResponse:
    """
    Create a payment intent, creating the user's Stripe customer on first use.

    - **amount**: Amount in major units (e.g. 19.99)
    - **currency**: ISO currency code, defaults to the configured currency
    - **orderData**: Flat key/value pairs copied into the intent metadata
    """
    result = payments.create_intent(
        user,
        request_data.amount,
        currency=request_data.currency,
        order_data=request_data.order_data,
    )
    return PaymentIntentResponse(client_secret=result.client_secret, customer_id=result.customer_id)
