"""
Signup verification routes.

- POST /signup/initiate - Validate details and email a verification code
- POST /signup/verify - Create the account from a correct code
- POST /signup/resend-code - Issue a fresh code
- GET /signup/status/{registration_id} - Inspect a pending registration
"""

from fastapi import APIRouter, BackgroundTasks, Depends, Response, status

from src.api.cookies import set_auth_cookie
from src.api.dependencies import get_payment_service, get_verification_service
from src.api.errors import error_response
from src.api.models import (
    ErrorResponse,
    InitiateSignupRequest,
    InitiateSignupResponse,
    PublicUser,
    RegistrationStatusResponse,
    ResendCodeRequest,
    ResendCodeResponse,
    VerifySignupRequest,
    VerifySignupResponse,
)
from src.config.settings import Settings, get_settings
from src.domain.exceptions import RegistrationNotFound
from src.domain.models import SignupDetails
from src.domain.payments import PaymentService
from src.domain.registration import VerificationService

router = APIRouter(prefix="/signup", tags=["signup"])

PROFILE_REDIRECT = "/profile"


@router.post(
    "/initiate",
    response_model=InitiateSignupResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error or email already registered"},
        500: {"model": ErrorResponse, "description": "Verification email could not be sent"},
    },
    summary="Start an email-verified signup",
)
def initiate_signup(
    request_data: InitiateSignupRequest,
    service: VerificationService = Depends(get_verification_service),
) -> InitiateSignupResponse:
    """
    Validate the submitted profile and email a 6-digit verification code.

    Nothing is written to the user store until the code is verified.
    """
    details = SignupDetails(**request_data.model_dump(by_alias=False))
    registration_id = service.initiate(details)
    return InitiateSignupResponse(
        registration_id=registration_id,
        message="Verification code sent to your email",
    )


@router.post(
    "/verify",
    response_model=VerifySignupResponse,
    responses={400: {"model": ErrorResponse, "description": "Unknown, expired or wrong code"}},
    summary="Verify the emailed code and create the account",
)
def verify_signup(
    request_data: VerifySignupRequest,
    response: Response,
    background_tasks: BackgroundTasks,
    service: VerificationService = Depends(get_verification_service),
    payments: PaymentService = Depends(get_payment_service),
    settings: Settings = Depends(get_settings),
) -> VerifySignupResponse:
    """
    Create the account, sign the user in and schedule payment-customer linking.

    Customer linking runs after the response and never affects it.
    """
    result = service.verify(request_data.registration_id, request_data.verification_code)
    user = result.user

    background_tasks.add_task(payments.link_customer, user.id)
    set_auth_cookie(response, result.token, settings)

    return VerifySignupResponse(
        user=PublicUser(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
        ),
        token=result.token,
        redirect_url=PROFILE_REDIRECT,
    )


@router.post(
    "/resend-code",
    response_model=ResendCodeResponse,
    responses={400: {"model": ErrorResponse, "description": "Registration expired or unknown"}},
    summary="Send a new verification code",
)
def resend_code(
    request_data: ResendCodeRequest,
    service: VerificationService = Depends(get_verification_service),
) -> ResendCodeResponse:
    service.resend(request_data.registration_id)
    return ResendCodeResponse(message="New verification code sent!")


@router.get(
    "/status/{registration_id}",
    response_model=RegistrationStatusResponse,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": "Registration not found"}},
    summary="Check a pending registration",
)
def registration_status(
    registration_id: str,
    service: VerificationService = Depends(get_verification_service),
):
    try:
        pending = service.status(registration_id)
    except RegistrationNotFound as e:
        return error_response(e, status.HTTP_404_NOT_FOUND)

    return RegistrationStatusResponse(
        exists=True,
        email=pending.email,
        time_remaining=pending.format_time_remaining(),
        attempts=pending.attempts,
    )
