"""
Session routes - direct signup, login, logout and profile.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, Response, status

from src.api.cookies import clear_auth_cookie, set_auth_cookie
from src.api.dependencies import get_account_service, get_current_user, get_payment_service
from src.api.models import (
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    ProfileResponse,
    PublicUser,
    SignupRequest,
    SuccessRedirect,
)
from src.config.settings import Settings, get_settings
from src.domain.accounts import AccountService
from src.domain.models import SignupDetails, User
from src.domain.payments import PaymentService

router = APIRouter(tags=["auth"])

LOGIN_REDIRECT = "/login"
PROFILE_REDIRECT = "/profile"


@router.post(
    "/signup",
    response_model=SuccessRedirect,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Missing fields or email already registered"}},
    summary="Create an account without email verification",
)
def signup(
    request_data: SignupRequest,
    response: Response,
    background_tasks: BackgroundTasks,
    accounts: AccountService = Depends(get_account_service),
    payments: PaymentService = Depends(get_payment_service),
    settings: Settings = Depends(get_settings),
) -> SuccessRedirect:
    user, token = accounts.signup(SignupDetails(**request_data.model_dump(by_alias=False)))

    background_tasks.add_task(payments.link_customer, user.id)
    set_auth_cookie(response, token, settings)
    return SuccessRedirect(redirect_url=LOGIN_REDIRECT)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"model": ErrorResponse, "description": "Invalid credentials"}},
    summary="Log in with email and password",
)
def login(
    request_data: LoginRequest,
    response: Response,
    accounts: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_settings),
) -> LoginResponse:
    user, token = accounts.login(request_data.email, request_data.password)
    set_auth_cookie(response, token, settings)
    return LoginResponse(
        redirect_url=PROFILE_REDIRECT,
        user=PublicUser(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
        ),
    )


@router.post("/logout", response_model=SuccessRedirect, summary="Log out")
def logout(response: Response, settings: Settings = Depends(get_settings)) -> SuccessRedirect:
    clear_auth_cookie(response, settings)
    return SuccessRedirect(redirect_url=LOGIN_REDIRECT)


@router.get(
    "/me",
    response_model=ProfileResponse,
    responses={401: {"model": ErrorResponse, "description": "Not logged in"}},
    summary="Current user's profile",
)
def me(user: User = Depends(get_current_user)) -> ProfileResponse:
    return ProfileResponse(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        preferred_name=user.preferred_name,
        phone=user.phone,
        email_verified=user.email_verified,
        has_payment_customer=bool(user.stripe_customer_id),
    )
