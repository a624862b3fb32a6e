"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from collections.abc import Callable
from datetime import datetime, timedelta
from functools import lru_cache

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from psycopg_pool import ConnectionPool

from src.adapters.payments.stripe_gateway import StripePaymentGateway
from src.adapters.repository.postgres import PostgresUserRepository
from src.adapters.smtp.console import ConsoleEmailSender
from src.adapters.smtp.mailgun import MailgunEmailSender
from src.adapters.tokens.jwt_tokens import JwtTokenIssuer
from src.config.settings import Settings, get_settings
from src.domain.accounts import AccountService
from src.domain.exceptions import NotAuthenticated, UserNotFound
from src.domain.models import User
from src.domain.payments import PaymentService
from src.domain.ports import (
    EmailSender,
    PaymentGateway,
    PendingRegistrationStore,
    TokenIssuer,
    UserRepository,
)
from src.domain.registration import SignupPolicy, VerificationService, utc_now


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_pending_store(request: Request) -> PendingRegistrationStore:
    """Process-wide pending store created in the lifespan (shared with the sweeper)."""
    return request.app.state.pending_store


def get_clock() -> Callable[[], datetime]:
    return utc_now


def get_user_repository(request: Request) -> UserRepository:
    """Create repository with connection pool from app state."""
    pool = get_pool(request)
    return PostgresUserRepository(pool)


@lru_cache
def get_email_sender() -> EmailSender:
    """Mailgun when configured, console logging otherwise (singleton)."""
    settings = get_settings()
    if settings.mailgun_configured:
        return MailgunEmailSender(
            api_key=settings.mailgun_api_key,
            domain=settings.mailgun_domain,
            from_address=settings.email_from,
            from_name=settings.brand_name,
            base_url=settings.mailgun_base_url,
        )
    return ConsoleEmailSender()


@lru_cache
def get_token_issuer() -> TokenIssuer:
    settings = get_settings()
    return JwtTokenIssuer(
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(days=settings.token_ttl_days),
    )


@lru_cache
def get_payment_gateway() -> PaymentGateway:
    return StripePaymentGateway(api_key=get_settings().stripe_secret_key)


def get_signup_policy(settings: Settings = Depends(get_settings)) -> SignupPolicy:
    return SignupPolicy(
        ttl=timedelta(seconds=settings.verification_ttl_seconds),
        max_attempts=settings.max_verification_attempts,
        minimum_age_years=settings.minimum_age_years,
        min_password_length=settings.min_password_length,
        bcrypt_cost=settings.bcrypt_cost,
        brand_name=settings.brand_name,
    )


def get_verification_service(
    store: PendingRegistrationStore = Depends(get_pending_store),
    users: UserRepository = Depends(get_user_repository),
    email_sender: EmailSender = Depends(get_email_sender),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    policy: SignupPolicy = Depends(get_signup_policy),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> VerificationService:
    """
    Create verification service with injected dependencies.

    Wires together the pending store, user repository, email sender and
    token issuer for the domain service.
    """
    return VerificationService(
        store=store,
        users=users,
        email_sender=email_sender,
        token_issuer=token_issuer,
        policy=policy,
        clock=clock,
    )


def get_account_service(
    users: UserRepository = Depends(get_user_repository),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    settings: Settings = Depends(get_settings),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> AccountService:
    return AccountService(
        users=users,
        token_issuer=token_issuer,
        min_password_length=settings.min_password_length,
        bcrypt_cost=settings.bcrypt_cost,
        clock=clock,
    )


def get_payment_service(
    users: UserRepository = Depends(get_user_repository),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    settings: Settings = Depends(get_settings),
) -> PaymentService:
    return PaymentService(
        users=users,
        gateway=gateway,
        default_currency=settings.default_currency,
        linking_enabled=bool(settings.stripe_secret_key),
    )


# Bearer scheme for OpenAPI documentation; the auth cookie is accepted too
http_bearer = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    users: UserRepository = Depends(get_user_repository),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    settings: Settings = Depends(get_settings),
) -> User:
    """
    Resolve the authenticated user from the auth cookie or a Bearer header.

    Raises:
        NotAuthenticated: No token, or token invalid/expired
        UserNotFound: Token is valid but the account is gone
    """
    token = credentials.credentials if credentials else request.cookies.get(settings.auth_cookie_name)
    payload = token_issuer.decode(token) if token else None
    if not payload:
        raise NotAuthenticated()

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise NotAuthenticated() from None

    user = users.find_by_id(user_id)
    if user is None:
        raise UserNotFound()
    return user
