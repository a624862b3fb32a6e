"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A controllable clock for expiry tests
- In-memory fakes for the user repository, email sender and payment gateway
- A wired VerificationService over the in-memory pending store
- Dependency overrides that point the API at those fakes
"""

from datetime import datetime, timezone

import pytest

from src.adapters.pending.memory import InMemoryPendingRegistrationStore
from src.adapters.tokens.jwt_tokens import JwtTokenIssuer
from src.api.dependencies import (
    get_clock,
    get_email_sender,
    get_payment_gateway,
    get_pending_store,
    get_signup_policy,
    get_token_issuer,
    get_user_repository,
)
from src.config.settings import Settings, get_settings
from src.domain.registration import SignupPolicy, VerificationService
from tests.helpers import (
    TEST_SECRET,
    FakeClock,
    FakePaymentGateway,
    InMemoryUserRepository,
    RecordingEmailSender,
)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 6, 15, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def policy() -> SignupPolicy:
    # Minimum bcrypt cost keeps the suite fast
    return SignupPolicy(bcrypt_cost=4, brand_name="Storefront")


@pytest.fixture
def store(policy: SignupPolicy) -> InMemoryPendingRegistrationStore:
    return InMemoryPendingRegistrationStore(ttl=policy.ttl)


@pytest.fixture
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def gateway() -> FakePaymentGateway:
    return FakePaymentGateway()


@pytest.fixture
def token_issuer() -> JwtTokenIssuer:
    # Wall-clock issuer: PyJWT checks exp against real time on decode
    return JwtTokenIssuer(secret_key=TEST_SECRET)


@pytest.fixture
def service(
    store: InMemoryPendingRegistrationStore,
    users: InMemoryUserRepository,
    email_sender: RecordingEmailSender,
    token_issuer: JwtTokenIssuer,
    policy: SignupPolicy,
    clock: FakeClock,
) -> VerificationService:
    return VerificationService(
        store=store,
        users=users,
        email_sender=email_sender,
        token_issuer=token_issuer,
        policy=policy,
        clock=clock,
    )


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        bcrypt_cost=4,
        jwt_secret_key=TEST_SECRET,
        stripe_secret_key="sk_test_dummy",
    )


@pytest.fixture
def dependency_overrides(
    test_settings: Settings,
    store: InMemoryPendingRegistrationStore,
    users: InMemoryUserRepository,
    email_sender: RecordingEmailSender,
    gateway: FakePaymentGateway,
    token_issuer: JwtTokenIssuer,
    policy: SignupPolicy,
    clock: FakeClock,
) -> dict:
    """Replace infrastructure providers; the real service factories stay wired."""
    return {
        get_settings: lambda: test_settings,
        get_pending_store: lambda: store,
        get_user_repository: lambda: users,
        get_email_sender: lambda: email_sender,
        get_payment_gateway: lambda: gateway,
        get_token_issuer: lambda: token_issuer,
        get_signup_policy: lambda: policy,
        get_clock: lambda: clock,
    }
