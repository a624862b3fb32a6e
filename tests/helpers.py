"""
Test doubles and builders shared across unit and integration tests.
"""

import itertools
import re
from dataclasses import replace
from datetime import date, datetime, timedelta

from src.domain.exceptions import (
    EmailAlreadyRegistered,
    EmailDeliveryError,
    PaymentProcessorError,
    UserNotFound,
)
from src.domain.models import NewUser, PaymentIntent, SignupDetails, User

TEST_SECRET = "test-secret-key-with-enough-length-for-hs256"
CODE_PATTERN = re.compile(r"\b(\d{6})\b")


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class InMemoryUserRepository:
    """UserRepository fake with case-insensitive email uniqueness."""

    def __init__(self) -> None:
        self.users: dict[int, User] = {}
        self._ids = itertools.count(1)

    def find_by_email(self, email: str) -> User | None:
        for user in self.users.values():
            if user.email.lower() == email.lower():
                return user
        return None

    def find_by_id(self, user_id: int) -> User | None:
        return self.users.get(user_id)

    def create(self, new_user: NewUser) -> User:
        if self.find_by_email(new_user.email) is not None:
            raise EmailAlreadyRegistered()
        user = User(id=next(self._ids), **vars(new_user))
        self.users[user.id] = user
        return user

    def attach_customer_id(self, user_id: int, customer_id: str) -> str:
        user = self.users.get(user_id)
        if user is None:
            raise UserNotFound()
        if user.stripe_customer_id is None:
            self.users[user_id] = replace(user, stripe_customer_id=customer_id)
        return self.users[user_id].stripe_customer_id

    def record_login(self, user_id: int, at: datetime) -> None:
        self.users[user_id] = replace(self.users[user_id], last_login=at)


class RecordingEmailSender:
    """EmailSender fake that keeps every message; can be told to fail."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []
        self.fail = False

    def send(self, to: str, subject: str, html_body: str) -> None:
        if self.fail:
            raise EmailDeliveryError()
        self.sent.append((to, subject, html_body))

    def last_code(self) -> str:
        _, _, body = self.sent[-1]
        return CODE_PATTERN.search(body).group(1)


class FakePaymentGateway:
    """PaymentGateway fake returning predictable ids."""

    def __init__(self) -> None:
        self.customers: list[User] = []
        self.intents: list[dict] = []
        self.fail_customer = False

    def create_customer(self, user: User) -> str:
        if self.fail_customer:
            raise PaymentProcessorError()
        self.customers.append(user)
        return f"cus_test{len(self.customers)}"

    def create_payment_intent(self, customer_id, amount_minor, currency, metadata) -> PaymentIntent:
        self.intents.append(
            {"customer": customer_id, "amount": amount_minor, "currency": currency, "metadata": metadata}
        )
        n = len(self.intents)
        return PaymentIntent(id=f"pi_test{n}", client_secret=f"pi_test{n}_secret_abc")


def make_details(**overrides) -> SignupDetails:
    """Valid signup submission; override any field."""
    fields = {
        "email": "a@b.com",
        "password": "longenough1",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "dob": date(2000, 1, 1),
        "street": "123 Book Street",
        "city": "Toronto",
        "province": "ON",
        "postal_code": "M5V 2T6",
    }
    fields.update(overrides)
    return SignupDetails(**fields)


def make_user(**overrides) -> User:
    fields = {
        "id": 1,
        "email": "a@b.com",
        "password_hash": "$2b$04$notarealhashnotarealhashnotarealhashnotarealhashnot",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "street": "123 Book Street",
        "city": "Toronto",
        "province": "ON",
        "postal_code": "M5V 2T6",
    }
    fields.update(overrides)
    return User(**fields)


def signup_payload(**overrides) -> dict:
    """Valid JSON body for POST /signup/initiate."""
    payload = {
        "email": "a@b.com",
        "password": "longenough1",
        "firstName": "Ada",
        "lastName": "Lovelace",
        "dob": "2000-01-01",
        "street": "123 Book Street",
        "city": "Toronto",
        "province": "ON",
        "postalCode": "M5V 2T6",
    }
    payload.update(overrides)
    return payload
