"""
Domain models - Plain dataclasses shared by services and adapters.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta


@dataclass(frozen=True)
class SignupDetails:
    """Raw signup submission, before validation and hashing."""

    email: str
    password: str
    first_name: str | None = None
    last_name: str | None = None
    dob: date | None = None
    street: str | None = None
    city: str | None = None
    province: str | None = None
    postal_code: str | None = None
    preferred_name: str | None = None
    phone: str | None = None
    unit_number: str | None = None
    country: str = "CA"


@dataclass(frozen=True)
class NewUser:
    """User record ready to be persisted (password already hashed)."""

    email: str
    password_hash: str
    first_name: str | None = None
    last_name: str | None = None
    dob: date | None = None
    street: str | None = None
    city: str | None = None
    province: str | None = None
    postal_code: str | None = None
    preferred_name: str | None = None
    phone: str | None = None
    unit_number: str | None = None
    country: str = "CA"
    email_verified: bool = False
    email_verified_at: datetime | None = None

    def mark_verified(self, at: datetime) -> "NewUser":
        return replace(self, email_verified=True, email_verified_at=at)


@dataclass(frozen=True)
class User:
    """Persisted account."""

    id: int
    email: str
    password_hash: str
    first_name: str | None = None
    last_name: str | None = None
    dob: date | None = None
    street: str | None = None
    city: str | None = None
    province: str | None = None
    postal_code: str | None = None
    preferred_name: str | None = None
    phone: str | None = None
    unit_number: str | None = None
    country: str = "CA"
    email_verified: bool = False
    email_verified_at: datetime | None = None
    stripe_customer_id: str | None = None
    created_at: datetime | None = None
    last_login: datetime | None = None

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


@dataclass
class PendingRegistration:
    """
    Unconfirmed signup awaiting email verification.

    Mutable: resend rewrites the code and timestamps, failed checks bump
    attempt_count. Callers mutate only while holding the store transaction.
    """

    registration_id: str
    profile: NewUser
    verification_code: str
    created_at: datetime
    attempt_count: int = 0

    @property
    def email(self) -> str:
        return self.profile.email

    def age(self, now: datetime) -> timedelta:
        return now - self.created_at

    def is_expired(self, now: datetime, ttl: timedelta) -> bool:
        return self.age(now) > ttl


@dataclass(frozen=True)
class RegistrationStatus:
    """Read-only snapshot of a pending registration."""

    registration_id: str
    email: str
    time_remaining: timedelta
    attempts: int
    exists: bool = True

    def format_time_remaining(self) -> str:
        """Render remaining time as m:ss (floored, never negative)."""
        total = max(int(self.time_remaining.total_seconds()), 0)
        minutes, seconds = divmod(total, 60)
        return f"{minutes}:{seconds:02d}"


@dataclass(frozen=True)
class VerifiedSignup:
    """Outcome of a successful verification."""

    user: User
    token: str


@dataclass(frozen=True)
class PaymentIntent:
    """Payment intent as returned by the processor."""

    id: str
    client_secret: str


@dataclass(frozen=True)
class PaymentIntentResult:
    client_secret: str
    customer_id: str
    payment_intent_id: str
    amount_minor: int
    currency: str
    metadata: dict[str, str] = field(default_factory=dict)
