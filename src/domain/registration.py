"""
Signup verification domain service - Pending registration state machine.

This module contains the core business logic for email-verified signup.
A registration lives in the pending store until it reaches a terminal state;
only the VERIFIED transition creates a durable user.

Verification State Machine
==========================

States:
- NONE: No pending entry for the registration id
- INITIATED: Pending entry stored, code emailed, awaiting verification
- VERIFIED: Terminal, user created, pending entry deleted
- EXPIRED / ABANDONED: Terminal, pending entry deleted without a user

Valid Transitions:
    NONE      -> INITIATED  (initiate: validation passed, email sent)
    INITIATED -> INITIATED  (wrong code below the attempt limit, or resend)
    INITIATED -> VERIFIED   (correct code inside the window)
    INITIATED -> EXPIRED    (code older than the window, on verify or sweep)
    INITIATED -> ABANDONED  (attempt limit reached)

Every read-modify-write of a pending entry happens inside
store.transaction(); email and database I/O run outside it.
"""

import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from .emails import verification_email
from .exceptions import (
    DependencyFailure,
    EmailAlreadyRegistered,
    InvalidVerificationCode,
    RegistrationNotFound,
    TooManyAttempts,
    VerificationCodeExpired,
)
from .models import NewUser, PendingRegistration, RegistrationStatus, SignupDetails, VerifiedSignup
from .passwords import hash_password
from .ports import EmailSender, PendingRegistrationStore, TokenIssuer, UserRepository
from .validation import normalize_email, normalize_postal_code, validate_signup

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def generate_verification_code() -> str:
    """
    Generate a cryptographically secure 6-digit verification code.

    Uniform over 100000-999999, so the code never has a leading zero.
    """
    return str(secrets.randbelow(900000) + 100000)


def generate_registration_id() -> str:
    return secrets.token_hex(16)


@dataclass(frozen=True)
class SignupPolicy:
    """Tunable limits for the verification flow."""

    ttl: timedelta = timedelta(minutes=10)
    max_attempts: int = 5
    minimum_age_years: int = 13
    min_password_length: int = 8
    bcrypt_cost: int = 10
    brand_name: str = "Storefront"

    @property
    def ttl_minutes(self) -> int:
        return int(self.ttl.total_seconds() // 60)


@dataclass
class VerificationService:
    """
    Domain service for email-verified signup.

    Orchestrates initiate, verify, resend and status over the pending store,
    the durable user repository and the email sender.
    """

    store: PendingRegistrationStore
    users: UserRepository
    email_sender: EmailSender
    token_issuer: TokenIssuer
    policy: SignupPolicy = field(default_factory=SignupPolicy)
    clock: Callable[[], datetime] = utc_now
    code_generator: Callable[[], str] = generate_verification_code

    def initiate(self, details: SignupDetails) -> str:
        """
        Validate a signup, park it in the pending store and email a code.

        Args:
            details: Full signup submission with plaintext password

        Returns:
            Registration id the client uses for verify/resend/status

        Raises:
            InvalidSignupData: If a field is missing or malformed
            EmailAlreadyRegistered: If an account already uses the email
            EmailDeliveryError: If the email could not be sent (entry is rolled back)
        """
        now = self.clock()
        validate_signup(
            details,
            today=now.date(),
            min_password_length=self.policy.min_password_length,
            minimum_age_years=self.policy.minimum_age_years,
        )

        email = normalize_email(details.email)
        if self.users.find_by_email(email) is not None:
            raise EmailAlreadyRegistered()

        profile = self._build_profile(details, email)
        registration_id = generate_registration_id()
        pending = PendingRegistration(
            registration_id=registration_id,
            profile=profile,
            verification_code=self.code_generator(),
            created_at=now,
        )
        self.store.put(registration_id, pending)

        try:
            self._send_code(pending.email, profile.first_name, pending.verification_code, now)
        except DependencyFailure:
            self.store.delete(registration_id)
            logger.warning("Rolled back registration %s after email failure", registration_id)
            raise

        logger.info("Registration %s initiated", registration_id)
        return registration_id

    def verify(self, registration_id: str, code: str) -> VerifiedSignup:
        """
        Check a submitted code and create the user on success.

        Raises:
            RegistrationNotFound: Unknown, expired-and-swept, or already used id
            VerificationCodeExpired: Code older than the window (entry deleted)
            InvalidVerificationCode: Wrong code below the attempt limit
            TooManyAttempts: Wrong code reaching the limit (entry deleted)
            EmailAlreadyRegistered: Another registration for the email completed first
            UserStoreUnavailable: Persistence failed (entry restored for retry)
        """
        now = self.clock()
        with self.store.transaction():
            pending = self.store.get(registration_id)
            if pending is None:
                raise RegistrationNotFound()

            if pending.is_expired(now, self.policy.ttl):
                self.store.delete(registration_id)
                logger.info("Registration %s expired on verify", registration_id)
                raise VerificationCodeExpired()

            matched = code.isascii() and secrets.compare_digest(pending.verification_code, code)
            if not matched:
                pending.attempt_count += 1
                if pending.attempt_count >= self.policy.max_attempts:
                    self.store.delete(registration_id)
                    logger.info("Registration %s abandoned after %d attempts", registration_id, pending.attempt_count)
                    raise TooManyAttempts()
                raise InvalidVerificationCode(
                    attempts_remaining=self.policy.max_attempts - pending.attempt_count
                )

            # Claim the entry so a concurrent verify with the same code sees NOT_FOUND
            self.store.delete(registration_id)

        try:
            user = self.users.create(pending.profile.mark_verified(now))
        except EmailAlreadyRegistered:
            logger.info("Registration %s lost the race for its email", registration_id)
            raise
        except DependencyFailure:
            with self.store.transaction():
                self.store.put(registration_id, pending)
            raise

        logger.info("Registration %s verified as user %s", registration_id, user.id)
        return VerifiedSignup(user=user, token=self.token_issuer.issue(user))

    def resend(self, registration_id: str) -> None:
        """
        Issue a fresh code, restart the window and reset attempts.

        Raises:
            RegistrationNotFound: If the registration is gone or expired
            EmailDeliveryError: If the new code could not be sent
        """
        now = self.clock()
        with self.store.transaction():
            pending = self._get_live(registration_id, now)
            pending.verification_code = self.code_generator()
            pending.created_at = now
            pending.attempt_count = 0
            email, first_name, code = pending.email, pending.profile.first_name, pending.verification_code

        self._send_code(email, first_name, code, now)
        logger.info("Registration %s code resent", registration_id)

    def status(self, registration_id: str) -> RegistrationStatus:
        """
        Report a pending registration without changing it.

        Raises:
            RegistrationNotFound: If the registration is gone or expired
        """
        now = self.clock()
        with self.store.transaction():
            pending = self._get_live(registration_id, now)
            return RegistrationStatus(
                registration_id=registration_id,
                email=pending.email,
                time_remaining=self.policy.ttl - pending.age(now),
                attempts=pending.attempt_count,
            )

    def _get_live(self, registration_id: str, now: datetime) -> PendingRegistration:
        pending = self.store.get(registration_id)
        if pending is None or pending.is_expired(now, self.policy.ttl):
            raise RegistrationNotFound()
        return pending

    def _build_profile(self, details: SignupDetails, email: str) -> NewUser:
        return NewUser(
            email=email,
            password_hash=hash_password(details.password, rounds=self.policy.bcrypt_cost),
            first_name=details.first_name.strip(),
            last_name=details.last_name.strip(),
            preferred_name=(details.preferred_name or "").strip() or None,
            dob=details.dob,
            phone=(details.phone or "").strip() or None,
            unit_number=(details.unit_number or "").strip() or None,
            street=details.street.strip(),
            city=details.city.strip(),
            province=details.province.strip().upper(),
            postal_code=normalize_postal_code(details.postal_code),
            country=(details.country or "CA").strip().upper(),
        )

    def _send_code(self, email: str, first_name: str | None, code: str, issued_at: datetime) -> None:
        message = verification_email(
            brand_name=self.policy.brand_name,
            first_name=first_name,
            code=code,
            expires_at=issued_at + self.policy.ttl,
            ttl_minutes=self.policy.ttl_minutes,
        )
        self.email_sender.send(email, message.subject, message.html_body)
