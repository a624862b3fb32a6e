"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from contextlib import AbstractContextManager
from datetime import datetime
from typing import Any, Protocol

from .models import NewUser, PaymentIntent, PendingRegistration, User


class PendingRegistrationStore(Protocol):
    """
    Port interface for short-lived pending registrations.

    Entries live only between initiate and a terminal transition
    (verified, expired, attempts exhausted). Nothing here is durable.
    """

    def put(self, registration_id: str, pending: PendingRegistration) -> None:
        """
        Insert a new pending registration.

        The caller generates a fresh random id; no uniqueness check is made.
        """
        ...

    def get(self, registration_id: str) -> PendingRegistration | None:
        """Return the live entry, or None if absent."""
        ...

    def delete(self, registration_id: str) -> None:
        """Remove an entry. Deleting a missing id is a no-op."""
        ...

    def sweep(self, now: datetime) -> int:
        """
        Delete every entry older than the store's TTL.

        Returns:
            Number of entries removed
        """
        ...

    def transaction(self) -> AbstractContextManager[Any]:
        """
        Hold the store's lock across a read-modify-write sequence.

        Entries returned by get() may only be mutated inside a transaction.
        """
        ...


class UserRepository(Protocol):
    """Port interface for durable user accounts."""

    def find_by_email(self, email: str) -> User | None:
        """Case-insensitive lookup."""
        ...

    def find_by_id(self, user_id: int) -> User | None: ...

    def create(self, new_user: NewUser) -> User:
        """
        Persist a new user.

        Raises:
            EmailAlreadyRegistered: If the email is taken (unique constraint)
            UserStoreUnavailable: On any other storage failure
        """
        ...

    def attach_customer_id(self, user_id: int, customer_id: str) -> str:
        """
        Attach a payment customer id if none is set yet.

        Returns:
            The customer id stored on the user after the call; this is the
            existing one when another request attached first.
        """
        ...

    def record_login(self, user_id: int, at: datetime) -> None: ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    def send(self, to: str, subject: str, html_body: str) -> None:
        """
        Deliver an HTML email.

        Raises:
            EmailDeliveryError: If the message could not be handed off
        """
        ...


class TokenIssuer(Protocol):
    """Port interface for authentication tokens."""

    def issue(self, user: User) -> str: ...

    def decode(self, token: str) -> dict[str, Any] | None:
        """Return the token claims, or None if invalid or expired."""
        ...


class PaymentGateway(Protocol):
    """Port interface for the external payment processor."""

    def create_customer(self, user: User) -> str:
        """Create a processor-side customer and return its id."""
        ...

    def create_payment_intent(
        self,
        customer_id: str,
        amount_minor: int,
        currency: str,
        metadata: dict[str, str],
    ) -> PaymentIntent: ...
