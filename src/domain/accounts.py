"""
Account domain service - Login and direct signup.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from .exceptions import EmailAlreadyRegistered, InvalidCredentials, InvalidSignupData
from .models import NewUser, SignupDetails, User
from .passwords import hash_password, verify_password
from .ports import TokenIssuer, UserRepository
from .registration import utc_now
from .validation import check_password, normalize_email, require_fields

logger = logging.getLogger(__name__)


@dataclass
class AccountService:
    """Session-level account operations that bypass the verification flow."""

    users: UserRepository
    token_issuer: TokenIssuer
    min_password_length: int = 8
    bcrypt_cost: int = 10
    clock: Callable[[], datetime] = utc_now

    def login(self, email: str, password: str) -> tuple[User, str]:
        """
        Authenticate by email and password.

        The bcrypt comparison always runs, even for unknown emails.

        Raises:
            InvalidCredentials: Unknown email or wrong password
        """
        user = self.users.find_by_email(normalize_email(email))
        password_ok = verify_password(password, user.password_hash if user else None)
        if user is None or not password_ok:
            raise InvalidCredentials()

        self.users.record_login(user.id, self.clock())
        logger.info("User %s logged in", user.id)
        return user, self.token_issuer.issue(user)

    def signup(self, details: SignupDetails) -> tuple[User, str]:
        """
        Create an unverified account immediately.

        Raises:
            InvalidSignupData: Missing email/password or short password
            EmailAlreadyRegistered: If the email is taken
        """
        require_fields(details, {"email": "email", "password": "password"})
        check_password(details.password, self.min_password_length)

        email = normalize_email(details.email)
        if "@" not in email:
            raise InvalidSignupData("Please enter a valid email")
        if self.users.find_by_email(email) is not None:
            raise EmailAlreadyRegistered()

        user = self.users.create(
            NewUser(
                email=email,
                password_hash=hash_password(details.password, rounds=self.bcrypt_cost),
                first_name=details.first_name,
                last_name=details.last_name,
                phone=details.phone,
            )
        )
        logger.info("User %s signed up without verification", user.id)
        return user, self.token_issuer.issue(user)
