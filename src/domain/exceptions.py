"""
Domain exceptions - Semantic error types for accounts and signup.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
Each error carries a user-facing message and a stable machine code;
the API layer maps them to HTTP status codes.
"""


class RegistrationError(Exception):
    """Base class for account domain errors."""

    code = "error"
    message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidSignupData(RegistrationError):
    """A submitted field is missing or malformed."""

    code = "validation_error"
    message = "Invalid registration data"


class EmailAlreadyRegistered(RegistrationError):
    """An account already exists for this email (case-insensitive)."""

    code = "duplicate_email"
    message = "Email already registered. Please log in or use a different email."


class RegistrationNotFound(RegistrationError):
    """Pending registration never existed, expired, or was discarded."""

    code = "registration_not_found"
    message = "Registration expired or invalid. Please start again."


class InvalidVerificationCode(RegistrationError):
    """Submitted code does not match; the registration survives."""

    code = "invalid_code"
    message = "Invalid verification code. Please try again."

    def __init__(self, attempts_remaining: int) -> None:
        self.attempts_remaining = attempts_remaining
        super().__init__()


class TooManyAttempts(RegistrationError):
    """Attempt limit reached; the registration has been discarded."""

    code = "too_many_attempts"
    message = "Too many failed attempts. Please restart registration."


class VerificationCodeExpired(RegistrationError):
    """Code is older than the verification window; the registration has been discarded."""

    code = "code_expired"
    message = "Verification code expired. Please request a new one."


class InvalidCredentials(RegistrationError):
    """Login email/password pair did not match an account."""

    code = "invalid_credentials"
    message = "Invalid credentials"


class NotAuthenticated(RegistrationError):
    """No valid auth token accompanied the request."""

    code = "unauthorized"
    message = "Unauthorized"


class UserNotFound(RegistrationError):
    """Authenticated user no longer exists."""

    code = "user_not_found"
    message = "User not found"


class InvalidPaymentRequest(RegistrationError):
    """Payment request payload is malformed."""

    code = "invalid_payment_request"
    message = "Invalid amount"


class DependencyFailure(RegistrationError):
    """An external collaborator (email, database, payment processor) failed."""

    code = "dependency_failure"
    message = "Something went wrong. Please try again."


class EmailDeliveryError(DependencyFailure):
    """Email could not be handed to the delivery service."""


class UserStoreUnavailable(DependencyFailure):
    """Durable user store rejected or could not run a query."""


class PaymentProcessorError(DependencyFailure):
    """Payment processor call failed."""

    message = "Payment processing failed"
