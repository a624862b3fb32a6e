"""
Domain layer - Pure business logic with zero framework imports.

This package contains the core business logic for email-verified signup,
login and checkout. It defines its own port interfaces for infrastructure
abstraction, ensuring true hexagonal architecture decoupling.
"""

from .accounts import AccountService
from .exceptions import (
    DependencyFailure,
    EmailAlreadyRegistered,
    EmailDeliveryError,
    InvalidCredentials,
    InvalidPaymentRequest,
    InvalidSignupData,
    InvalidVerificationCode,
    NotAuthenticated,
    PaymentProcessorError,
    RegistrationError,
    RegistrationNotFound,
    TooManyAttempts,
    UserNotFound,
    UserStoreUnavailable,
    VerificationCodeExpired,
)
from .models import NewUser, PendingRegistration, SignupDetails, User
from .payments import PaymentService
from .ports import EmailSender, PaymentGateway, PendingRegistrationStore, TokenIssuer, UserRepository
from .registration import SignupPolicy, VerificationService

__all__ = [
    "AccountService",
    "DependencyFailure",
    "EmailAlreadyRegistered",
    "EmailDeliveryError",
    "EmailSender",
    "InvalidCredentials",
    "InvalidPaymentRequest",
    "InvalidSignupData",
    "InvalidVerificationCode",
    "NewUser",
    "NotAuthenticated",
    "PaymentGateway",
    "PaymentProcessorError",
    "PaymentService",
    "PendingRegistration",
    "PendingRegistrationStore",
    "RegistrationError",
    "RegistrationNotFound",
    "SignupDetails",
    "SignupPolicy",
    "TokenIssuer",
    "TooManyAttempts",
    "User",
    "UserNotFound",
    "UserRepository",
    "UserStoreUnavailable",
    "VerificationCodeExpired",
    "VerificationService",
]
