"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
JSON keys are camelCase on the wire; snake_case is accepted on input too.
"""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class InitiateSignupRequest(ApiModel):
    """Request model for starting an email-verified signup."""

    email: EmailStr
    password: str = Field(..., description="User password (min 8 characters)")
    first_name: str
    last_name: str
    dob: date = Field(..., description="Date of birth, YYYY-MM-DD")
    street: str
    city: str
    province: str = Field(..., description="Two-letter province code")
    postal_code: str = Field(..., description="Postal code, e.g. A1A 1A1")
    preferred_name: str | None = None
    phone: str | None = Field(default=None, description="(555) 123-4567")
    unit_number: str | None = None
    country: str = "CA"


class InitiateSignupResponse(ApiModel):
    success: bool = True
    registration_id: str
    message: str


class VerifySignupRequest(ApiModel):
    registration_id: str
    verification_code: str = Field(..., description="6-digit verification code")


class PublicUser(ApiModel):
    """Public profile fields returned to the owner of the account."""

    id: int
    email: str
    first_name: str | None = None
    last_name: str | None = None


class VerifySignupResponse(ApiModel):
    success: bool = True
    user: PublicUser
    token: str
    redirect_url: str


class ResendCodeRequest(ApiModel):
    registration_id: str


class ResendCodeResponse(ApiModel):
    success: bool = True
    message: str


class RegistrationStatusResponse(ApiModel):
    exists: bool
    email: str
    time_remaining: str = Field(..., description="Remaining validity as m:ss")
    attempts: int


class SignupRequest(ApiModel):
    """Request model for the direct (unverified) signup route."""

    email: str
    password: str
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None


class LoginRequest(ApiModel):
    email: str
    password: str


class SuccessRedirect(ApiModel):
    success: bool = True
    redirect_url: str


class LoginResponse(SuccessRedirect):
    user: PublicUser


class ProfileResponse(PublicUser):
    preferred_name: str | None = None
    phone: str | None = None
    email_verified: bool
    has_payment_customer: bool


class PaymentIntentRequest(ApiModel):
    amount: float | str | None = Field(default=None, description="Amount in major units, e.g. 19.99")
    currency: str | None = None
    order_data: dict[str, Any] = Field(default_factory=dict)


class PaymentIntentResponse(ApiModel):
    client_secret: str
    customer_id: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error: str
    code: str | None = None
