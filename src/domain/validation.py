"""
Signup field validation.

Each check raises InvalidSignupData with the message shown to the user.
Checks run in a fixed order so the first problem reported is stable.
"""

import re
from datetime import date

from .exceptions import InvalidSignupData
from .models import SignupDetails

POSTAL_CODE_PATTERN = re.compile(r"^[A-Z]\d[A-Z] \d[A-Z]\d$")
PHONE_PATTERN = re.compile(r"^\([0-9]{3}\) [0-9]{3}-[0-9]{4}$")
PROVINCES = frozenset(
    ["AB", "BC", "MB", "NB", "NL", "NT", "NS", "NU", "ON", "PE", "QC", "SK", "YT"]
)
SUPPORTED_COUNTRIES = frozenset(["CA"])

# Attribute name -> wire (camelCase) name, in reporting order
REQUIRED_FIELDS = {
    "email": "email",
    "password": "password",
    "first_name": "firstName",
    "last_name": "lastName",
    "dob": "dob",
    "street": "street",
    "city": "city",
    "province": "province",
    "postal_code": "postalCode",
}


def normalize_email(email: str) -> str:
    """
    Normalize email address for consistent storage and lookup.

    Applies: strip whitespace + lowercase
    """
    return email.strip().lower()


def normalize_postal_code(postal_code: str) -> str:
    return postal_code.strip().upper()


def age_cutoff(today: date, minimum_age_years: int) -> date:
    """
    Latest date of birth allowed for someone of the minimum age today.

    Feb 29 maps to Feb 28 in non-leap target years.
    """
    try:
        return today.replace(year=today.year - minimum_age_years)
    except ValueError:
        return today.replace(year=today.year - minimum_age_years, day=28)


def require_fields(details: SignupDetails, fields: dict[str, str] = REQUIRED_FIELDS) -> None:
    for attr, wire_name in fields.items():
        value = getattr(details, attr)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise InvalidSignupData(f"Missing required field: {wire_name}")


def check_password(password: str, min_length: int) -> None:
    if len(password) < min_length:
        raise InvalidSignupData(f"Password must be at least {min_length} characters long")


def check_age(dob: date, today: date, minimum_age_years: int) -> None:
    if dob > age_cutoff(today, minimum_age_years):
        raise InvalidSignupData(
            f"You must be at least {minimum_age_years} years old to register"
        )


def check_postal_code(postal_code: str) -> None:
    if not POSTAL_CODE_PATTERN.match(normalize_postal_code(postal_code)):
        raise InvalidSignupData("Please enter a valid postal code (e.g., A1A 1A1)")


def check_length(value: str | None, label: str, min_length: int, max_length: int) -> None:
    if value is None:
        return
    if not min_length <= len(value.strip()) <= max_length:
        if min_length:
            raise InvalidSignupData(f"{label} must be between {min_length} and {max_length} characters")
        raise InvalidSignupData(f"{label} must be at most {max_length} characters")


def check_name(value: str, label: str) -> None:
    check_length(value, label, 2, 50)


def check_address(details: SignupDetails) -> None:
    check_length(details.preferred_name, "Preferred name", 0, 50)
    check_length(details.unit_number, "Unit number", 0, 20)
    check_length(details.street, "Street", 5, 100)
    check_length(details.city, "City", 2, 50)
    if details.province.strip().upper() not in PROVINCES:
        raise InvalidSignupData("Please select a valid province")
    if (details.country or "CA").strip().upper() not in SUPPORTED_COUNTRIES:
        raise InvalidSignupData("We currently only ship within Canada")
    if details.phone and not PHONE_PATTERN.match(details.phone.strip()):
        raise InvalidSignupData("Please enter a valid phone number, e.g. (555) 123-4567")


def validate_signup(
    details: SignupDetails,
    today: date,
    min_password_length: int,
    minimum_age_years: int,
) -> None:
    """Run every initiate-time check against a full signup submission."""
    require_fields(details)
    check_password(details.password, min_password_length)
    check_age(details.dob, today, minimum_age_years)
    check_postal_code(details.postal_code)
    check_name(details.first_name, "First name")
    check_name(details.last_name, "Last name")
    check_address(details)
