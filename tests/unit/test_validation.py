"""
Unit tests for signup field validation helpers.
"""

from datetime import date

import pytest

from src.domain.exceptions import InvalidSignupData
from src.domain.validation import (
    age_cutoff,
    check_age,
    check_name,
    check_postal_code,
    normalize_email,
    normalize_postal_code,
    validate_signup,
)
from tests.helpers import make_details


class TestNormalization:
    def test_email_trimmed_and_lowercased(self) -> None:
        assert normalize_email("  Ada@Example.COM ") == "ada@example.com"

    def test_postal_code_trimmed_and_uppercased(self) -> None:
        assert normalize_postal_code(" k1a 0b1 ") == "K1A 0B1"


class TestAgeCutoff:
    def test_regular_date(self) -> None:
        assert age_cutoff(date(2026, 6, 15), 13) == date(2013, 6, 15)

    def test_leap_day_maps_to_feb_28(self) -> None:
        assert age_cutoff(date(2024, 2, 29), 13) == date(2011, 2, 28)

    def test_birthday_today_is_old_enough(self) -> None:
        check_age(date(2013, 6, 15), date(2026, 6, 15), 13)

    def test_day_before_birthday_is_too_young(self) -> None:
        with pytest.raises(InvalidSignupData, match="You must be at least 13 years old to register"):
            check_age(date(2013, 6, 16), date(2026, 6, 15), 13)


class TestPostalCode:
    @pytest.mark.parametrize("postal_code", ["M5V 2T6", "k1a 0b1", " H0H 0H0 "])
    def test_valid(self, postal_code) -> None:
        check_postal_code(postal_code)

    @pytest.mark.parametrize("postal_code", ["M5V2T6", "M5V  2T6", "5MV 2T6", "", "M5V 2T"])
    def test_invalid(self, postal_code) -> None:
        with pytest.raises(InvalidSignupData, match=r"Please enter a valid postal code \(e.g., A1A 1A1\)"):
            check_postal_code(postal_code)


class TestName:
    @pytest.mark.parametrize("name", ["A", "x" * 51])
    def test_length_bounds(self, name) -> None:
        with pytest.raises(InvalidSignupData, match="First name must be between 2 and 50 characters"):
            check_name(name, "First name")

    def test_trimmed_before_counting(self) -> None:
        with pytest.raises(InvalidSignupData):
            check_name(" A ", "First name")


class TestAddressLengths:
    @pytest.mark.parametrize(
        ("field", "value", "message"),
        [
            ("street", "1 A", "Street must be between 5 and 100 characters"),
            ("street", "x" * 101, "Street must be between 5 and 100 characters"),
            ("city", "T", "City must be between 2 and 50 characters"),
            ("city", "x" * 51, "City must be between 2 and 50 characters"),
            ("preferred_name", "x" * 51, "Preferred name must be at most 50 characters"),
            ("unit_number", "x" * 21, "Unit number must be at most 20 characters"),
        ],
    )
    def test_out_of_range_rejected(self, field, value, message) -> None:
        with pytest.raises(InvalidSignupData, match=message):
            validate_signup(
                make_details(**{field: value}),
                today=date(2026, 6, 15),
                min_password_length=8,
                minimum_age_years=13,
            )

    def test_optional_fields_may_be_omitted_or_short(self) -> None:
        validate_signup(
            make_details(preferred_name=None, unit_number="4"),
            today=date(2026, 6, 15),
            min_password_length=8,
            minimum_age_years=13,
        )


class TestValidateSignup:
    def test_valid_details_pass(self) -> None:
        validate_signup(make_details(), today=date(2026, 6, 15), min_password_length=8, minimum_age_years=13)

    def test_first_problem_reported(self) -> None:
        """Missing fields are reported before password length."""
        details = make_details(password="short", city=None)

        with pytest.raises(InvalidSignupData, match="Missing required field: city"):
            validate_signup(details, today=date(2026, 6, 15), min_password_length=8, minimum_age_years=13)

    def test_non_canadian_country_rejected(self) -> None:
        with pytest.raises(InvalidSignupData, match="Canada"):
            validate_signup(
                make_details(country="US"),
                today=date(2026, 6, 15),
                min_password_length=8,
                minimum_age_years=13,
            )

    def test_error_code(self) -> None:
        with pytest.raises(InvalidSignupData) as exc_info:
            validate_signup(
                make_details(email=""),
                today=date(2026, 6, 15),
                min_password_length=8,
                minimum_age_years=13,
            )
        assert exc_info.value.code == "validation_error"
        assert exc_info.value.message == "Missing required field: email"
