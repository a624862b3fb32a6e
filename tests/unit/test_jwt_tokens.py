"""
Unit tests for JwtTokenIssuer adapter.
"""

from datetime import datetime, timedelta, timezone

import jwt

from src.adapters.tokens.jwt_tokens import JwtTokenIssuer
from tests.helpers import TEST_SECRET, make_user


class TestIssue:
    def test_token_carries_user_claims(self) -> None:
        issuer = JwtTokenIssuer(secret_key=TEST_SECRET)

        token = issuer.issue(make_user(id=42, email="ada@example.com"))

        claims = jwt.decode(token, TEST_SECRET, algorithms=["HS256"])
        assert claims["sub"] == "42"
        assert claims["email"] == "ada@example.com"

    def test_token_expires_after_ttl(self) -> None:
        issued_at = datetime.now(timezone.utc).replace(microsecond=0)
        issuer = JwtTokenIssuer(secret_key=TEST_SECRET, ttl=timedelta(days=7), clock=lambda: issued_at)

        claims = issuer.decode(issuer.issue(make_user()))

        assert claims["exp"] - claims["iat"] == 7 * 24 * 60 * 60


class TestDecode:
    def test_round_trip(self) -> None:
        issuer = JwtTokenIssuer(secret_key=TEST_SECRET)
        assert issuer.decode(issuer.issue(make_user(id=7)))["sub"] == "7"

    def test_wrong_secret_rejected(self) -> None:
        token = JwtTokenIssuer(secret_key="another-secret-key-that-is-long-enough").issue(make_user())

        assert JwtTokenIssuer(secret_key=TEST_SECRET).decode(token) is None

    def test_expired_token_rejected(self) -> None:
        long_ago = datetime(2020, 1, 1, tzinfo=timezone.utc)
        token = JwtTokenIssuer(secret_key=TEST_SECRET, clock=lambda: long_ago).issue(make_user())

        assert JwtTokenIssuer(secret_key=TEST_SECRET).decode(token) is None

    def test_garbage_rejected(self) -> None:
        issuer = JwtTokenIssuer(secret_key=TEST_SECRET)
        assert issuer.decode("not-a-jwt") is None
        assert issuer.decode("") is None
