"""
JWT token issuer adapter - Implements TokenIssuer protocol with PyJWT.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from src.domain.models import User

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class JwtTokenIssuer:
    """
    Issues and decodes signed auth tokens.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(days=7),
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._ttl = ttl
        self._clock = clock

    def issue(self, user: User) -> str:
        now = self._clock()
        # PyJWT expects "sub" to be a string
        payload = {
            "sub": str(user.id),
            "email": user.email,
            "iat": now,
            "exp": now + self._ttl,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def decode(self, token: str) -> dict[str, Any] | None:
        if not token:
            return None
        try:
            return jwt.decode(token.strip(), self._secret_key, algorithms=[self._algorithm])
        except jwt.PyJWTError as e:
            logger.debug("Rejected auth token: %s", e)
            return None
