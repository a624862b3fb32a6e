"""
In-memory pending registration store - Implements PendingRegistrationStore protocol.

Process-local: a restart drops every pending registration, and several
app instances do not share entries. Request handlers (threadpool) and the
sweeper thread share one instance, so every operation takes the same RLock.
"""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timedelta

from src.domain.models import PendingRegistration

logger = logging.getLogger(__name__)


class InMemoryPendingRegistrationStore:
    """
    Implements PendingRegistrationStore protocol with a locked dict.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, ttl: timedelta) -> None:
        self._ttl = ttl
        self._entries: dict[str, PendingRegistration] = {}
        self._lock = threading.RLock()

    def put(self, registration_id: str, pending: PendingRegistration) -> None:
        with self._lock:
            self._entries[registration_id] = pending

    def get(self, registration_id: str) -> PendingRegistration | None:
        with self._lock:
            return self._entries.get(registration_id)

    def delete(self, registration_id: str) -> None:
        with self._lock:
            self._entries.pop(registration_id, None)

    def sweep(self, now: datetime) -> int:
        """Delete entries whose age exceeds the TTL; return how many were removed."""
        with self._lock:
            expired = [
                registration_id
                for registration_id, pending in self._entries.items()
                if pending.is_expired(now, self._ttl)
            ]
            for registration_id in expired:
                del self._entries[registration_id]

        for registration_id in expired:
            logger.info("Cleaned up expired registration: %s", registration_id)
        return len(expired)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            yield

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
