"""
Integration tests for PostgresUserRepository.

Tests repository operations against a real PostgreSQL database.
Requires PostgreSQL to be running (via docker-compose); skipped otherwise.
"""

from collections.abc import Generator
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timezone

import pytest
from psycopg_pool import ConnectionPool, PoolTimeout

from src.adapters.repository.postgres import PostgresUserRepository, run_migrations
from src.config.settings import get_settings
from src.domain.exceptions import EmailAlreadyRegistered, UserNotFound
from src.domain.models import NewUser

pytestmark = pytest.mark.integration


@pytest.fixture(scope="module")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool for integration tests."""
    settings = get_settings()
    pool = ConnectionPool(conninfo=settings.database_url, min_size=1, max_size=10, open=True)
    try:
        pool.wait(timeout=3)
    except PoolTimeout:
        pool.close()
        pytest.skip("PostgreSQL is not reachable")
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def repository(pool: ConnectionPool) -> PostgresUserRepository:
    """Create repository instance for each test."""
    return PostgresUserRepository(pool)


@pytest.fixture(autouse=True)
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Clean users table before each test."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM users")
        conn.commit()
    yield


def verified_user(email: str = "ada@example.com") -> NewUser:
    return NewUser(
        email=email,
        password_hash="$2b$10$hashedpasswordvalue",
        first_name="Ada",
        last_name="Lovelace",
        dob=date(2000, 1, 1),
        street="123 Book Street",
        city="Toronto",
        province="ON",
        postal_code="M5V 2T6",
        email_verified=True,
        email_verified_at=datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc),
    )


class TestCreate:
    """Tests for create method."""

    def test_create_returns_persisted_user(self, repository: PostgresUserRepository) -> None:
        user = repository.create(verified_user())

        assert user.id > 0
        assert user.email == "ada@example.com"
        assert user.dob == date(2000, 1, 1)
        assert user.email_verified is True
        assert user.stripe_customer_id is None
        assert user.created_at is not None

    def test_duplicate_email_case_insensitive(self, repository: PostgresUserRepository) -> None:
        repository.create(verified_user("ada@example.com"))

        with pytest.raises(EmailAlreadyRegistered):
            repository.create(verified_user("ADA@Example.com"))

    def test_concurrent_creates_exactly_one_succeeds(self, repository: PostgresUserRepository) -> None:
        """Two verifications racing for one email: the unique index picks a winner."""

        def attempt() -> bool:
            try:
                repository.create(verified_user("race@example.com"))
                return True
            except EmailAlreadyRegistered:
                return False

        with ThreadPoolExecutor(max_workers=5) as executor:
            results = list(executor.map(lambda _: attempt(), range(5)))

        assert results.count(True) == 1


class TestFind:
    def test_find_by_email_case_insensitive(self, repository: PostgresUserRepository) -> None:
        created = repository.create(verified_user())
        assert repository.find_by_email("ADA@EXAMPLE.COM") == created

    def test_find_by_email_missing(self, repository: PostgresUserRepository) -> None:
        assert repository.find_by_email("nobody@example.com") is None

    def test_find_by_id(self, repository: PostgresUserRepository) -> None:
        created = repository.create(verified_user())
        assert repository.find_by_id(created.id) == created
        assert repository.find_by_id(created.id + 1000) is None


class TestAttachCustomerId:
    def test_first_attach_wins(self, repository: PostgresUserRepository) -> None:
        user = repository.create(verified_user())

        assert repository.attach_customer_id(user.id, "cus_first") == "cus_first"
        assert repository.attach_customer_id(user.id, "cus_second") == "cus_first"
        assert repository.find_by_id(user.id).stripe_customer_id == "cus_first"

    def test_unknown_user(self, repository: PostgresUserRepository) -> None:
        with pytest.raises(UserNotFound):
            repository.attach_customer_id(999999, "cus_x")


class TestRecordLogin:
    def test_sets_last_login(self, repository: PostgresUserRepository) -> None:
        user = repository.create(verified_user())
        at = datetime(2026, 6, 16, 9, 30, tzinfo=timezone.utc)

        repository.record_login(user.id, at)

        assert repository.find_by_id(user.id).last_login == at
