"""
PostgreSQL repository adapter - Implements UserRepository protocol.

This module provides the PostgreSQL implementation of the domain's
user repository port using psycopg3 with raw SQL.

Email uniqueness is enforced by a unique index on lower(email), so two
verifications racing for the same address resolve in the database: the
loser gets EmailAlreadyRegistered instead of a second account.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any

import psycopg
from psycopg import errors
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from src.domain.exceptions import EmailAlreadyRegistered, UserNotFound, UserStoreUnavailable
from src.domain.models import NewUser, User

logger = logging.getLogger(__name__)

_USER_COLUMNS = """
    id, email, password_hash, first_name, last_name, preferred_name, dob, phone,
    unit_number, street, city, province, postal_code, country, stripe_customer_id,
    email_verified, email_verified_at, created_at, last_login
"""


def _row_to_user(row: dict[str, Any]) -> User:
    return User(**row)


class PostgresUserRepository:
    """
    Implements UserRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def find_by_email(self, email: str) -> User | None:
        sql = f"SELECT {_USER_COLUMNS} FROM users WHERE lower(email) = lower(%s)"
        return self._fetch_one(sql, (email,))

    def find_by_id(self, user_id: int) -> User | None:
        sql = f"SELECT {_USER_COLUMNS} FROM users WHERE id = %s"
        return self._fetch_one(sql, (user_id,))

    def create(self, new_user: NewUser) -> User:
        """
        Insert a user row.

        Raises:
            EmailAlreadyRegistered: On the lower(email) unique index
            UserStoreUnavailable: On any other database error
        """
        sql = f"""
            INSERT INTO users (
                email, password_hash, first_name, last_name, preferred_name, dob, phone,
                unit_number, street, city, province, postal_code, country,
                email_verified, email_verified_at
            )
            VALUES (
                %(email)s, %(password_hash)s, %(first_name)s, %(last_name)s, %(preferred_name)s,
                %(dob)s, %(phone)s, %(unit_number)s, %(street)s, %(city)s, %(province)s,
                %(postal_code)s, %(country)s, %(email_verified)s, %(email_verified_at)s
            )
            RETURNING {_USER_COLUMNS}
        """
        params = {
            "email": new_user.email,
            "password_hash": new_user.password_hash,
            "first_name": new_user.first_name,
            "last_name": new_user.last_name,
            "preferred_name": new_user.preferred_name,
            "dob": new_user.dob,
            "phone": new_user.phone,
            "unit_number": new_user.unit_number,
            "street": new_user.street,
            "city": new_user.city,
            "province": new_user.province,
            "postal_code": new_user.postal_code,
            "country": new_user.country,
            "email_verified": new_user.email_verified,
            "email_verified_at": new_user.email_verified_at,
        }

        try:
            with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
                cursor.execute(sql, params)
                row = cursor.fetchone()
                conn.commit()
        except errors.UniqueViolation:
            raise EmailAlreadyRegistered() from None
        except psycopg.Error as e:
            logger.error(f"User insert failed: {e}")
            raise UserStoreUnavailable() from e

        return _row_to_user(row)

    def attach_customer_id(self, user_id: int, customer_id: str) -> str:
        """
        Attach a payment customer id at most once.

        UPDATE ... WHERE stripe_customer_id IS NULL makes the first writer win;
        later callers read back the id that is already stored.
        """
        update_sql = """
            UPDATE users
            SET stripe_customer_id = %s, updated_at = NOW()
            WHERE id = %s AND stripe_customer_id IS NULL
            RETURNING stripe_customer_id
        """
        select_sql = "SELECT stripe_customer_id FROM users WHERE id = %s"

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(update_sql, (customer_id, user_id))
                row = cursor.fetchone()
                if row is None:
                    cursor.execute(select_sql, (user_id,))
                    row = cursor.fetchone()
                conn.commit()
        except psycopg.Error as e:
            logger.error(f"Customer link failed for user {user_id}: {e}")
            raise UserStoreUnavailable() from e

        if row is None:
            raise UserNotFound()
        return row[0]

    def record_login(self, user_id: int, at: datetime) -> None:
        sql = "UPDATE users SET last_login = %s, updated_at = NOW() WHERE id = %s"
        try:
            with self._pool.connection() as conn:
                conn.execute(sql, (at, user_id))
                conn.commit()
        except psycopg.Error as e:
            logger.error(f"Login timestamp update failed for user {user_id}: {e}")
            raise UserStoreUnavailable() from e

    def _fetch_one(self, sql: str, params: tuple[Any, ...]) -> User | None:
        try:
            with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
                cursor.execute(sql, params)
                row = cursor.fetchone()
        except psycopg.Error as e:
            logger.error(f"User lookup failed: {e}")
            raise UserStoreUnavailable() from e
        return _row_to_user(row) if row is not None else None


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
