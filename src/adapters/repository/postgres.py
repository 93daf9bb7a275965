"""
PostgreSQL repository adapter - Implements SubscriberRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Atomicity and uniqueness:
-------------------------
1. **insert_pending**: The subscriber row and its confirmation token are
   written on one pooled connection and committed together. If either
   statement fails the pool rolls the connection back, so no subscriber
   exists without a token.

2. **ON CONFLICT (email) DO NOTHING**: The UNIQUE constraint on email makes
   concurrent subscriptions for one address race-free; the losers see no
   RETURNING row and are reported as duplicates.

3. **mark_confirmed**: A single UPDATE with no state guard, so repeating it
   is a no-op.

Every psycopg error is re-raised as the domain's StorageFault.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from uuid import UUID, uuid4

import psycopg
from psycopg_pool import ConnectionPool

from src.domain.exceptions import StorageFault
from src.domain.ports import Subscriber, SubscriberStatus

logger = logging.getLogger(__name__)


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    """Translate psycopg errors into StorageFault."""
    try:
        yield
    except psycopg.Error as e:
        logger.error("Storage error during %s: %s", operation, e)
        raise StorageFault(f"Storage error during {operation}") from e


class PostgresSubscriberRepository:
    """
    Implements SubscriberRepository protocol via psycopg3.

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

    def insert_pending(
        self, email: str, name: str, subscribed_at: datetime, token: str
    ) -> UUID | None:
        """
        Insert a PENDING_CONFIRMATION subscriber and its token atomically.

        Args:
            email: Normalized email address
            name: Validated display name
            subscribed_at: Creation timestamp
            token: Confirmation token

        Returns:
            New subscriber id, or None if the email already exists
            (existing row untouched, no token written)
        """
        insert_subscriber_sql = """
            INSERT INTO subscriptions (id, email, name, subscribed_at, status)
            VALUES (%s, %s, %s, %s, %s)
            ON CONFLICT (email) DO NOTHING
            RETURNING id
        """

        insert_token_sql = """
            INSERT INTO subscription_tokens (subscription_token, subscriber_id)
            VALUES (%s, %s)
        """

        with _storage_errors("insert_pending"):
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(
                    insert_subscriber_sql,
                    (
                        uuid4(),
                        email,
                        name,
                        subscribed_at,
                        SubscriberStatus.PENDING_CONFIRMATION.value,
                    ),
                )
                row = cursor.fetchone()
                if row is None:
                    conn.commit()
                    return None

                subscriber_id = row[0]
                cursor.execute(insert_token_sql, (token, subscriber_id))
                conn.commit()
                return subscriber_id

    def mark_confirmed(self, subscriber_id: UUID) -> None:
        sql = "UPDATE subscriptions SET status = %s WHERE id = %s"

        with _storage_errors("mark_confirmed"):
            with self._pool.connection() as conn:
                conn.execute(sql, (SubscriberStatus.CONFIRMED.value, subscriber_id))
                conn.commit()

    def find_by_id(self, subscriber_id: UUID) -> Subscriber | None:
        sql = """
            SELECT id, email, name, status, subscribed_at
            FROM subscriptions
            WHERE id = %s
        """

        with _storage_errors("find_by_id"):
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (subscriber_id,))
                row = cursor.fetchone()

        if row is None:
            return None
        return Subscriber(
            id=row[0],
            email=row[1],
            name=row[2],
            status=SubscriberStatus(row[3]),
            subscribed_at=row[4],
        )

    def list_confirmed_emails(self) -> list[str]:
        """
        Fetch all CONFIRMED emails as a list.

        The rows are fully materialized before the connection returns to
        the pool, so callers iterate a snapshot rather than a live cursor.
        """
        sql = "SELECT email FROM subscriptions WHERE status = %s"

        with _storage_errors("list_confirmed_emails"):
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (SubscriberStatus.CONFIRMED.value,))
                return [row[0] for row in cursor.fetchall()]

    def get_subscriber_id_from_token(self, token: str) -> UUID | None:
        sql = """
            SELECT subscriber_id FROM subscription_tokens
            WHERE subscription_token = %s
        """

        with _storage_errors("get_subscriber_id_from_token"):
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (token,))
                row = cursor.fetchone()

        return row[0] if row is not None else None


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
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info("Migration complete: %s", sql_file.name)
        except Exception as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
