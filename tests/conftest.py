"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- Recording email sender and fixed clock doubles
- PostgreSQL connection pool (skipped when unreachable) and repository
"""

from collections.abc import Generator

import pytest
from psycopg_pool import ConnectionPool, PoolTimeout

from src.adapters.repository.postgres import PostgresSubscriberRepository, run_migrations
from src.config.settings import get_settings
from tests.doubles import FixedClock, RecordingEmailSender


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture(scope="session")
def pool() -> Generator[ConnectionPool, None, None]:
    """
    Connection pool against the configured PostgreSQL database.

    Runs migrations once per session. Tests that need it are skipped when
    the database is unreachable.
    """
    settings = get_settings()
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=10,
        open=False,
    )
    try:
        pool.open(wait=True, timeout=5.0)
    except PoolTimeout:
        pool.close()
        pytest.skip("PostgreSQL is not reachable")
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def repository(pool: ConnectionPool) -> PostgresSubscriberRepository:
    """Create repository instance for each test."""
    return PostgresSubscriberRepository(pool)

