"""
Shared fixtures for adversarial tests.

The session-wide pool lives in tests/conftest.py and skips these tests
when the database is unreachable.
"""

from collections.abc import Generator

import pytest
from psycopg_pool import ConnectionPool


@pytest.fixture(autouse=True)
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Clean subscriber tables before each test."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM subscription_tokens")
        conn.execute("DELETE FROM subscriptions")
        conn.commit()
    yield
