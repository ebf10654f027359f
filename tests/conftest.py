"""
tests/conftest.py -- Shared test fixtures for the Vulnado identity core.

This module provides:
  - db: a Postgres factory over an in-memory SQLite engine with the schema
    created and no rows
  - seeded_db: the same, with alice and bob inserted
  - mock_factory: a (factory, connection) pair of MagicMocks for tests that
    need to assert on the exact SQL sent or inject driver faults

Design: plain sqlite:///:memory: is enough here. SQLAlchemy serves one
connection per thread for in-memory SQLite, so rows written by seed() are
visible to the connections UserDirectory opens later in the same test.

The DEBUG env var must be set before core.config is imported so
get_settings() auto-generates SECRET_KEY instead of raising ValueError.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from unittest.mock import MagicMock

# CRITICAL: Set DEBUG before any core import so get_settings() can
# auto-generate SECRET_KEY in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")

import pytest

from core.config import get_settings
from core.db import Postgres


@pytest.fixture
def db() -> Generator[Postgres, None, None]:
    """Empty users table on a private in-memory database."""
    store = Postgres("sqlite:///:memory:")
    store.setup()
    yield store
    store.close()


@pytest.fixture
def seeded_db(db: Postgres) -> Postgres:
    db.seed([("alice", "alice-hash"), ("bob", "bob-hash")])
    return db


@pytest.fixture
def mock_factory() -> tuple[MagicMock, MagicMock]:
    """Yield (factory, connection) where factory.connection() returns connection.

    The query result defaults to no rows; tests set
    connection.exec_driver_sql.return_value.fetchone.return_value to a row.
    """
    conn = MagicMock()
    conn.exec_driver_sql.return_value.fetchone.return_value = None
    factory = MagicMock()
    factory.connection.return_value = conn
    return factory, conn


@pytest.fixture
def fresh_settings(monkeypatch):
    """Clear the get_settings() cache around a test that changes the environment."""
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()
