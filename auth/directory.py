"""
auth/directory.py -- Username -> User lookup against the users table.

Pattern: Repository + Data Mapper, reduced to a single query. UserDirectory
is the repository; _row_to_user is the mapper.

Security:
  *** VULNERABLE BY DESIGN ***
  build_lookup_query() interpolates the caller's username straight into the
  SQL text. No escaping, no bound parameters. This is the SQL injection the
  application exists to teach -- fetch("x' OR '1'='1") matches every row.
  Do not "fix" it here; a hardened lookup belongs in a separate function.

Error policy:
  Any fault while connecting or querying is wrapped in DirectoryError,
  logged, and reported to the caller as NotFound(). A broken datastore and a
  missing user look the same from outside.

Layer rule: no imports from core/. The connection factory is injected.
"""

from __future__ import annotations

import logging
from typing import Protocol

from auth.errors import DirectoryError
from auth.models import FetchResult, Found, NotFound, User

logger = logging.getLogger("vulnado.directory")


class ConnectionFactory(Protocol):
    """Anything that hands out a datastore connection.

    The returned object must provide exec_driver_sql(sql) -> result with
    fetchone(), and close(). core.db.Postgres is the production implementation;
    a SQLAlchemy Connection satisfies the interface directly.
    """

    def connection(self): ...


# ---------------------------------------------------------------------------
# Query construction (VULNERABLE)
# ---------------------------------------------------------------------------


def build_lookup_query(username: str) -> str:
    """Return the user lookup SQL with username interpolated verbatim.

    VULNERABLE: raw string interpolation, no escaping, no parameter binding.
    The value is not trimmed either -- what the caller passes is what the
    database sees.
    """
    return "select * from users where username = '" + username + "' limit 1"


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserDirectory:
    """Resolve a username to at most one User.

    Usage:
        directory = UserDirectory(Postgres(db_url))
        result = directory.fetch("alice")
        if isinstance(result, Found):
            result.user.id
    """

    def __init__(self, factory: ConnectionFactory) -> None:
        self._factory = factory

    def fetch(self, username: str) -> FetchResult:
        """Look up username. Returns Found(user) or NotFound().

        NotFound() covers both "no such user" and "datastore fault"; faults are
        logged at ERROR on the vulnado.directory logger and never raised.
        """
        try:
            row = self._lookup(username)
        except DirectoryError as exc:
            logger.error("User lookup failed: %s", exc)
            return NotFound()
        if row is None:
            return NotFound()
        return Found(row)

    def get(self, username: str) -> User | None:
        """Same as fetch(), unwrapped to User or None."""
        result = self.fetch(username)
        return result.user if isinstance(result, Found) else None

    def _lookup(self, username: str) -> User | None:
        """Run the lookup on a fresh connection and map the first row.

        The connection is closed on every path once acquired. Any exception
        from the factory, the driver, the row mapper, or close() becomes
        DirectoryError. A close failure after a query failure is logged and
        the query failure is the one reported.
        """
        conn = None
        try:
            conn = self._factory.connection()
            logger.info("Opened database successfully")
            query = build_lookup_query(username)
            logger.info("%s", query)
            row = conn.exec_driver_sql(query).fetchone()
            user = _row_to_user(row) if row is not None else None
        except Exception as exc:
            if conn is not None:
                _close_after_failure(conn)
            raise DirectoryError(str(exc)) from exc
        try:
            conn.close()
        except Exception as exc:
            raise DirectoryError(f"close failed: {exc}") from exc
        return user


def _close_after_failure(conn) -> None:
    try:
        conn.close()
    except Exception as exc:
        logger.error("Closing connection failed: %s", exc)


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(id=str(row.user_id), username=row.username, password_hash=row.password)
