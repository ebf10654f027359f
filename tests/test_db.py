"""Unit tests for core/db.py -- the Postgres connection factory and bootstrap."""

import uuid

from sqlalchemy import text

from core.db import DEMO_USERS, Postgres


def test_setup_is_idempotent(db):
    db.setup()
    db.setup()
    with db.connection() as conn:
        assert conn.execute(text("SELECT COUNT(*) FROM users")).scalar() == 0


def test_insert_user_assigns_uuid(db):
    user_id = db.insert_user("carol", "carol-hash")
    assert uuid.UUID(user_id).version == 4
    with db.connection() as conn:
        row = conn.execute(text("SELECT * FROM users WHERE user_id = :id"), {"id": user_id}).fetchone()
    assert row.username == "carol"
    assert row.password == "carol-hash"
    assert row.created_on is not None
    assert row.last_login is None


def test_insert_user_binds_parameters(db):
    """Bootstrap writes are parameterized -- quotes land in the row unchanged."""
    user_id = db.insert_user("o'brien", "h")
    with db.connection() as conn:
        name = conn.execute(text("SELECT username FROM users WHERE user_id = :id"), {"id": user_id}).scalar()
    assert name == "o'brien"


def test_seed_defaults_to_demo_users(db):
    ids = db.seed()
    assert len(ids) == len(DEMO_USERS)
    assert len(set(ids)) == len(ids)
    with db.connection() as conn:
        names = [r.username for r in conn.execute(text("SELECT username FROM users"))]
    assert sorted(names) == sorted(name for name, _ in DEMO_USERS)


def test_duplicate_usernames_allowed(db):
    db.seed([("dup", "a"), ("dup", "b")])
    with db.connection() as conn:
        assert conn.execute(text("SELECT COUNT(*) FROM users WHERE username = 'dup'")).scalar() == 2


def test_file_backed_database_persists(tmp_path):
    url = f"sqlite:///{tmp_path / 'vulnado.db'}"
    first = Postgres(url)
    first.setup()
    first.insert_user("alice", "h")
    first.close()

    second = Postgres(url)
    with second.connection() as conn:
        assert conn.execute(text("SELECT COUNT(*) FROM users")).scalar() == 1
    second.close()
