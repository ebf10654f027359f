"""
auth/models.py -- Domain dataclasses for identity entities.

Pattern: Data class (pure data container, zero logic). The directory does the
work; these only own the shape of what it returns.

Layer rule: no imports from core/.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class User:
    """A directory entry as stored in the users table.

    id is assigned by the datastore at creation (a UUID string) and never
    changes. password_hash is opaque to this package -- nothing here compares
    it against anything.
    """

    id: str
    username: str
    password_hash: str


@dataclass(frozen=True)
class Found:
    user: User


@dataclass(frozen=True)
class NotFound:
    """No row matched, or the lookup failed inside the directory.

    The two cases are deliberately indistinguishable to callers.
    """


FetchResult = Union[Found, NotFound]
