"""
auth/errors.py -- Exception types for the identity core.

Unauthorized is the only error callers ever see. DirectoryError stays inside
auth/directory.py: it is raised around datastore faults, logged, and turned
into a NotFound result before fetch() returns.
"""


class IdentityError(Exception):
    """Base class for identity core errors."""


class Unauthorized(IdentityError):
    """A presented token was malformed, mis-signed, or expired.

    The message is the same for every cause so callers cannot tell which
    check failed.
    """

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class DirectoryError(IdentityError):
    """Connection or query fault during a user lookup."""
