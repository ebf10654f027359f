"""
auth/tokens.py -- Signed session tokens (JWT, HS256).

Design decisions:
  JWT: python-jose with HS256. Tokens carry the username as the subject
       claim, the issue time, and an optional expiry. Nothing else -- the
       token does not point back at a directory row, and verification never
       consults the directory.

  Secret: passed on every call. TokenService holds no key material, so one
       instance can serve callers using different secrets and there is no
       key lifecycle to manage here. Where the secret comes from is the
       caller's business (the CLI reads core.config.Settings.secret_key).

  Failure reporting: every verification failure raises the same
       Unauthorized. The underlying cause goes to the "vulnado.auth" logger
       with a stack trace for operators; callers only learn "not
       authenticated".

  Expiry: python-jose's own exp check treats exp == now as still valid. We
       disable it and compare ourselves so a token is rejected at or after
       its expiry instant.

Layer rule: no imports from core/.
"""

from __future__ import annotations

import logging
import time
from typing import NoReturn

from jose import jwt
from jose.exceptions import JOSEError

from auth.errors import Unauthorized

logger = logging.getLogger("vulnado.auth")

_ALGORITHM = "HS256"


class TokenService:
    """Mint and verify compact signed tokens carrying a username claim.

    Usage:
        tokens = TokenService()
        token = tokens.issue(secret, "alice")
        claims = tokens.verify(secret, token)   # raises Unauthorized
        claims["sub"]                          # "alice"

    default_expire_seconds applies when issue() is called without an
    explicit expiry. None (the default) means tokens carry no exp claim.
    """

    def __init__(self, default_expire_seconds: int | None = None) -> None:
        self.algorithm = _ALGORITHM
        self.default_expire_seconds = default_expire_seconds

    def issue(self, secret: str, username: str, expire_seconds: int | None = None) -> str:
        """Encode a signed JWT whose subject is username.

        Args:
            secret:         HMAC key material. Must be non-empty.
            username:       Stored verbatim as the sub claim. Not validated.
            expire_seconds: Lifetime in seconds from now. A value <= 0 produces
                            a token that is already expired. None falls back
                            to default_expire_seconds; if that is also None the
                            token has no exp claim.

        Raises ValueError if secret is empty.
        """
        if not secret:
            raise ValueError("secret must be a non-empty string")
        now = int(time.time())
        claims: dict = {"sub": username, "iat": now}
        duration = expire_seconds if expire_seconds is not None else self.default_expire_seconds
        if duration is not None:
            claims["exp"] = now + duration
        return jwt.encode(claims, secret, algorithm=self.algorithm)

    def verify(self, secret: str, token: str) -> dict:
        """Verify token against secret and return its claims.

        Raises Unauthorized if the token is malformed, its signature does not
        verify under secret, it has no subject, or it carries an exp claim
        that is at or before the current time.
        """
        if not secret or not token:
            _reject("empty secret or token")
        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        # jose validates iat/nbf with int() and lets TypeError through for
        # lists, dicts and nulls.
        except (JOSEError, TypeError, ValueError):
            logger.warning("Token rejected: invalid structure or signature", exc_info=True)
            raise Unauthorized() from None

        if not isinstance(claims.get("sub"), str):
            _reject("missing subject claim")

        exp = claims.get("exp")
        if exp is not None:
            if isinstance(exp, bool) or not isinstance(exp, (int, float)):
                _reject("non-numeric exp claim")
            if time.time() >= exp:
                _reject(f"expired at {exp}")
        return claims

    def subject(self, secret: str, token: str) -> str:
        """Return the verified username carried by token. Raises Unauthorized."""
        return self.verify(secret, token)["sub"]


def _reject(reason: str) -> NoReturn:
    logger.warning("Token rejected: %s", reason, stack_info=True)
    raise Unauthorized()
