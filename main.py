#!/usr/bin/env python3
"""
Vulnado -- identity core demo CLI.

Drives the two pieces of the identity core from a shell: look a user up in
the directory, mint a token for them, and verify a token later. Useful for
walking through the SQL injection in the username lookup by hand.

Usage:
  python main.py setup --seed
  python main.py lookup alice
  python main.py lookup "x' OR '1'='1"
  python main.py token alice
  python main.py token alice --expire 60
  python main.py verify <token>

Environment variables:
  SECRET_KEY            Token signing secret. Required unless DEBUG=true.
  DATABASE_URL          SQLAlchemy URL (default: SQLite file under core/).
  TOKEN_EXPIRE_SECONDS  Default token lifetime; 0 means no expiry.
  LOG_LEVEL             Logging level for diagnostics (default INFO).
"""

import argparse
import logging
import sys
from typing import Optional

from auth.directory import UserDirectory
from auth.errors import Unauthorized
from auth.tokens import TokenService
from core.config import Settings, get_settings
from core.db import Postgres

logger = logging.getLogger("vulnado.cli")


def _cmd_setup(db: Postgres, args: argparse.Namespace, settings: Settings) -> int:
    db.setup()
    if args.seed:
        ids = db.seed()
        print(f"  Seeded {len(ids)} demo user(s).")
    print("  Schema ready.")
    return 0


def _cmd_lookup(db: Postgres, args: argparse.Namespace, settings: Settings) -> int:
    user = UserDirectory(db).get(args.username)
    if user is None:
        print("  not found")
        return 1
    print(f"  {user.id}  {user.username}")
    return 0


def _cmd_token(db: Postgres, args: argparse.Namespace, settings: Settings) -> int:
    user = UserDirectory(db).get(args.username)
    if user is None:
        print("  not found")
        return 1
    tokens = TokenService(default_expire_seconds=settings.token_lifetime)
    token = tokens.issue(settings.secret_key, user.username, expire_seconds=args.expire)
    logger.info("Issued token for user id=%s", user.id)
    print(token)
    return 0


def _cmd_verify(db: Postgres, args: argparse.Namespace, settings: Settings) -> int:
    try:
        username = TokenService().subject(settings.secret_key, args.token)
    except Unauthorized:
        print("  unauthorized")
        return 1
    print(f"  valid token for {username}")
    return 0


_COMMANDS = {
    "setup": _cmd_setup,
    "lookup": _cmd_lookup,
    "token": _cmd_token,
    "verify": _cmd_verify,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vulnado",
        description="Vulnado identity core: user lookup and signed session tokens.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  vulnado setup --seed
  vulnado lookup alice
  vulnado token alice --expire 3600
  vulnado verify eyJhbGciOiJIUzI1NiIs...
        """,
    )
    parser.add_argument(
        "--database-url",
        metavar="URL",
        default=None,
        help="SQLAlchemy database URL (overrides DATABASE_URL)",
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    setup = sub.add_parser("setup", help="Create the users table")
    setup.add_argument("--seed", action="store_true", help="Insert the demo users after creating the schema")

    lookup = sub.add_parser("lookup", help="Fetch a user by username")
    lookup.add_argument("username", help="Username, passed to the query verbatim")

    token = sub.add_parser("token", help="Fetch a user and issue a signed token for them")
    token.add_argument("username", help="Username, passed to the query verbatim")
    token.add_argument(
        "--expire",
        type=int,
        default=None,
        metavar="SECONDS",
        help="Token lifetime in seconds. Unlike TOKEN_EXPIRE_SECONDS=0 (no exp claim), "
        "a value <= 0 here issues an already-expired token. Default: TOKEN_EXPIRE_SECONDS",
    )

    verify = sub.add_parser("verify", help="Verify a token against SECRET_KEY")
    verify.add_argument("token", help="Compact JWT string")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    db = Postgres(args.database_url or settings.database_url)
    try:
        return _COMMANDS[args.command](db, args, settings)
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
