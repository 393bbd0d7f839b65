"""
Campus Events - Command line entry point.

Usage:
    campus-events serve [--host HOST] [--port PORT] [--reload]
    campus-events create-admin --name NAME --email EMAIL --password PASSWORD
    campus-events make-admin EMAIL
    campus-events repair
"""

import argparse
import logging
import sys

from campus_events.adapters.repository import (
    PostgresRegistrationRepository,
    PostgresUserRepository,
    open_pool,
    run_migrations,
)
from campus_events.adapters.security import BcryptPasswordHasher
from campus_events.config.settings import Settings, get_settings
from campus_events.domain.accounts import normalize_email
from campus_events.domain.models import Role
from campus_events.domain.repair import repair_references

logger = logging.getLogger(__name__)


def _connect(settings: Settings):
    pool = open_pool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=2,
        attempts=settings.db_connect_attempts,
        backoff_seconds=settings.db_connect_backoff_seconds,
        timeout_seconds=settings.db_connect_timeout_seconds,
    )
    run_migrations(pool)
    return pool


def create_admin(settings: Settings, name: str, email: str, password: str) -> int:
    pool = _connect(settings)
    try:
        users = PostgresUserRepository(pool)
        hasher = BcryptPasswordHasher(cost=settings.bcrypt_cost)
        user_id = users.create_user(
            name=name,
            email=normalize_email(email),
            password_hash=hasher.hash(password),
            preferences=[],
            role=Role.ADMIN,
        )
    finally:
        pool.close()

    if user_id is None:
        print(f"A user with email {normalize_email(email)} already exists")
        return 1
    print(f"Admin user created: {user_id}")
    return 0


def make_admin(settings: Settings, email: str) -> int:
    pool = _connect(settings)
    try:
        user = PostgresUserRepository(pool).set_role(normalize_email(email), Role.ADMIN)
    finally:
        pool.close()

    if user is None:
        print("User not found")
        return 1
    print(f"User updated to admin: {user.email} ({user.name})")
    return 0


def repair(settings: Settings) -> int:
    pool = _connect(settings)
    try:
        plan = repair_references(PostgresRegistrationRepository(pool))
    finally:
        pool.close()

    print(f"Repaired {len(plan.events)} event(s) and {len(plan.users)} user(s)")
    return 0


def serve(host: str, port: int, reload: bool) -> int:
    import uvicorn

    uvicorn.run("campus_events.api.main:app", host=host, port=port, reload=reload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="campus-events", description="Campus Events API")
    commands = parser.add_subparsers(dest="command", required=True)

    serve_parser = commands.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Bind host")
    serve_parser.add_argument("--port", type=int, default=5004, help="Bind port")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    create_parser = commands.add_parser("create-admin", help="Create an admin account")
    create_parser.add_argument("--name", default="Admin")
    create_parser.add_argument("--email", required=True)
    create_parser.add_argument("--password", required=True)

    promote_parser = commands.add_parser("make-admin", help="Give an existing user the admin role")
    promote_parser.add_argument("email")

    commands.add_parser("repair", help="Restore user/event reference symmetry")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        return serve(args.host, args.port, args.reload)
    if args.command == "create-admin":
        if len(args.password) < 6:
            print("Password must be at least 6 characters")
            return 2
        return create_admin(settings, args.name, args.email, args.password)
    if args.command == "make-admin":
        return make_admin(settings, args.email)
    return repair(settings)


if __name__ == "__main__":
    sys.exit(main())
