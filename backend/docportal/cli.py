"""Command line entry point for Docportal."""

import argparse
import asyncio
import getpass
import logging
import sys

from .config import load_config
from .errors import DocportalError
from .models.database import close_db, get_session_factory, init_db
from .services.user import UserService
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)


async def _init_db() -> None:
    config = load_config()
    await init_db()
    try:
        async with get_session_factory()() as db:
            created = await UserService(db).ensure_default_admin(config.admin)
            await db.commit()
    finally:
        await close_db()
    logger.info(f"Database ready at {config.database.path}" + (" (admin created)" if created else ""))


async def _create_user(username: str, email: str, password: str) -> None:
    await init_db()
    try:
        async with get_session_factory()() as db:
            await UserService(db).create_user(username, password, email)
            await db.commit()
    finally:
        await close_db()
    logger.info(f"User '{username}' created")


async def _reset_password(username: str, password: str) -> bool:
    await init_db()
    try:
        async with get_session_factory()() as db:
            service = UserService(db)
            user = await service.get_user_by_username(username)
            if user is None:
                return False
            await service.update_user(user.id, password=password)
            await db.commit()
    finally:
        await close_db()
    logger.info(f"Password of '{username}' reset")
    return True


def _read_password(args) -> str:
    if args.password:
        return args.password
    password = getpass.getpass("Password: ")
    if password != getpass.getpass("Repeat password: "):
        logger.error("Passwords do not match")
        sys.exit(1)
    return password


def main(argv=None) -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Docportal documentation portal")
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to configuration file (default: $DOCPORTAL_CONFIG or /app/config.yml)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log at debug level")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the web server")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes")

    subparsers.add_parser("init-db", help="Create tables and the default admin user")

    create_user = subparsers.add_parser("create-user", help="Create an admin user")
    create_user.add_argument("username")
    create_user.add_argument("email")
    create_user.add_argument("--password", help="Password (prompted when omitted)")

    reset = subparsers.add_parser("reset-password", help="Set a new password for a user")
    reset.add_argument("username")
    reset.add_argument("--password", help="Password (prompted when omitted)")

    args = parser.parse_args(argv)

    config = load_config(args.config)
    setup_logging("debug" if args.verbose else None)

    try:
        if args.command == "serve":
            import uvicorn

            uvicorn.run(
                "docportal.main:app",
                host=config.server.host,
                port=config.server.port,
                reload=args.reload,
            )
        elif args.command == "init-db":
            asyncio.run(_init_db())
        elif args.command == "create-user":
            asyncio.run(_create_user(args.username, args.email, _read_password(args)))
        elif args.command == "reset-password":
            if not asyncio.run(_reset_password(args.username, _read_password(args))):
                logger.error(f"User '{args.username}' not found")
                sys.exit(1)
    except DocportalError as e:
        logger.error(e.message)
        sys.exit(1)


if __name__ == "__main__":
    main()
