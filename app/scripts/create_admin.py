"""
Create a scheduler login.

    python -m app.scripts.create_admin <username> "<full name>"

The password is prompted for, or read from ADMIN_PASSWORD when set.
"""
import argparse
import getpass
import logging
import os
import sys

from app.database import SessionLocal
from app.schemas.auth import validate_password_strength
from app.services.auth_service import auth_service
from app.utils.exceptions import AppException

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a scheduler user account")
    parser.add_argument("username")
    parser.add_argument("name")
    args = parser.parse_args(argv)

    password = os.environ.get("ADMIN_PASSWORD") or getpass.getpass("Password: ")
    try:
        validate_password_strength(password)
    except ValueError as e:
        logger.error(str(e))
        return 1

    db = SessionLocal()
    try:
        user = auth_service.create_user(db, args.username, args.name, password)
    except AppException as e:
        logger.error(e.detail["message"])
        return 1
    finally:
        db.close()

    logger.info(f"Created user {user.username} (id={user.id})")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    sys.exit(main())
