"""
Create a user (e.g. the first admin) without going through the API. Run from project root:
  python -m jobmonitor.scripts.create_user USERNAME EMAIL PASSWORD [USER|ADMIN]
Example:
  python -m jobmonitor.scripts.create_user admin admin@example.com your-secure-password ADMIN
"""
import argparse
import logging
import sys

from jobmonitor.core.database import SessionLocal
from jobmonitor.core.logging_config import configure_logging
from jobmonitor.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    hash_password,
)
from jobmonitor.models.user import Role, User
from jobmonitor.services.users import SYSTEM_ACTOR

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Job Monitor user.")
    parser.add_argument("username", help=f"Username ({USERNAME_MIN_LEN}-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("role", nargs="?", default="USER", type=str.upper, choices=["USER", "ADMIN"])
    parser.add_argument("--first-name", default="Job", help="First name (default: Job)")
    parser.add_argument("--last-name", default="Monitor", help="Last name (default: Monitor)")
    args = parser.parse_args(argv)

    configure_logging()

    username = args.username.strip()
    if not USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN:
        print(
            f"Username must be {USERNAME_MIN_LEN}-{USERNAME_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1
    if not PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN:
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1
    email = args.email.strip()
    if "@" not in email:
        print("Invalid email address.", file=sys.stderr)
        return 1

    role = Role(args.role)
    db = SessionLocal()
    try:
        existing = (
            db.query(User)
            .filter((User.username == username) | (User.email == email))
            .first()
        )
        if existing:
            print(f"User '{username}' or email '{email}' already exists.", file=sys.stderr)
            return 1
        user = User(
            username=username,
            email=email,
            password_hash=hash_password(args.password),
            first_name=args.first_name,
            last_name=args.last_name,
            role=role,
            created_by=SYSTEM_ACTOR,
            updated_by=SYSTEM_ACTOR,
        )
        db.add(user)
        db.commit()
        logger.info("Created user_id=%s via CLI", user.id)
        print(f"Created user '{username}' with role '{role.value}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
