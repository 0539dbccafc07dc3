"""
Create a user with an existing role. Run from project root:
  python -m app.scripts.create_user EMAIL PASSWORD [ROLE_SLUG] [--name NAME]
Example:
  python -m app.scripts.create_user manager@shop.example your-secure-password staff
"""
import argparse
import logging
import sys

from app.core.database import SessionLocal
from app.core.errors import AppError
from app.core.security import (
    BCRYPT_MAX_BYTES,
    PASSWORD_MIN_LEN,
    check_password_length,
    hash_password,
)
from app.models import Role, User
from app.services.accounts import commit_new_user, ensure_email_available

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a user (no registration UI).")
    parser.add_argument("email", help="Login email (stored as given)")
    parser.add_argument(
        "password",
        help=f"Password ({PASSWORD_MIN_LEN} chars to {BCRYPT_MAX_BYTES} bytes)",
    )
    parser.add_argument("role", nargs="?", default="staff", help="Slug of an existing role")
    parser.add_argument("--name", default=None, help="Display name (defaults to email local part)")
    args = parser.parse_args(argv)

    email = args.email.strip()
    if "@" not in email:
        print("Invalid email.", file=sys.stderr)
        return 1
    try:
        check_password_length(args.password)
    except ValueError as e:
        print(f"{e}.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        role = db.query(Role).filter(Role.slug == args.role).first()
        if role is None:
            print(f"Role '{args.role}' does not exist; run app.scripts.seed first.", file=sys.stderr)
            return 1
        ensure_email_available(db, email)
        user = User(
            name=args.name or email.split("@")[0],
            email=email,
            password_hash=hash_password(args.password),
            role_id=role.id,
            is_active=True,
        )
        commit_new_user(db, user)
        logger.info("Created user id=%s with role '%s'", user.id, role.slug)
        return 0
    except AppError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
