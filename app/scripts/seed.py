"""
Seed the role catalog and the first administrator. Safe to re-run. From project root:
  python -m app.scripts.seed ADMIN_EMAIL ADMIN_PASSWORD

Creates the system admin role (slug 'admin'), a 'staff' role with read-only
permissions, and an admin user if that email is not registered yet.
"""
import argparse
import logging
import sys

from sqlalchemy.orm import Session

from app.core.database import SessionLocal
from app.core.permissions import (
    CATEGORIES_VIEW,
    ORDERS_VIEW,
    PRODUCTS_VIEW,
    get_permission_registry,
)
from app.core.security import (
    BCRYPT_MAX_BYTES,
    PASSWORD_MIN_LEN,
    check_password_length,
    hash_password,
)
from app.models import User
from app.services.roles import ensure_admin_role, ensure_role

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

STAFF_ROLE_NAME = "Staff"
STAFF_PERMISSIONS = [PRODUCTS_VIEW, CATEGORIES_VIEW, ORDERS_VIEW]


def seed(db: Session, admin_email: str, admin_password: str, admin_name: str = "Super Admin") -> User:
    """Ensure the admin and staff roles exist and that admin_email is an admin. Returns that user."""
    admin_role = ensure_admin_role(db)
    ensure_role(
        db,
        get_permission_registry(),
        STAFF_ROLE_NAME,
        "Default role for self-registered accounts.",
        STAFF_PERMISSIONS,
    )

    user = db.query(User).filter(User.email == admin_email).first()
    if user is None:
        user = User(
            name=admin_name,
            email=admin_email,
            password_hash=hash_password(admin_password),
            role_id=admin_role.id,
            is_active=True,
        )
        db.add(user)
        db.commit()
        logger.info("Created admin user id=%s", user.id)
    elif user.role_id != admin_role.id:
        user.role_id = admin_role.id
        db.commit()
        logger.info("Promoted existing user id=%s to the admin role", user.id)
    else:
        logger.info("Admin user id=%s already present", user.id)
    return user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed roles and the first administrator.")
    parser.add_argument("email", help="Administrator email")
    parser.add_argument(
        "password",
        help=f"Administrator password ({PASSWORD_MIN_LEN} chars to {BCRYPT_MAX_BYTES} bytes)",
    )
    parser.add_argument("--name", default="Super Admin", help="Administrator display name")
    args = parser.parse_args(argv)

    try:
        check_password_length(args.password)
    except ValueError as e:
        print(f"{e}.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        seed(db, args.email.strip(), args.password, args.name)
        return 0
    except Exception as e:
        logger.exception("Seeding failed: %s", type(e).__name__)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
