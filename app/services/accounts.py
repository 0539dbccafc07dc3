"""
Credential store and token issuing: register, login, password and profile changes.

Passwords are only ever handled as bcrypt hashes once they reach the database;
plaintext and tokens are never logged.
"""

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.core.errors import (
    AccountDisabled,
    ConfigurationError,
    DuplicateEmail,
    InvalidCredentials,
    UserNotFound,
)
from app.core.security import create_access_token, hash_password, verify_password
from app.models import Role, User

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


def load_user(db: Session, user_id: int) -> User | None:
    """Fetch a user with the role joined in, bypassing any cached identity."""
    return (
        db.query(User)
        .options(joinedload(User.role))
        .filter(User.id == user_id)
        .populate_existing()
        .first()
    )


def ensure_email_available(db: Session, email: str) -> None:
    if db.query(User.id).filter(User.email == email).first() is not None:
        raise DuplicateEmail()


def commit_new_user(db: Session, user: User) -> None:
    """Insert user; a unique-index race on email surfaces as DuplicateEmail."""
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateEmail() from e


def get_default_role(db: Session, settings: "Settings") -> Role:
    """
    Role for self-registered users.

    Prefers DEFAULT_ROLE_SLUG, then the oldest non-admin role, then any role.
    Raises ConfigurationError when no role exists at all.
    """
    role = db.query(Role).filter(Role.slug == settings.DEFAULT_ROLE_SLUG).first()
    if role is not None:
        return role
    role = (
        db.query(Role)
        .filter(Role.is_system_admin.is_(False))
        .order_by(Role.id)
        .first()
    )
    if role is not None:
        return role
    role = db.query(Role).order_by(Role.id).first()
    if role is None:
        logger.error("Registration impossible: no roles exist; run the seed script")
        raise ConfigurationError("No roles are configured.")
    logger.warning(
        "Default role %r missing; self-registration falls back to role id=%s",
        settings.DEFAULT_ROLE_SLUG,
        role.id,
    )
    return role


def issue_token(user: User) -> str:
    return create_access_token(sub=user.id)


@lru_cache
def _dummy_password_hash() -> str:
    """Hash checked when the email is unknown, so both login failures cost one bcrypt run."""
    return hash_password("unknown-account-placeholder")


def register(
    db: Session,
    settings: "Settings",
    name: str | None,
    email: str,
    password: str,
) -> tuple[str, User]:
    """Create an account with the default role and return (token, user)."""
    ensure_email_available(db, email)
    role = get_default_role(db, settings)

    user = User(
        name=name or email.split("@")[0],
        email=email,
        password_hash=hash_password(password),
        role_id=role.id,
        is_active=True,
    )
    commit_new_user(db, user)
    logger.info("User registered: id=%s role_id=%s", user.id, role.id)

    user = load_user(db, user.id)
    return issue_token(user), user


def login(db: Session, email: str, password: str) -> tuple[str, User]:
    """
    Verify credentials and return (token, user with role).

    Unknown email and wrong password raise the same InvalidCredentials.
    A disabled account raises AccountDisabled once the password has matched.
    """
    user = (
        db.query(User)
        .options(joinedload(User.role))
        .filter(User.email == email)
        .first()
    )
    if user is None:
        verify_password(password, _dummy_password_hash())
        logger.info("Login failed: invalid credentials")
        raise InvalidCredentials()
    if not verify_password(password, user.password_hash):
        logger.info("Login failed: invalid credentials")
        raise InvalidCredentials()
    if not user.is_active:
        logger.info("Login refused: user id=%s is disabled", user.id)
        raise AccountDisabled()
    logger.info("Login succeeded: user id=%s", user.id)
    return issue_token(user), user


def change_password(db: Session, user_id: int, current_password: str, new_password: str) -> None:
    """Replace the password hash after checking the current password."""
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise UserNotFound()
    if not verify_password(current_password, user.password_hash):
        raise InvalidCredentials("Current password is incorrect.", status_code=401)
    user.password_hash = hash_password(new_password)
    db.commit()
    logger.info("Password changed: user id=%s", user_id)


def update_profile(db: Session, user_id: int, name: str | None, avatar: str | None) -> User:
    """Update own name and/or avatar; None leaves a field unchanged."""
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise UserNotFound()
    if name:
        user.name = name
    if avatar:
        user.avatar = avatar
    db.commit()
    return load_user(db, user_id)
