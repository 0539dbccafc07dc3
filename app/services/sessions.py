"""Session resolution: bearer token -> active user with role, fresh on every request."""

import logging

import jwt
from sqlalchemy.orm import Session

from app.core.errors import AccountDisabled, InvalidToken, UserNotFound
from app.core.security import decode_access_token
from app.models import User
from app.services.accounts import load_user

logger = logging.getLogger(__name__)


def user_id_from_token(token: str) -> int:
    """Verify signature and expiry and return the user id. Raises InvalidToken."""
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError as e:
        logger.info("Token rejected: %s", type(e).__name__)
        raise InvalidToken() from e
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidToken("Invalid token payload.") from e


def resolve_session(db: Session, token: str) -> User:
    """
    Recover the acting user from a bearer token, with the role joined in.

    The role is read from the database on every call; nothing about
    authorization is taken from the token. Database errors propagate.
    Raises InvalidToken, UserNotFound, or AccountDisabled.
    """
    user_id = user_id_from_token(token)
    user = load_user(db, user_id)
    if user is None:
        raise UserNotFound()
    if not user.is_active:
        raise AccountDisabled()
    return user
