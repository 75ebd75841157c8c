# app/services/users.py
"""
Account registration, credential checks and profile lookup.

Emails are stored exactly as submitted (surrounding whitespace removed);
uniqueness is case-sensitive. Login failures never reveal whether the email
exists.
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, UnauthenticatedError, UserNotFound
from app.core.password_policy import ensure_strong_password
from app.core.security import create_access_token, hash_password, verify_password
from app.models.user import User

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "User with this email already exists"
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Look up a user by email address."""
    return db.query(User).filter(User.email == email.strip()).first()


def get_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise UserNotFound()
    return user


def register_user(
    db: Session,
    *,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
) -> tuple[User, str]:
    """
    Create an account and issue its first access token.

    Raises:
        ValidationError: password does not meet the policy
        ConflictError: email already registered
    """
    ensure_strong_password(password)

    email = email.strip()
    if get_user_by_email(db, email) is not None:
        raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

    user = User(
        email=email,
        password_hash=hash_password(password),
        first_name=first_name.strip(),
        last_name=last_name.strip(),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent registration of the same email.
        db.rollback()
        raise ConflictError(DUPLICATE_EMAIL_MESSAGE) from exc
    db.refresh(user)

    logger.info("User registered user_id=%s", user.id)
    return user, create_access_token(user.id, user.email)


def authenticate_user(db: Session, *, email: str, password: str) -> tuple[User, str]:
    user = get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Login rejected")
        raise UnauthenticatedError(INVALID_CREDENTIALS_MESSAGE)

    logger.info("User logged in user_id=%s", user.id)
    return user, create_access_token(user.id, user.email)
