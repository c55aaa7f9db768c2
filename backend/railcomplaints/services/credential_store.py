import logging
from typing import Optional
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from railcomplaints.core.errors import ConflictError, StorageError
from railcomplaints.core.security import PasswordHasher
from railcomplaints.models.user import User

logger = logging.getLogger(__name__)

EMAIL_TAKEN_MESSAGE = "User already exists"


def normalize_email(email: str) -> str:
    """Emails are compared case-insensitively, so they are stored lower-cased"""
    return email.strip().lower()


def find_by_email(db: Session, email: str) -> Optional[User]:
    try:
        return db.query(User).filter(User.email == normalize_email(email)).first()
    except SQLAlchemyError:
        logger.exception("Failed to look up user by email")
        raise StorageError()


def get_by_id(db: Session, user_id: int) -> Optional[User]:
    try:
        return db.query(User).filter(User.id == user_id).first()
    except SQLAlchemyError:
        logger.exception("Failed to load user %s", user_id)
        raise StorageError()


def create_user(db: Session, hasher: PasswordHasher, email: str, password: str, name: str) -> User:
    """
    Register a new user.

    Raises ConflictError if the normalized email is taken and StorageError
    for any other database failure. The plaintext password is only handed
    to the hasher.
    """
    email = normalize_email(email)

    # Explicit check gives a clean conflict; the unique constraint below
    # still catches two registrations racing for the same email
    if find_by_email(db, email) is not None:
        raise ConflictError(EMAIL_TAKEN_MESSAGE)

    db_user = User(
        email=email,
        hashed_password=hasher.hash(password),
        name=name,
    )
    try:
        db.add(db_user)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(EMAIL_TAKEN_MESSAGE)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create user")
        raise StorageError("Error creating user")

    # Load auto-generated fields (id, created_at)
    db.refresh(db_user)
    logger.info("Registered user %s", db_user.id)
    return db_user
