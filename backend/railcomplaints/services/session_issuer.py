"""
Login and bearer-token handling.

Tokens are stateless HS256 JWTs: validity depends only on the signature and
the exp claim, so a token cannot be revoked before it expires.
"""

import logging
from dataclasses import dataclass
from sqlalchemy.orm import Session
from railcomplaints.core.config import Settings
from railcomplaints.core.errors import ForbiddenError, UnauthorizedError
from railcomplaints.core.security import PasswordHasher, create_access_token, decode_access_token
from railcomplaints.models.user import User
from railcomplaints.services import credential_store

logger = logging.getLogger(__name__)

# Same message for unknown email and wrong password
INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"
INVALID_TOKEN_MESSAGE = "Invalid token"


@dataclass(frozen=True)
class Identity:
    """The authenticated caller, as carried in the token claims"""
    user_id: int
    email: str
    name: str


def issue_token(user: User, settings: Settings) -> str:
    claims = {
        "sub": str(user.id),
        "userId": user.id,
        "email": user.email,
        "name": user.name,
    }
    return create_access_token(claims, settings)


def login(db: Session, hasher: PasswordHasher, settings: Settings, email: str, password: str) -> tuple[str, User]:
    """Check credentials and return (token, user); raises UnauthorizedError otherwise"""
    user = credential_store.find_by_email(db, email)

    if user is None:
        # Burn a bcrypt verify so timing does not reveal whether the email exists
        hasher.dummy_verify(password)
        logger.info("Login failed: unknown account")
        raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE)

    if not hasher.verify(password, user.hashed_password):
        logger.info("Login failed for user %s", user.id)
        raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE)

    return issue_token(user, settings), user


def identity_from_token(token: str, settings: Settings) -> Identity:
    """Verify a bearer token and return the identity it carries; raises ForbiddenError"""
    payload = decode_access_token(token, settings)
    if payload is None:
        raise ForbiddenError(INVALID_TOKEN_MESSAGE)

    user_id = payload.get("userId")
    email = payload.get("email")
    name = payload.get("name")

    # bool is an int subclass; a signed token with the wrong claim types is still invalid
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        raise ForbiddenError(INVALID_TOKEN_MESSAGE)
    if not isinstance(email, str) or not isinstance(name, str):
        raise ForbiddenError(INVALID_TOKEN_MESSAGE)

    return Identity(user_id=user_id, email=email, name=name)
