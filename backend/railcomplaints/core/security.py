from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from railcomplaints.core.config import Settings


class PasswordHasher:
    """
    bcrypt password hashing with a configurable cost factor.

    bcrypt generates a salt per hash and embeds it in the result, and
    passlib's verify compares digests in constant time.
    """

    def __init__(self, rounds: int = 12):
        self._context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)
        self._dummy_hash: Optional[str] = None

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        return self._context.verify(plain_password, hashed_password)

    def dummy_verify(self, plain_password: str) -> None:
        """Spend the same time as a real verify when there is no user to check against"""
        if self._dummy_hash is None:
            self._dummy_hash = self._context.hash("dummy-password-for-timing")
        self._context.verify(plain_password, self._dummy_hash)


def create_access_token(data: dict, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token with expiration"""
    to_encode = data.copy()

    issued_at = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"iat": issued_at, "exp": issued_at + expires_delta})

    # Algorithm must match in decode - changing it invalidates every issued token
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> Optional[dict]:
    """Decode and verify a JWT token"""
    try:
        # Signature and expiration are verified by jwt.decode
        return jwt.decode(token, settings.SECRET_KEY,
                          algorithms=[settings.ALGORITHM])
    except JWTError:
        # Expired, tampered with, or signed with another key
        return None
