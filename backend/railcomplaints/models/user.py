from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from railcomplaints.core.database import Base


class User(Base):
    """
    User model representing registered complainants.

    Passwords are stored as bcrypt hashes (never plaintext).
    Users are created once at registration and never updated.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    # Stored lower-cased; unique and indexed for login lookups
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    name = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
