from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

# Base class for all database models
Base = declarative_base()


def create_db_engine(database_url: str) -> Engine:
    """
    Create the process-wide engine.

    SQLite connections are created in one thread and used in another because
    FastAPI runs sync dependencies in a threadpool, so the same-thread check is off.
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, connect_args=connect_args)


def create_session_factory(engine: Engine) -> sessionmaker:
    # autocommit=False: Changes require explicit commit
    # autoflush=False: Don't auto-flush before queries
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Create tables for every model that inherits from Base"""
    # Importing the models registers them on Base.metadata
    from railcomplaints.models import complaint, user  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db(request: Request):
    """
    Dependency for getting database session.

    Each request gets its own session from the factory created at startup.
    The session is closed after the request completes, even on errors.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
