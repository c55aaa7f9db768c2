import pytest
from fastapi.testclient import TestClient
from railcomplaints.core.config import Settings
from railcomplaints.core.database import create_db_engine, create_session_factory, init_db
from railcomplaints.core.security import PasswordHasher
from railcomplaints.main import create_app

TEST_SECRET_KEY = "test-secret-key"


@pytest.fixture
def settings(tmp_path):
    # Low bcrypt cost keeps the suite fast; _env_file=None ignores a developer's .env
    return Settings(
        _env_file=None,
        ENVIRONMENT="test",
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        SECRET_KEY=TEST_SECRET_KEY,
        BCRYPT_ROUNDS=4,
        TIMEZONE="UTC",
    )


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def db(settings):
    engine = create_db_engine(settings.DATABASE_URL)
    init_db(engine)
    session = create_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def client(settings):
    # Entering the context runs the lifespan, which creates the tables
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client):
    """Register + login a user and return the Authorization header for them"""
    def _auth_headers(email="a@x.com", password="secret1", name="Alice"):
        client.post("/api/register", json={"email": email, "password": password, "name": name})
        response = client.post("/api/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}
    return _auth_headers
