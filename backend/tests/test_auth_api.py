from unittest.mock import MagicMock
from sqlalchemy.exc import OperationalError
from railcomplaints.core.database import get_db


def register(client, email="a@x.com", password="secret1", name="Alice"):
    return client.post("/api/register", json={"email": email, "password": password, "name": name})


def test_register_creates_user(client):
    response = register(client)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "User created successfully"
    assert isinstance(body["userId"], int)


def test_register_duplicate_email_is_rejected(client):
    assert register(client).status_code == 201

    response = register(client, email="A@X.com", name="Alice Again")

    assert response.status_code == 400
    assert response.json() == {"detail": "User already exists"}


def test_register_validation_errors_are_400(client):
    # Too short
    assert register(client, password="12345").status_code == 400
    # Not an email
    assert register(client, email="not-an-email").status_code == 400
    # Whitespace-only name
    assert register(client, name="   ").status_code == 400
    # Missing field
    response = client.post("/api/register", json={"email": "a@x.com", "password": "secret1"})
    assert response.status_code == 400
    assert isinstance(response.json()["detail"], list)


def test_register_never_returns_password(client):
    response = register(client)

    assert "secret1" not in response.text
    assert "password" not in response.json()


def test_login_returns_token_and_user(client):
    user_id = register(client).json()["userId"]

    response = client.post("/api/login", json={"email": "A@x.com", "password": "secret1"})

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Login successful"
    assert body["token"]
    assert body["user"] == {"id": user_id, "email": "a@x.com", "name": "Alice"}


def test_login_failures_do_not_reveal_which_part_was_wrong(client):
    register(client)

    wrong_password = client.post("/api/login", json={"email": "a@x.com", "password": "nope123"})
    unknown_email = client.post("/api/login", json={"email": "who@x.com", "password": "secret1"})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"detail": "Invalid credentials"}


def test_login_validation_errors_are_400(client):
    assert client.post("/api/login", json={"email": "a@x.com"}).status_code == 400
    assert client.post("/api/login", json={"email": "a@x.com", "password": ""}).status_code == 400
    assert client.post("/api/login", json={"email": "nope", "password": "secret1"}).status_code == 400


def test_profile_returns_current_user(client, auth_headers):
    headers = auth_headers(email="a@x.com", name="Alice")

    response = client.get("/api/profile", headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert body["email"] == "a@x.com"
    assert body["name"] == "Alice"
    assert body["createdAt"]
    assert "hashedPassword" not in body


def test_protected_route_without_token_is_401(client):
    response = client.get("/api/profile")

    assert response.status_code == 401
    assert response.json() == {"detail": "Access token required"}
    assert response.headers["www-authenticate"] == "Bearer"


def test_protected_route_with_non_bearer_scheme_is_401(client):
    response = client.get("/api/profile", headers={"Authorization": "Basic YTpi"})

    assert response.status_code == 401


def test_protected_route_with_invalid_token_is_403(client):
    response = client.get("/api/profile", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 403
    assert response.json() == {"detail": "Invalid token"}


def test_root_and_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/").json()["message"] == "Rail Complaints API"


def test_database_failures_are_generic_500s(client, auth_headers):
    headers = auth_headers()
    broken_db = MagicMock()
    broken_db.query.side_effect = OperationalError("SELECT * FROM users", {}, Exception("disk I/O error"))
    client.app.dependency_overrides[get_db] = lambda: broken_db
    try:
        login = client.post("/api/login", json={"email": "a@x.com", "password": "secret1"})
        register_response = register(client, email="new@x.com")
        profile = client.get("/api/profile", headers=headers)
    finally:
        client.app.dependency_overrides.clear()

    for response in (login, register_response, profile):
        assert response.status_code == 500
        assert response.json() == {"detail": "Database error occurred"}
        assert "SELECT" not in response.text
