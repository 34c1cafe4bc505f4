from conftest import DEFAULT_PASSWORD, auth_headers

from examhub.domain.entities import Role


def test_register_user_success(client):
    """Тест успешной регистрации пользователя"""
    response = client.post(
        "/api/auth/register",
        json={"email": "test@example.com", "password": "password123", "name": "Test User"}
    )
    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "test@example.com"
    assert data["name"] == "Test User"
    assert data["role"] == "STUDENT"
    assert "id" in data
    assert "password_hash" not in data


def test_register_defaults_name_to_email_local_part(client):
    response = client.post(
        "/api/auth/register",
        json={"email": "jane.doe@example.com", "password": "password123"}
    )
    assert response.status_code == 201
    assert response.json()["name"] == "jane.doe"


def test_register_user_duplicate(client, make_user):
    """Тест регистрации с существующим email"""
    make_user(email="test@example.com")
    response = client.post(
        "/api/auth/register",
        json={"email": "test@example.com", "password": "password123"}
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Email already registered"


def test_register_user_invalid_email(client):
    """Тест регистрации с невалидным email"""
    response = client.post(
        "/api/auth/register",
        json={"email": "invalid-email", "password": "password123"}
    )
    assert response.status_code == 422


def test_register_user_short_password(client):
    """Тест регистрации с коротким паролем"""
    response = client.post(
        "/api/auth/register",
        json={"email": "test@example.com", "password": "123"}
    )
    assert response.status_code == 400


def test_login_success(client, make_user):
    """Тест успешного входа"""
    make_user(email="test@example.com")
    response = client.post(
        "/api/auth/login",
        json={"email": "test@example.com", "password": DEFAULT_PASSWORD}
    )
    assert response.status_code == 200
    data = response.json()
    assert "access_token" in data
    assert data["token_type"] == "bearer"


def test_login_invalid_credentials(client, make_user):
    """Тест входа с неверными учетными данными"""
    make_user(email="test@example.com")
    response = client.post(
        "/api/auth/login",
        json={"email": "test@example.com", "password": "wrongpassword"}
    )
    assert response.status_code == 401
    assert "Invalid credentials" in response.json()["detail"]


def test_login_nonexistent_user(client):
    """Тест входа несуществующего пользователя"""
    response = client.post(
        "/api/auth/login",
        json={"email": "nonexistent@example.com", "password": "password123"}
    )
    assert response.status_code == 401


def test_session_returns_identity(client, make_user):
    """Тест получения текущей сессии"""
    user = make_user(email="test@example.com", name="Test", role=Role.TEACHER)
    response = client.get("/api/auth/session", headers=auth_headers(user))
    assert response.status_code == 200
    assert response.json() == {
        "id": user.id, "email": "test@example.com", "name": "Test", "role": "TEACHER",
    }


def test_session_invalid_token(client):
    """Тест получения сессии с невалидным токеном"""
    response = client.get("/api/auth/session", headers={"Authorization": "Bearer invalid_token"})
    assert response.status_code == 401


def test_session_no_token(client):
    """Тест получения сессии без токена"""
    response = client.get("/api/auth/session")
    assert response.status_code == 401


def test_refresh_session_reads_stored_record(client, make_user, db, stored_user):
    """Обновлённая сессия отражает запись в БД, а не старый токен"""
    user = make_user(role=Role.STUDENT)
    headers = auth_headers(user)
    row = stored_user(user.id)
    row.role = Role.ADMIN.value
    row.name = "Renamed"
    db.commit()

    response = client.post(
        "/api/auth/session/refresh",
        headers=headers,
        json={"patch": {"role": "TEACHER"}},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["user"]["role"] == "ADMIN"
    assert data["user"]["name"] == "Renamed"

    session = client.get(
        "/api/auth/session",
        headers={"Authorization": f"Bearer {data['access_token']}"},
    )
    assert session.json()["role"] == "ADMIN"


def test_refresh_session_without_body(client, make_user):
    user = make_user()
    response = client.post("/api/auth/session/refresh", headers=auth_headers(user))
    assert response.status_code == 200
    assert response.json()["user"]["email"] == user.email


def test_refresh_session_requires_token(client):
    response = client.post("/api/auth/session/refresh", json={})
    assert response.status_code == 401


def test_refresh_session_user_deleted(client, make_user, db, stored_user):
    user = make_user()
    headers = auth_headers(user)
    db.delete(stored_user(user.id))
    db.commit()
    response = client.post("/api/auth/session/refresh", headers=headers, json={})
    assert response.status_code == 404


def test_full_auth_flow(client):
    """Интеграционный тест полного потока аутентификации"""
    email = "integration@example.com"
    password = "securepassword123"

    register_response = client.post("/api/auth/register", json={"email": email, "password": password})
    assert register_response.status_code == 201
    user_id = register_response.json()["id"]

    login_response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert login_response.status_code == 200
    token = login_response.json()["access_token"]

    me_response = client.get("/api/auth/session", headers={"Authorization": f"Bearer {token}"})
    assert me_response.status_code == 200
    assert me_response.json()["id"] == user_id
    assert me_response.json()["role"] == "STUDENT"


def test_login_rate_limited(client, make_user):
    """Тест rate limiting для логина"""
    make_user(email="test@example.com")
    statuses = [
        client.post("/api/auth/login", json={"email": "test@example.com", "password": "wrongpassword"}).status_code
        for _ in range(11)
    ]
    assert statuses[:10] == [401] * 10
    assert statuses[10] == 429
