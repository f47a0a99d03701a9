def test_full_auth_flow(client, app):
    """Интеграционный тест полного потока аутентификации"""
    # 1. Регистрация
    register_response = client.post(
        "/api/auth/register",
        json={"name": "Ada", "email": "ada@x.com", "password": "s3cret"}
    )
    assert register_response.status_code == 201
    user_data = register_response.json()
    assert user_data["role"] == "student"
    user_id = user_data["id"]

    # 2. Попытка повторной регистрации (должна провалиться)
    duplicate_response = client.post(
        "/api/auth/register",
        json={"name": "Ada", "email": "ada@x.com", "password": "s3cret"}
    )
    assert duplicate_response.status_code == 400
    assert duplicate_response.json()["error"] == "duplicate_credential"

    # 3. Логин с правильными данными
    login_response = client.post(
        "/api/auth/login",
        json={"email": "ada@x.com", "password": "s3cret"}
    )
    assert login_response.status_code == 200
    token_data = login_response.json()
    token = token_data["access_token"]
    assert token
    assert app.state.token_issuer.decode(token).user_id == user_id

    # 4. Логин с неправильным паролем
    wrong_password_response = client.post(
        "/api/auth/login",
        json={"email": "ada@x.com", "password": "wrong"}
    )
    assert wrong_password_response.status_code == 401

    # 5. Получение информации о себе с валидным токеном
    me_response = client.get(
        "/api/auth/me",
        headers={"Authorization": f"Bearer {token}"}
    )
    assert me_response.status_code == 200
    me_data = me_response.json()
    assert me_data["id"] == user_id
    assert me_data["name"] == "Ada"
    assert me_data["email"] == "ada@x.com"
    assert me_data["role"] == "student"
    assert me_data["lastLogin"] == token_data["user"]["lastLogin"]
    assert "passwordHash" not in me_data

    # 6. Токен из регистрации тоже годится для /me
    register_token_response = client.get(
        "/api/auth/me",
        headers={"Authorization": f"Bearer {user_data['token']}"}
    )
    assert register_token_response.status_code == 200

    # 7. Получение информации с невалидным токеном
    invalid_token_response = client.get(
        "/api/auth/me",
        headers={"Authorization": "Bearer invalid_token_here"}
    )
    assert invalid_token_response.status_code == 401

    # 8. Получение информации без токена
    no_token_response = client.get("/api/auth/me")
    assert no_token_response.status_code == 401


def test_multiple_users(client):
    """Тест работы с несколькими пользователями"""
    users = []

    for i in range(5):
        email = f"user{i}@x.com"
        password = f"password{i}"

        register_response = client.post(
            "/api/auth/register",
            json={"name": f"User {i}", "email": email, "password": password}
        )
        assert register_response.status_code == 201

        login_response = client.post(
            "/api/auth/login",
            json={"email": email, "password": password}
        )
        assert login_response.status_code == 200
        users.append({
            "id": register_response.json()["id"],
            "email": email,
            "token": login_response.json()["access_token"],
        })

    assert len({u["id"] for u in users}) == 5

    # Каждый токен открывает только своего пользователя
    for user in users:
        me_response = client.get(
            "/api/auth/me",
            headers={"Authorization": f"Bearer {user['token']}"}
        )
        assert me_response.status_code == 200
        assert me_response.json()["email"] == user["email"]
        assert me_response.json()["id"] == user["id"]
