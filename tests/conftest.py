import pytest
import os
import sys

CURRENT_DIR = os.path.dirname(__file__)
SERVICE_ROOT = os.path.dirname(CURRENT_DIR)
if SERVICE_ROOT not in sys.path:
    sys.path.insert(0, SERVICE_ROOT)

from fastapi.testclient import TestClient

from auth_service.config import Settings
from auth_service.main import create_app


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """Настройка тестового окружения"""
    monkeypatch.setenv("JWT_SECRET", "test-secret")
    monkeypatch.setenv("JWT_EXPIRE", "1h")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")


@pytest.fixture
def settings(tmp_path):
    """Отдельная SQLite-база на каждый тест, дешёвый bcrypt"""
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite:///{tmp_path / 'test_auth.db'}",
        JWT_SECRET="test-secret",
        JWT_EXPIRE="1h",
        BCRYPT_ROUNDS=4,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    """Фикстура для тестового клиента (с выполнением startup)"""
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Регистрирует пользователя и возвращает ответ"""
    def _register(name="Ada", email="ada@x.com", password="s3cret", **extra):
        return client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password, **extra},
        )
    return _register
