from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from auth_service.config import Settings
from auth_service.domain.errors import ConfigurationError, InvalidToken
from auth_service.infrastructure.security import (
    PasswordHasher, TokenIssuer, create_access_token, parse_ttl,
)
from auth_service.main import build_token_issuer, create_app


@pytest.mark.parametrize("value, expected", [
    ("3600", timedelta(seconds=3600)),
    (900, timedelta(seconds=900)),
    ("45s", timedelta(seconds=45)),
    ("15m", timedelta(minutes=15)),
    ("12h", timedelta(hours=12)),
    ("30d", timedelta(days=30)),
    ("2w", timedelta(weeks=2)),
])
def test_parse_ttl(value, expected):
    assert parse_ttl(value) == expected


@pytest.mark.parametrize("value", [None, "", "0", "abc", "10y", "-5m", "99999999999999w"])
def test_parse_ttl_rejects_bad_values(value):
    with pytest.raises(ConfigurationError):
        parse_ttl(value)


def test_issuer_requires_secret():
    with pytest.raises(ConfigurationError):
        TokenIssuer("", "1h")
    with pytest.raises(ConfigurationError):
        create_access_token("1", "", timedelta(hours=1))


def test_issuer_is_deterministic_for_same_issue_time():
    issuer = TokenIssuer("secret", "1h")
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    assert issuer.issue(7, now=now) == issuer.issue(7, now=now)


def test_token_claims():
    issuer = TokenIssuer("secret", "30d")
    now = datetime.now(timezone.utc).replace(microsecond=0)
    token = issuer.issue(42, now=now)

    claims = jwt.decode(token, "secret", algorithms=["HS256"])
    assert claims["sub"] == "42"
    assert claims["exp"] - claims["iat"] == 30 * 86400
    assert issuer.decode(token).user_id == 42


def test_token_from_other_secret_is_rejected():
    token = TokenIssuer("other-secret", "1h").issue(1)
    with pytest.raises(InvalidToken):
        TokenIssuer("secret", "1h").decode(token)


def test_expired_token_is_rejected():
    issuer = TokenIssuer("secret", "1m")
    token = issuer.issue(1, now=datetime.now(timezone.utc) - timedelta(minutes=5))
    with pytest.raises(InvalidToken):
        issuer.decode(token)


def test_token_with_non_numeric_subject_is_rejected():
    token = create_access_token("ada@x.com", "secret", timedelta(hours=1))
    with pytest.raises(InvalidToken):
        TokenIssuer("secret", "1h").decode(token)


def test_password_hasher():
    hasher = PasswordHasher(rounds=4)
    hashed = hasher.hash("s3cret")
    assert hashed and hashed != "s3cret"
    assert hasher.verify("s3cret", hashed)
    assert not hasher.verify("wrong", hashed)
    assert hasher.dummy_verify() is False


@pytest.mark.parametrize("overrides", [
    {"JWT_SECRET": ""},
    {"JWT_EXPIRE": ""},
    {"JWT_EXPIRE": "forever"},
])
def test_build_token_issuer_fails_on_bad_config(overrides):
    params = {"JWT_SECRET": "s", "JWT_EXPIRE": "1h", **overrides}
    with pytest.raises(ConfigurationError):
        build_token_issuer(Settings(_env_file=None, **params))


def test_startup_fails_without_secret(tmp_path):
    """Без секрета сервис не должен подниматься"""
    settings = Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite:///{tmp_path / 'auth.db'}",
        JWT_SECRET="",
        JWT_EXPIRE="1h",
    )
    with pytest.raises(ConfigurationError):
        with TestClient(create_app(settings)):
            pass
