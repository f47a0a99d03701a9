import re
from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError

from ..domain.entities import Identity
from ..domain.errors import ConfigurationError, InvalidToken
from ..application.ports import IPasswordHasher, ITokenIssuer

_TTL_RE = re.compile(r"^\s*(\d+)\s*([smhdw]?)\s*$")
_TTL_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400, "w": 604800}


class PasswordHasher(IPasswordHasher):
    def __init__(self, rounds: int | None = None):
        options = {"bcrypt_sha256__truncate_error": False}
        if rounds:
            options["bcrypt_sha256__rounds"] = rounds
        self.pwd = CryptContext(schemes=["bcrypt_sha256"], deprecated="auto", **options)

    def hash(self, plain: str) -> str: return self.pwd.hash(plain)
    def verify(self, plain: str, hashed: str) -> bool: return self.pwd.verify(plain, hashed)

    def dummy_verify(self) -> bool:
        """Та же работа, что и verify, для несуществующего пользователя."""
        return self.pwd.dummy_verify()


def parse_ttl(value: str | int | None) -> timedelta:
    """Разбирает срок жизни токена: "3600", "15m", "12h", "30d", "2w"."""
    if value is None or value == "":
        raise ConfigurationError("JWT_EXPIRE is not set")
    m = _TTL_RE.match(str(value))
    if not m:
        raise ConfigurationError(f"JWT_EXPIRE has invalid format: {value!r}")
    seconds = int(m.group(1)) * _TTL_UNITS[m.group(2)]
    if seconds <= 0:
        raise ConfigurationError("JWT_EXPIRE must be positive")
    try:
        return timedelta(seconds=seconds)
    except OverflowError as e:
        raise ConfigurationError(f"JWT_EXPIRE is too large: {value!r}") from e


def create_access_token(
    sub: str,
    secret: str,
    ttl: timedelta,
    algorithm: str = "HS256",
    now: datetime | None = None,
) -> str:
    if not secret:
        raise ConfigurationError("JWT_SECRET is not set")
    iat = now or datetime.now(timezone.utc)
    payload = {"sub": sub, "iat": iat, "exp": iat + ttl}
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_token(token: str, secret: str, algorithm: str = "HS256") -> str:
    """Возвращает sub из токена или кидает JWTError."""
    payload = jwt.decode(token, secret, algorithms=[algorithm])
    sub = payload.get("sub")
    if not sub:
        raise JWTError("No subject")
    return sub


class TokenIssuer(ITokenIssuer):
    def __init__(self, secret: str, ttl: str | timedelta, algorithm: str = "HS256"):
        if not secret:
            raise ConfigurationError("JWT_SECRET is not set")
        self.secret = secret
        self.ttl = ttl if isinstance(ttl, timedelta) else parse_ttl(ttl)
        self.algorithm = algorithm

    def issue(self, user_id: int, now: datetime | None = None) -> str:
        return create_access_token(str(user_id), self.secret, self.ttl, self.algorithm, now=now)

    def decode(self, token: str) -> Identity:
        try:
            sub = decode_token(token, self.secret, self.algorithm)
            return Identity(user_id=int(sub))
        except (JWTError, ValueError) as e:
            raise InvalidToken() from e
