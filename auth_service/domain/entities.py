from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    STUDENT = "student"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"


@dataclass(frozen=True)
class User:
    id: int | None
    name: str
    email: str
    password_hash: str
    role: str = Role.STUDENT.value
    avatar: str | None = None
    created_at: datetime | None = None
    last_login: datetime | None = None


@dataclass(frozen=True)
class Identity:
    """Кто прислал запрос: результат проверки bearer-токена."""
    user_id: int
