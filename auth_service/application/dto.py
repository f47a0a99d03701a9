from dataclasses import dataclass
from datetime import datetime

from ..domain.entities import User


@dataclass(frozen=True)
class PublicUser:
    """Пользователь без password_hash: только то, что можно отдать клиенту."""
    id: int
    name: str
    email: str
    role: str
    avatar: str | None = None
    created_at: datetime | None = None
    last_login: datetime | None = None

    @classmethod
    def from_user(cls, user: User) -> "PublicUser":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            avatar=user.avatar,
            created_at=user.created_at,
            last_login=user.last_login,
        )


@dataclass(frozen=True)
class RegisterResult:
    user: PublicUser
    token: str


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: PublicUser
    token_type: str = "Bearer"
