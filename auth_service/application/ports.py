from datetime import datetime

from ..domain.entities import User, Identity
from .dto import PublicUser


class IUserRepository:
    def get_by_email(self, email: str) -> User | None: ...
    def get_public_by_id(self, user_id: int) -> PublicUser | None: ...
    def create(self, name: str, email: str, password_hash: str, role: str = "student") -> User: ...
    def touch_last_login(self, user_id: int, when: datetime) -> User: ...


class IPasswordHasher:
    def hash(self, plain: str) -> str: ...
    def verify(self, plain: str, hashed: str) -> bool: ...
    def dummy_verify(self) -> bool: ...


class ITokenIssuer:
    def issue(self, user_id: int) -> str: ...
    def decode(self, token: str) -> Identity: ...
