from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from ...domain.entities import Role
from ...application.dto import PublicUser

class RegisterReq(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(min_length=6)
    role: Role | None = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

class LoginReq(BaseModel):
    # формат email здесь не проверяем: любой промах должен давать 401
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

class PublicUserResp(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    name: str
    email: str
    role: str
    avatar: str | None = None
    created_at: datetime | None = None
    last_login: datetime | None = None

    @classmethod
    def from_dto(cls, u: PublicUser) -> "PublicUserResp":
        return cls(
            id=u.id,
            name=u.name,
            email=u.email,
            role=u.role,
            avatar=u.avatar,
            created_at=u.created_at,
            last_login=u.last_login,
        )

class RegisterResp(BaseModel):
    id: int
    name: str
    email: str
    role: str
    token: str

class LoginResp(BaseModel):
    access_token: str
    token_type: str = "Bearer"
    user: PublicUserResp

class ErrorResp(BaseModel):
    message: str
    error: str | None = None
