from datetime import datetime

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .models import UserORM, as_utc
from ..domain.entities import User
from ..domain.errors import DuplicateCredential, NotFound, StoreUnavailable
from ..application.dto import PublicUser
from ..application.ports import IUserRepository

logger = structlog.get_logger()

# Колонки, которые можно читать для /me: без password_hash
PUBLIC_COLUMNS = (
    UserORM.id,
    UserORM.name,
    UserORM.email,
    UserORM.role,
    UserORM.avatar,
    UserORM.created_at,
    UserORM.last_login,
)

def to_domain(u: UserORM) -> User:
    return User(
        id=u.id,
        name=u.name,
        email=u.email,
        password_hash=u.password_hash,
        role=u.role,
        avatar=u.avatar,
        created_at=as_utc(u.created_at),
        last_login=as_utc(u.last_login),
    )

class UserRepository(IUserRepository):
    def __init__(self, db: Session): self.db = db

    def _store_error(self, op: str, exc: SQLAlchemyError) -> StoreUnavailable:
        self.db.rollback()
        # только ошибка драйвера: в str(exc) попадают параметры запроса
        logger.error("store_error", op=op, error=exc.__class__.__name__, detail=str(getattr(exc, "orig", None) or ""))
        return StoreUnavailable()

    def get_by_email(self, email: str) -> User | None:
        try:
            row = self.db.query(UserORM).filter(UserORM.email == email).first()
        except SQLAlchemyError as e:
            raise self._store_error("get_by_email", e) from e
        return to_domain(row) if row else None

    def get_public_by_id(self, user_id: int) -> PublicUser | None:
        try:
            row = self.db.query(*PUBLIC_COLUMNS).filter(UserORM.id == user_id).first()
        except SQLAlchemyError as e:
            raise self._store_error("get_public_by_id", e) from e
        if row is None:
            return None
        return PublicUser(
            id=row.id,
            name=row.name,
            email=row.email,
            role=row.role,
            avatar=row.avatar,
            created_at=as_utc(row.created_at),
            last_login=as_utc(row.last_login),
        )

    def create(self, name: str, email: str, password_hash: str, role: str = "student") -> User:
        row = UserORM(name=name, email=email, password_hash=password_hash, role=role)
        try:
            self.db.add(row); self.db.commit(); self.db.refresh(row)
        except IntegrityError as e:
            # проиграли гонку за email: уникальный индекс решает
            self.db.rollback()
            raise DuplicateCredential() from e
        except SQLAlchemyError as e:
            raise self._store_error("create", e) from e
        return to_domain(row)

    def touch_last_login(self, user_id: int, when: datetime) -> User:
        try:
            row = self.db.get(UserORM, user_id)
            if row is None:
                raise NotFound()
            row.last_login = when
            self.db.commit(); self.db.refresh(row)
        except SQLAlchemyError as e:
            raise self._store_error("touch_last_login", e) from e
        return to_domain(row)
