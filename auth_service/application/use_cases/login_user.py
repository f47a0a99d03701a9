from datetime import datetime, timezone

import structlog

from ...domain.errors import InvalidCredentials, NotFound
from ..dto import LoginResult, PublicUser
from ..ports import IUserRepository, IPasswordHasher, ITokenIssuer

logger = structlog.get_logger()

class LoginUser:
    def __init__(self, repo: IUserRepository, hasher: IPasswordHasher, issuer: ITokenIssuer):
        self.repo = repo
        self.hasher = hasher
        self.issuer = issuer

    def execute(self, email: str, password: str) -> LoginResult:
        user = self.repo.get_by_email(email)
        if user is None:
            # хэшируем впустую, чтобы по времени ответа не было видно, есть ли такой email
            self.hasher.dummy_verify()
            logger.info("login_failed", reason="unknown_email")
            raise InvalidCredentials()
        if not self.hasher.verify(password, user.password_hash):
            logger.info("login_failed", reason="bad_password", user_id=user.id)
            raise InvalidCredentials()

        try:
            user = self.repo.touch_last_login(user.id, datetime.now(timezone.utc))
        except NotFound:
            # запись удалили между проверкой пароля и обновлением
            logger.info("login_failed", reason="user_vanished", user_id=user.id)
            raise InvalidCredentials()
        token = self.issuer.issue(user.id)
        logger.info("user_login", user_id=user.id)
        return LoginResult(token=token, user=PublicUser.from_user(user))
