import structlog

from ...domain.entities import Role
from ...domain.errors import DuplicateCredential, ValidationError
from ..dto import PublicUser, RegisterResult
from ..ports import IUserRepository, IPasswordHasher, ITokenIssuer

logger = structlog.get_logger()

class RegisterUser:
    def __init__(self, repo: IUserRepository, hasher: IPasswordHasher, issuer: ITokenIssuer):
        self.repo = repo
        self.hasher = hasher
        self.issuer = issuer

    def execute(self, name: str, email: str, password: str, role: str | None = None) -> RegisterResult:
        # формат полей проверяет схема запроса; здесь только защита для вызовов не через HTTP
        if not name or not email or not password:
            raise ValidationError("Name, email and password are required")
        role = role or Role.STUDENT.value

        if self.repo.get_by_email(email):
            logger.info("registration_rejected", reason="duplicate_email", email=email)
            raise DuplicateCredential()

        pwd_hash = self.hasher.hash(password)
        # DuplicateCredential может прилететь и отсюда, если кто-то успел раньше
        user = self.repo.create(name, email, pwd_hash, role=role)
        logger.info("user_registered", user_id=user.id, role=user.role)
        return RegisterResult(user=PublicUser.from_user(user), token=self.issuer.issue(user.id))
