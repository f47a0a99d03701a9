from ...domain.entities import Identity
from ...domain.errors import NotFound
from ..dto import PublicUser
from ..ports import IUserRepository

class GetCurrentUser:
    def __init__(self, repo: IUserRepository):
        self.repo = repo

    def execute(self, identity: Identity) -> PublicUser:
        # пользователя могли удалить после выдачи токена
        user = self.repo.get_public_by_id(identity.user_id)
        if user is None:
            raise NotFound()
        return user
