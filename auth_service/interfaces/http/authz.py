from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from ...application.ports import ITokenIssuer
from ...domain.entities import Identity
from ...domain.errors import InvalidToken

# auto_error=False: отсутствие заголовка тоже должно давать 401, а не 403
bearer = HTTPBearer(auto_error=False)

def get_token_issuer(request: Request) -> ITokenIssuer:
    return request.app.state.token_issuer

def get_current_identity(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    issuer: ITokenIssuer = Depends(get_token_issuer),
) -> Identity:
    if creds is None:
        raise InvalidToken()
    return issuer.decode(creds.credentials)
