from fastapi import APIRouter, Depends, status, Request
from sqlalchemy.orm import Session

from ....infrastructure.db import get_db
from ....infrastructure.metrics import auth_events_total
from ....infrastructure.repositories import UserRepository
from ....application.ports import IPasswordHasher, ITokenIssuer
from ....application.use_cases.register_user import RegisterUser
from ....application.use_cases.login_user import LoginUser
from ....application.use_cases.get_current_user import GetCurrentUser
from ....domain.entities import Identity
from ....domain.errors import AuthError
from ....interfaces.http.authz import get_current_identity, get_token_issuer
from ....interfaces.http.schemas import (
    RegisterReq, LoginReq, RegisterResp, LoginResp, PublicUserResp, ErrorResp,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])

def get_hasher(request: Request) -> IPasswordHasher:
    return request.app.state.password_hasher

@router.post(
    "/register",
    response_model=RegisterResp,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResp}, 500: {"model": ErrorResp}},
)
def register(
    payload: RegisterReq,
    db: Session = Depends(get_db),
    hasher: IPasswordHasher = Depends(get_hasher),
    issuer: ITokenIssuer = Depends(get_token_issuer),
):
    uc = RegisterUser(repo=UserRepository(db), hasher=hasher, issuer=issuer)
    role = payload.role.value if payload.role else None
    try:
        result = uc.execute(payload.name, payload.email, payload.password, role=role)
    except AuthError as e:
        auth_events_total.labels(event="register", outcome=e.kind.value).inc()
        raise
    auth_events_total.labels(event="register", outcome="success").inc()
    user = result.user
    return RegisterResp(id=user.id, name=user.name, email=user.email, role=user.role, token=result.token)

@router.post(
    "/login",
    response_model=LoginResp,
    responses={401: {"model": ErrorResp}, 500: {"model": ErrorResp}},
)
def login(
    payload: LoginReq,
    db: Session = Depends(get_db),
    hasher: IPasswordHasher = Depends(get_hasher),
    issuer: ITokenIssuer = Depends(get_token_issuer),
):
    uc = LoginUser(repo=UserRepository(db), hasher=hasher, issuer=issuer)
    try:
        result = uc.execute(payload.email, payload.password)
    except AuthError as e:
        auth_events_total.labels(event="login", outcome=e.kind.value).inc()
        raise
    auth_events_total.labels(event="login", outcome="success").inc()
    return LoginResp(
        access_token=result.token,
        token_type=result.token_type,
        user=PublicUserResp.from_dto(result.user),
    )


@router.get(
    "/me",
    response_model=PublicUserResp,
    responses={401: {"model": ErrorResp}, 404: {"model": ErrorResp}},
)
def me(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    user = GetCurrentUser(repo=UserRepository(db)).execute(identity)
    return PublicUserResp.from_dto(user)
