from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.orm import Session

from ....application.dto import RegisterUserInput, SessionContext
from ....application.errors import Unauthorized
from ....application.use_cases.authenticate_user import AuthenticateUser
from ....application.use_cases.refresh_session import RefreshSession
from ....application.use_cases.register_user import RegisterUser
from ....infrastructure.db import get_db
from ....infrastructure.rate_limit import limiter, default_limit, LOGIN_LIMIT
from ....infrastructure.repositories import UserRepository
from ....infrastructure.security import PasswordHasher, create_access_token
from ..authz import get_session
from ..errors import translate_errors
from ..schemas import (
    RegisterReq, LoginReq, UserResp, TokenResp, SessionRefreshReq, SessionResp,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])

@router.post("/register", response_model=UserResp, status_code=status.HTTP_201_CREATED)
@limiter.limit(default_limit)
def register(
    request: Request,
    payload: RegisterReq,
    db: Session = Depends(get_db),
):
    uc = RegisterUser(repo=UserRepository(db), hasher=PasswordHasher())
    with translate_errors("register", "Failed to register"):
        user = uc.execute(RegisterUserInput(email=payload.email, password=payload.password, name=payload.name))
    return UserResp(**user.public())

@router.post("/login", response_model=TokenResp)
@limiter.limit(LOGIN_LIMIT)
def login(
    request: Request,
    payload: LoginReq,
    db: Session = Depends(get_db),
):
    uc = AuthenticateUser(repo=UserRepository(db), hasher=PasswordHasher())
    with translate_errors("login", "Failed to sign in"):
        user = uc.execute(payload.email, payload.password)
    return TokenResp(access_token=create_access_token(user))

@router.get("/session", response_model=UserResp)
def current_session(session: SessionContext | None = Depends(get_session)):
    if session is None:
        raise HTTPException(status_code=401, detail=Unauthorized.default_message)
    return UserResp(id=session.user_id, email=session.email, name=session.name, role=session.role)

@router.post("/session/refresh", response_model=SessionResp)
def refresh_session(
    payload: SessionRefreshReq | None = None,
    session: SessionContext | None = Depends(get_session),
    db: Session = Depends(get_db),
):
    """Re-issues the session token from the stored record."""
    uc = RefreshSession(repo=UserRepository(db))
    with translate_errors("refresh_session", "Failed to refresh session"):
        user = uc.execute(session, payload.patch if payload else None)
    return SessionResp(access_token=create_access_token(user), user=UserResp(**user.public()))
