from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from fastapi.security.utils import get_authorization_scheme_param
from jose import JWTError
from ...application.dto import SessionContext
from ...infrastructure.security import decode_token

# no auto_error: a missing header must surface as 401 from the handler's own guard
bearer = HTTPBearer(auto_error=False)

def session_from_token(token: str | None) -> SessionContext | None:
    if not token:
        return None
    try:
        claims = decode_token(token)
    except JWTError:
        return None
    return SessionContext.from_claims(claims)

def session_from_request(request: Request) -> SessionContext | None:
    """Same check as `get_session`, for code paths that run before dependencies do."""
    scheme, token = get_authorization_scheme_param(request.headers.get("Authorization"))
    if scheme.lower() != "bearer":
        return None
    return session_from_token(token)

def get_session(creds: HTTPAuthorizationCredentials | None = Depends(bearer)) -> SessionContext | None:
    if creds is None:
        return None
    return session_from_token(creds.credentials)
