from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ....application.dto import SessionContext
from ....application.use_cases.profile import GetProfile, GetRole, UpdateName, UpdateRole
from ....infrastructure.cache import ProfileCache
from ....infrastructure.db import get_db
from ....infrastructure.repositories import UserRepository
from ..authz import get_session
from ..errors import translate_errors
from ..schemas import (
    ProfileUpdateReq, ProfileUpdateResp, ProfileView, RoleResp, RoleUpdateReq,
    RoleUpdateResp, UserResp,
)

router = APIRouter(prefix="/api/user", tags=["user"])

def get_profile_cache() -> ProfileCache:
    return ProfileCache()

@router.get("/profile", response_model=UserResp)
def read_profile(
    session: SessionContext | None = Depends(get_session),
    db: Session = Depends(get_db),
    cache: ProfileCache = Depends(get_profile_cache),
):
    with translate_errors("get_profile", "Failed to fetch user data"):
        user = GetProfile(UserRepository(db), cache).execute(session)
    return UserResp(**user.public())

@router.put("/profile", response_model=ProfileUpdateResp)
def update_profile(
    payload: ProfileUpdateReq,
    session: SessionContext | None = Depends(get_session),
    db: Session = Depends(get_db),
    cache: ProfileCache = Depends(get_profile_cache),
):
    # email is not part of the request model, whatever the client sends is dropped
    with translate_errors("update_profile", "Failed to update profile"):
        user = UpdateName(UserRepository(db), cache).execute(session, payload.name, payload.role)
    return ProfileUpdateResp(
        message="Profile updated successfully",
        user=ProfileView(name=user.name, email=user.email, role=user.role),
    )

@router.get("/role", response_model=RoleResp)
def read_role(
    session: SessionContext | None = Depends(get_session),
    db: Session = Depends(get_db),
):
    with translate_errors("get_role", "Error fetching user role"):
        role = GetRole(UserRepository(db)).execute(session)
    return RoleResp(role=role)

@router.put("/role", response_model=RoleUpdateResp)
def update_role(
    payload: RoleUpdateReq,
    session: SessionContext | None = Depends(get_session),
    db: Session = Depends(get_db),
    cache: ProfileCache = Depends(get_profile_cache),
):
    with translate_errors("update_role", "Error updating role"):
        user = UpdateRole(UserRepository(db), cache).execute(session, payload.role)
    # public() carries no credential fields
    return RoleUpdateResp(message="Role updated successfully", user=UserResp(**user.public()))
