from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ....application.dto import SessionContext
from ....application.use_cases.dashboard import GetDashboard
from ....infrastructure.db import get_db
from ....infrastructure.repositories import UserRepository
from ..authz import get_session
from ..errors import translate_errors
from ..schemas import DashboardResp

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])

@router.get("", response_model=DashboardResp)
def dashboard(
    session: SessionContext | None = Depends(get_session),
    db: Session = Depends(get_db),
):
    with translate_errors("dashboard", "Failed to load dashboard"):
        return DashboardResp(**GetDashboard(UserRepository(db)).execute(session))
