import structlog

from ...domain.entities import UserProfile
from ..dto import SessionContext
from ..errors import NotFound
from ..ports import IUserRepository
from .profile import require_session

logger = structlog.get_logger(__name__)


class RefreshSession:
    """Rebuilds the session snapshot from the persisted record.

    The caller's patch is only a hint of what it expects to have changed;
    values that disagree with the store are logged and discarded.
    """

    def __init__(self, repo: IUserRepository):
        self.repo = repo

    def execute(self, session: SessionContext | None, patch: dict | None = None) -> UserProfile:
        session = require_session(session)
        profile = self.repo.get_by_id(session.user_id)
        if profile is None:
            raise NotFound("User not found")
        if patch:
            current = profile.public()
            stale = sorted(k for k, v in patch.items() if k in current and current[k] != v)
            if stale:
                logger.warning("session_patch_ignored", user_id=session.user_id, fields=stale)
        return profile
