"""Profile and role use cases.

Every operation takes the request's `SessionContext` (or None) as its first
argument and refuses to touch the store without one. The session's user id is
the only key used to address the record.
"""
import structlog

from ...domain.entities import Role, UserProfile
from ..dto import SessionContext
from ..errors import InvalidInput, NotFound, Unauthorized
from ..ports import IProfileCache, IUserRepository, NullProfileCache

logger = structlog.get_logger(__name__)


def require_session(session: SessionContext | None) -> SessionContext:
    if session is None:
        raise Unauthorized()
    return session


def parse_role(value, message: str = "Invalid role") -> Role:
    try:
        return Role.parse(value)
    except ValueError:
        raise InvalidInput(message)


class _ProfileUseCase:
    def __init__(self, repo: IUserRepository, cache: IProfileCache | None = None):
        self.repo = repo
        self.cache = cache or NullProfileCache()

    def _load(self, user_id: int) -> UserProfile:
        profile = self.cache.get(user_id)
        if profile is None:
            profile = self.repo.get_by_id(user_id)
            if profile is None:
                raise NotFound("User not found")
            self.cache.put(profile)
        return profile

    def _write(self, user_id: int, **fields) -> UserProfile:
        # drop the cached snapshot first so no reader sees the pre-write copy
        self.cache.invalidate(user_id)
        updated = self.repo.update(user_id, **fields)
        # and again after commit, in case a concurrent read re-cached the old row
        self.cache.invalidate(user_id)
        if updated is None:
            raise NotFound("User not found")
        return updated


class GetProfile(_ProfileUseCase):
    def execute(self, session: SessionContext | None) -> UserProfile:
        session = require_session(session)
        return self._load(session.user_id)


class GetRole(_ProfileUseCase):
    def execute(self, session: SessionContext | None) -> Role:
        session = require_session(session)
        # role gates dashboard content, always read it from the store
        profile = self.repo.get_by_id(session.user_id)
        if profile is None:
            raise NotFound("User not found")
        return profile.role


class UpdateName(_ProfileUseCase):
    def execute(self, session: SessionContext | None, name, role=None) -> UserProfile:
        session = require_session(session)
        if not isinstance(name, str) or not name.strip():
            raise InvalidInput("Name is required")
        fields = {"name": name.strip()}
        # an empty role means "leave it as is"
        if role:
            fields["role"] = parse_role(role, "Invalid role")
        updated = self._write(session.user_id, **fields)
        logger.info("profile_updated", user_id=session.user_id, fields=sorted(fields))
        return updated


class UpdateRole(_ProfileUseCase):
    def execute(self, session: SessionContext | None, role) -> UserProfile:
        session = require_session(session)
        if role is None or role == "":
            raise InvalidInput("Role is required")
        new_role = parse_role(role, "Invalid role value")
        if self.repo.get_by_id(session.user_id) is None:
            raise NotFound("User not found")
        updated = self._write(session.user_id, role=new_role)
        logger.info("role_updated", user_id=session.user_id, role=new_role.value)
        return updated
