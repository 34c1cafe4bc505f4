import httpx
import structlog

from ...domain.entities import UserProfile
from .api import ApiError, profile_from_json, request_json

logger = structlog.get_logger(__name__)


class SessionStore:
    """Client-side holder of the session token and its cached identity."""

    def __init__(self, http: httpx.AsyncClient, token: str | None = None):
        self.http = http
        self.token = token
        self._identity: UserProfile | None = None

    def auth_headers(self) -> dict:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def current_identity(self) -> UserProfile | None:
        return self._identity

    async def login(self, email: str, password: str) -> UserProfile:
        data = await request_json(
            self.http, "POST", "/api/auth/login", "Failed to sign in",
            json={"email": email, "password": password},
        )
        self.token = data["access_token"]
        return await self.load()

    async def load(self) -> UserProfile:
        data = await request_json(
            self.http, "GET", "/api/auth/session", "Failed to load session",
            headers=self.auth_headers(),
        )
        self._identity = profile_from_json(data)
        return self._identity

    async def refresh(self, patch: dict | None = None) -> UserProfile:
        """Asks the server to rebuild the session from the stored record.

        The cached identity is only replaced once the new token is in hand.
        """
        data = await request_json(
            self.http, "POST", "/api/auth/session/refresh", "Failed to refresh session",
            headers=self.auth_headers(), json={"patch": patch or {}},
        )
        try:
            identity = profile_from_json(data["user"])
            token = data["access_token"]
        except (KeyError, TypeError, ValueError):
            raise ApiError("Failed to refresh session")
        self.token = token
        self._identity = identity
        logger.debug("session_refreshed", user_id=identity.id, role=identity.role.value)
        return identity

    def clear(self) -> None:
        self.token = None
        self._identity = None
