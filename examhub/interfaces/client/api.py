import httpx
import structlog

from ...domain.entities import Role, UserProfile

logger = structlog.get_logger(__name__)


class ApiError(Exception):
    """A failed call to the profile service, carrying a user-facing message."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def profile_from_json(data: dict) -> UserProfile:
    return UserProfile(
        id=data.get("id"),
        email=data["email"],
        name=data["name"],
        role=Role.parse(data["role"]),
    )


async def request_json(http: httpx.AsyncClient, method: str, url: str, fallback: str, **kwargs) -> dict:
    """Performs one request and returns the decoded body, or raises ApiError."""
    try:
        resp = await http.request(method, url, **kwargs)
    except httpx.HTTPError as e:
        logger.warning("api_transport_error", method=method, url=url, error=str(e))
        raise ApiError(fallback)
    try:
        data = resp.json()
    except ValueError:
        data = {}
    if resp.is_error:
        message = fallback
        if isinstance(data, dict):
            message = data.get("detail") or data.get("message") or fallback
        if not isinstance(message, str):
            message = fallback
        raise ApiError(message, resp.status_code)
    return data


class ProfileApiClient:
    """Thin wrapper over the `/api/user` endpoints.

    Authorization comes from the shared `SessionStore`, so a refreshed
    token is picked up by the next call without rebuilding the client.
    """

    def __init__(self, http: httpx.AsyncClient, session):
        self.http = http
        self.session = session

    async def _call(self, method: str, url: str, fallback: str, **kwargs) -> dict:
        return await request_json(
            self.http, method, url, fallback, headers=self.session.auth_headers(), **kwargs
        )

    async def get_profile(self) -> UserProfile:
        try:
            data = await self._call("GET", "/api/user/profile", "Failed to fetch user data")
            return profile_from_json(data)
        except (KeyError, TypeError, ValueError):
            raise ApiError("Failed to fetch user data")

    async def get_role(self) -> Role:
        data = await self._call("GET", "/api/user/role", "Failed to fetch user role")
        try:
            return Role.parse(data.get("role"))
        except ValueError:
            raise ApiError("Failed to fetch user role")

    async def update_profile(self, name: str) -> dict:
        data = await self._call("PUT", "/api/user/profile", "Failed to update profile", json={"name": name})
        return data.get("user", {})

    async def update_role(self, role: Role) -> UserProfile:
        data = await self._call("PUT", "/api/user/role", "Failed to update role", json={"role": role.value})
        try:
            return profile_from_json(data["user"])
        except (KeyError, TypeError, ValueError):
            raise ApiError("Failed to update role")
