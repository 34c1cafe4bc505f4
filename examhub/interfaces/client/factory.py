import httpx

from ...config import settings
from .api import ProfileApiClient
from .profile_controller import ProfileViewController
from .session import SessionStore


def build_controller(
    token: str | None = None,
    base_url: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> tuple[ProfileViewController, httpx.AsyncClient]:
    """Wires a controller to a fresh HTTP client.

    The caller owns the returned client and must close it.
    """
    http = httpx.AsyncClient(base_url=base_url or settings.API_BASE_URL, transport=transport)
    session = SessionStore(http, token=token)
    api = ProfileApiClient(http, session)
    return ProfileViewController(api, session), http
