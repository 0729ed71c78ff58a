import httpx
import logging
from typing import Optional
from detailing_admin.core.config import settings

logger = logging.getLogger(__name__)

REFRESH_PATH = "/api/auth/refresh"


class SessionRefresher:
    """Calls the session refresh endpoint for a logged-in admin client.

    The shared ``httpx.AsyncClient`` keeps the ``admin_session`` cookie, so a
    rotated token set by the server is sent on the next call. Transport errors
    are raised to the caller.
    """

    def __init__(self, client: httpx.AsyncClient, path: str = REFRESH_PATH):
        self.client = client
        self.path = path

    async def __call__(self) -> bool:
        response = await self.client.get(self.path)
        if response.is_success:
            logger.debug("Session refresh succeeded")
            return True
        logger.warning(f"Session refresh rejected with status {response.status_code}")
        return False


def build_admin_client(
    base_url: str,
    session_token: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    cookies = {settings.SESSION_COOKIE_NAME: session_token} if session_token else None
    return httpx.AsyncClient(
        base_url=base_url,
        cookies=cookies,
        timeout=settings.SESSION_REFRESH_TIMEOUT,
        transport=transport,
    )
