import logging
from typing import Any, Dict, List, Optional
import httpx
from app.core.config import settings
from app.core.exceptions import GhostAPIError
from app.core.security import create_ghost_admin_token

logger = logging.getLogger(__name__)


class GhostAdminAPI:
    """
    Minimal async client for the Ghost Admin members API.

    Every failure (transport error, non-2xx status, unexpected payload) is
    raised as GhostAPIError so callers only have one thing to catch.
    """

    def __init__(
        self,
        url: str,
        admin_api_key: str,
        version: str = "v5.0",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.admin_api_key = admin_api_key
        self.version = version
        self.http = httpx.AsyncClient(
            base_url=f"{url.rstrip('/')}/ghost/api/admin",
            timeout=timeout,
            transport=transport,
        )

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Ghost {create_ghost_admin_token(self.admin_api_key)}",
            "Accept-Version": self.version,
        }

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            headers = self._headers()
        except ValueError as e:
            raise GhostAPIError(str(e))

        try:
            response = await self.http.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            raise GhostAPIError(f"Ghost request {method} {path} failed: {e}")

        if response.is_error:
            raise GhostAPIError(
                f"Ghost request {method} {path} returned {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError:
            raise GhostAPIError(f"Ghost request {method} {path} returned a non-JSON body")

    @staticmethod
    def _members(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        members = payload.get("members") if isinstance(payload, dict) else None
        if not isinstance(members, list):
            raise GhostAPIError("Ghost response is missing the 'members' list")
        return members

    async def browse_members(self, filter: str, limit: int = 15) -> List[Dict[str, Any]]:
        payload = await self._request("GET", "/members/", params={"filter": filter, "limit": limit})
        return self._members(payload)

    async def edit_member(self, member_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = await self._request("PUT", f"/members/{member_id}/", json={"members": [data]})
        members = self._members(payload)
        if not members:
            raise GhostAPIError(f"Ghost returned no member after editing {member_id}")
        return members[0]

    async def add_member(self, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = await self._request("POST", "/members/", json={"members": [data]})
        members = self._members(payload)
        if not members:
            raise GhostAPIError("Ghost returned no member after creating one")
        return members[0]

    async def close(self):
        await self.http.aclose()


class GhostManager:
    client: Optional[GhostAdminAPI] = None

    @classmethod
    def get_client(cls) -> GhostAdminAPI:
        if cls.client is None:
            url: str = settings.GHOST_API_URL
            key: str = settings.GHOST_ADMIN_API_KEY
            if not url or not key:
                raise GhostAPIError("Ghost API URL and Admin API Key must be provided in the environment variables.")
            cls.client = GhostAdminAPI(
                url=url,
                admin_api_key=key,
                version=settings.GHOST_API_VERSION,
                timeout=settings.GHOST_TIMEOUT,
            )
        return cls.client

    @classmethod
    async def close(cls):
        if cls.client is not None:
            await cls.client.close()
            cls.client = None

# Global instance to access the client manager
ghost = GhostManager()
