"""
HTTP client for the RentHive API.
Wraps httpx so the client stores can work with plain dicts and one error type.
"""

from typing import Any, Dict, List, Optional, Tuple
import httpx
import logging

logger = logging.getLogger(__name__)

FileTuple = Tuple[str, bytes, str]


class ApiError(Exception):
    """
    A failed API call.
    ``message`` is display-ready; ``status_code`` is None for transport failures.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401


class ApiClient:
    """
    Thin async client over ``httpx.AsyncClient``.

    The session token is kept both in the cookie jar (set by the server) and in
    ``token``, which is sent as a Bearer header.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        transport: Optional[httpx.AsyncBaseTransport] = None,
        token: Optional[str] = None,
        api_prefix: str = "/api",
        timeout: float = 10.0
    ):
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)
        self.token = token
        self.api_prefix = api_prefix.rstrip("/")

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http.aclose()

    def _headers(self) -> Dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"Request failed with status {response.status_code}"
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return f"Request failed with status {response.status_code}"

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{self.api_prefix}{path}"
        try:
            response = await self._http.request(method, url, headers=self._headers(), **kwargs)
        except httpx.HTTPError as exc:
            logger.warning(f"{method} {url} failed: {exc!r}")
            raise ApiError(f"Network error: {exc}") from exc

        if response.status_code >= 400:
            message = self._error_message(response)
            logger.debug(f"{method} {url} -> {response.status_code}: {message}")
            raise ApiError(message, response.status_code)
        return response

    # Properties

    async def list_properties(
        self,
        filters: Optional[Dict[str, Any]] = None,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "newest"
    ) -> Tuple[List[Dict[str, Any]], int]:
        """Return one page of listings and the total number of matches."""
        params: Dict[str, Any] = {
            key: value for key, value in (filters or {}).items()
            if value is not None and value != [] and value != ""
        }
        params.update({"page": page, "limit": limit, "sort_by": sort_by})
        response = await self._request("GET", "/properties", params=params)
        items = response.json()
        total = int(response.headers.get("X-Total-Count", len(items)))
        return items, total

    async def list_my_properties(self, page: int = 1, limit: int = 10) -> Tuple[List[Dict[str, Any]], int]:
        response = await self._request("GET", "/properties/mine", params={"page": page, "limit": limit})
        items = response.json()
        return items, int(response.headers.get("X-Total-Count", len(items)))

    async def get_property(self, property_id: str) -> Dict[str, Any]:
        response = await self._request("GET", f"/properties/{property_id}")
        return response.json()

    async def create_property(self, data: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._request("POST", "/properties", json=data)
        return response.json()

    async def update_property(self, property_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._request("PUT", f"/properties/{property_id}", json=data)
        return response.json()

    async def change_property_status(self, property_id: str, status: str) -> Dict[str, Any]:
        response = await self._request("PATCH", f"/properties/{property_id}/status", json={"status": status})
        return response.json()

    async def delete_property(self, property_id: str) -> bool:
        response = await self._request("DELETE", f"/properties/{property_id}")
        return bool(response.json().get("success"))

    # Favorites

    async def list_favorites(self) -> List[Dict[str, Any]]:
        response = await self._request("GET", "/favorites")
        return response.json()

    async def add_favorite(self, property_id: str) -> Dict[str, Any]:
        response = await self._request("POST", "/favorites", json={"propertyId": property_id})
        return response.json()

    async def remove_favorite(self, property_id: str) -> bool:
        response = await self._request("DELETE", "/favorites", params={"propertyId": property_id})
        return bool(response.json().get("success"))

    async def toggle_favorite(self, property_id: str) -> Dict[str, Any]:
        response = await self._request("POST", "/favorites/toggle", json={"propertyId": property_id})
        return response.json()

    # Uploads

    async def upload_files(self, files: List[FileTuple]) -> List[Dict[str, str]]:
        """Upload ``(filename, content, content_type)`` tuples; returns ``[{path, url}]``."""
        multipart = [("files", item) for item in files]
        response = await self._request("POST", "/upload", files=multipart)
        return response.json()["files"]

    async def delete_file(self, path: str) -> str:
        response = await self._request("DELETE", "/upload", json={"path": path})
        return response.json()["message"]

    # Authentication

    async def sign_up(self, email: str, password: str, full_name: Optional[str] = None) -> Dict[str, Any]:
        payload = {"email": email, "password": password}
        if full_name:
            payload["full_name"] = full_name
        response = await self._request("POST", "/auth/signup", json=payload)
        session = response.json()
        self.token = session.get("access_token")
        return session

    async def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        response = await self._request("POST", "/auth/signin", json={"email": email, "password": password})
        session = response.json()
        self.token = session.get("access_token")
        return session

    async def sign_out(self) -> None:
        try:
            await self._request("POST", "/auth/signout")
        finally:
            self.token = None
            self._http.cookies.clear()

    async def get_session(self) -> Dict[str, Any]:
        response = await self._request("GET", "/auth/session")
        return response.json()

    async def request_password_reset(self, email: str) -> str:
        response = await self._request("POST", "/auth/password/reset", json={"email": email})
        return response.json()["message"]

    async def update_password(self, password: str, reset_token: Optional[str] = None) -> str:
        payload: Dict[str, Any] = {"password": password}
        if reset_token:
            payload["reset_token"] = reset_token
        response = await self._request("POST", "/auth/password/update", json=payload)
        return response.json()["message"]
