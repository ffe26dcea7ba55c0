"""
Application-wide client state: one session and one favorites store sharing
a single API client.
"""

from typing import Optional
import httpx

from renthive.client.api import ApiClient
from renthive.client.favorites import FavoritesStore
from renthive.client.session import SessionManager


class AppState:
    def __init__(self, api: ApiClient):
        self.api = api
        self.session = SessionManager(api)
        self.favorites = FavoritesStore(api)
        self.favorites.attach(self.session)

    @classmethod
    def create(
        cls,
        base_url: str = "http://localhost:8000",
        transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "AppState":
        return cls(ApiClient(base_url=base_url, transport=transport))

    async def start(self) -> None:
        """Load the current session; favorites follow through the auth listener."""
        await self.session.load()

    async def invalidate(self) -> None:
        """Re-read the session and favorites from the server."""
        await self.session.load(notify=False)
        await self.favorites.sync(self.session.user)

    async def close(self) -> None:
        self.favorites.detach()
        await self.api.close()
