"""
Client-side favorites store.

The list follows the session: it is loaded when a user signs in and cleared
when they sign out. Writes are applied locally only after the server
confirmed them.
"""

from typing import Any, Dict, List, Optional
import logging

from renthive.client.api import ApiClient, ApiError
from renthive.client.session import AuthEvent, SessionManager

logger = logging.getLogger(__name__)


class FavoritesStore:
    def __init__(self, api: ApiClient):
        self.api = api
        self.favorites: List[Dict[str, Any]] = []
        self.loading = False
        self.error: Optional[str] = None
        self._generation = 0
        self._unsubscribe = None

    def attach(self, session: SessionManager) -> None:
        """Follow the auth state of ``session``."""
        self.detach()
        self._unsubscribe = session.on_auth_state_change(self.handle_auth_event)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def handle_auth_event(self, event: AuthEvent, user: Optional[Dict[str, Any]]) -> None:
        if event == AuthEvent.SIGNED_OUT:
            self.clear()
        elif event in (AuthEvent.SIGNED_IN, AuthEvent.USER_UPDATED):
            await self.sync(user)

    async def sync(self, user: Optional[Dict[str, Any]]) -> None:
        """Load favorites for ``user``, or clear them when there is none."""
        if user is None:
            self.clear()
        else:
            await self.refresh()

    def clear(self) -> None:
        self._generation += 1
        self.favorites = []
        self.loading = False
        self.error = None

    @property
    def ids(self) -> List[str]:
        return [item["id"] for item in self.favorites]

    def is_favorite(self, property_id: str) -> bool:
        return any(item["id"] == property_id for item in self.favorites)

    async def refresh(self) -> None:
        self._generation += 1
        generation = self._generation
        self.loading = True
        self.error = None

        try:
            favorites = await self.api.list_favorites()
        except ApiError as exc:
            if generation == self._generation:
                self.error = exc.message
                self.loading = False
            return

        if generation != self._generation:
            return

        self.favorites = favorites
        self.loading = False

    def _append(self, item: Dict[str, Any]) -> None:
        if not self.is_favorite(item["id"]):
            self.favorites.append(item)

    def _discard(self, property_id: str) -> None:
        self.favorites = [item for item in self.favorites if item["id"] != property_id]

    async def add(self, property_id: str) -> bool:
        self.error = None
        try:
            item = await self.api.add_favorite(property_id)
        except ApiError as exc:
            self.error = exc.message
            return False

        self._append(item)
        return True

    async def remove(self, property_id: str) -> bool:
        self.error = None
        try:
            removed = await self.api.remove_favorite(property_id)
        except ApiError as exc:
            self.error = exc.message
            return False

        if removed:
            self._discard(property_id)
        return removed

    async def toggle(self, property_id: str) -> Optional[bool]:
        """Flip membership; returns the new state, or None when the call failed."""
        self.error = None
        try:
            result = await self.api.toggle_favorite(property_id)
        except ApiError as exc:
            self.error = exc.message
            return None

        if result["isFavorite"]:
            if result.get("property"):
                self._append(result["property"])
        else:
            self._discard(result["propertyId"])
        return result["isFavorite"]
