"""
Client-side listing stores.

Each store keeps the last server answer together with loading and error
state. A generation counter drops responses that arrive after a newer
request for the same store was started.
"""

from typing import Any, Dict, List, Optional
import logging

from renthive.client.api import ApiClient, ApiError

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10


class PropertyListResource:
    """
    A paginated list of properties.

    ``mine=True`` lists the signed-in user's own properties instead of the
    public search, in which case ``filters`` and ``sort_by`` are ignored.
    """

    def __init__(
        self,
        api: ApiClient,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = DEFAULT_PAGE_SIZE,
        sort_by: str = "newest",
        mine: bool = False
    ):
        self.api = api
        self.filters: Dict[str, Any] = dict(filters or {})
        self.limit = limit
        self.sort_by = sort_by
        self.mine = mine

        self.items: List[Dict[str, Any]] = []
        self.total: Optional[int] = None
        self.page = 0
        self.has_more = True
        self.loading = False
        self.error: Optional[str] = None
        self._generation = 0

    async def _fetch_page(self, page: int):
        if self.mine:
            return await self.api.list_my_properties(page=page, limit=self.limit)
        return await self.api.list_properties(self.filters, page=page, limit=self.limit, sort_by=self.sort_by)

    async def refetch(self) -> None:
        """Reload from the first page, replacing the current items."""
        self._generation += 1
        generation = self._generation
        self.loading = True
        self.error = None

        try:
            items, total = await self._fetch_page(1)
        except ApiError as exc:
            if generation == self._generation:
                self.error = exc.message
                self.loading = False
            return

        if generation != self._generation:
            logger.debug("Discarding superseded property list response")
            return

        self.items = items
        self.total = total
        self.page = 1
        self.has_more = len(items) >= self.limit
        self.loading = False

    async def load_more(self) -> None:
        """Append the next page. Does nothing while loading or after the last page."""
        if self.loading or not self.has_more:
            return

        generation = self._generation
        next_page = self.page + 1
        self.loading = True
        self.error = None

        try:
            items, total = await self._fetch_page(next_page)
        except ApiError as exc:
            if generation == self._generation:
                self.error = exc.message
                self.loading = False
            return

        if generation != self._generation:
            return

        known = {item["id"] for item in self.items}
        self.items.extend(item for item in items if item["id"] not in known)
        self.total = total
        self.page = next_page
        self.has_more = len(items) >= self.limit
        self.loading = False

    async def set_filters(self, filters: Dict[str, Any], sort_by: Optional[str] = None) -> None:
        self.filters = dict(filters)
        if sort_by is not None:
            self.sort_by = sort_by
        await self.refetch()

    async def create(self, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Create a property and put the server's copy at the top of the list."""
        self.error = None
        try:
            created = await self.api.create_property(data)
        except ApiError as exc:
            self.error = exc.message
            return None

        self.items.insert(0, created)
        if self.total is not None:
            self.total += 1
        return created

    async def update(self, property_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        self.error = None
        try:
            updated = await self.api.update_property(property_id, data)
        except ApiError as exc:
            self.error = exc.message
            return None

        self.items = [updated if item["id"] == property_id else item for item in self.items]
        return updated

    async def delete(self, property_id: str) -> bool:
        self.error = None
        try:
            await self.api.delete_property(property_id)
        except ApiError as exc:
            self.error = exc.message
            return False

        before = len(self.items)
        self.items = [item for item in self.items if item["id"] != property_id]
        if self.total is not None and len(self.items) < before:
            self.total -= 1
        return True


class PropertyResource:
    """A single property. ``not_found`` is set when the server answers 404."""

    def __init__(self, api: ApiClient, property_id: str):
        self.api = api
        self.property_id = property_id
        self.item: Optional[Dict[str, Any]] = None
        self.loading = False
        self.error: Optional[str] = None
        self.not_found = False
        self._generation = 0

    async def refetch(self) -> None:
        self._generation += 1
        generation = self._generation
        self.loading = True
        self.error = None
        self.not_found = False

        try:
            item = await self.api.get_property(self.property_id)
        except ApiError as exc:
            if generation != self._generation:
                return
            if exc.is_not_found:
                self.item = None
                self.not_found = True
            else:
                self.error = exc.message
            self.loading = False
            return

        if generation != self._generation:
            return

        self.item = item
        self.loading = False

    async def update(self, data: Dict[str, Any]) -> bool:
        self.error = None
        try:
            self.item = await self.api.update_property(self.property_id, data)
        except ApiError as exc:
            self.error = exc.message
            return False
        return True

    async def change_status(self, status: str) -> bool:
        self.error = None
        try:
            self.item = await self.api.change_property_status(self.property_id, status)
        except ApiError as exc:
            self.error = exc.message
            return False
        return True
