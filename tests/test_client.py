"""
Tests for the client-side stores, talking to the real app through
httpx's ASGI transport.
"""

import asyncio
import pytest
from typing import AsyncGenerator
from httpx import ASGITransport, AsyncClient

from renthive.client import (
    ApiClient,
    ApiError,
    AppState,
    AuthEvent,
    PropertyListResource,
    PropertyResource,
    SessionManager,
    UploadStore,
)
from renthive.main import app
from renthive.models.property import Property
from renthive.models.user import User
from renthive.repositories.property import PropertyRepository
from tests.conftest import BASE_URL, TEST_PASSWORD, PropertyFactory, create_test_image, property_payload


@pytest.fixture
async def api(async_client: AsyncClient) -> AsyncGenerator[ApiClient, None]:
    """API client sharing the overrides installed by ``async_client``."""
    client = ApiClient(base_url=BASE_URL, transport=ASGITransport(app=app))
    yield client
    await client.close()


@pytest.fixture
async def app_state(async_client: AsyncClient) -> AsyncGenerator[AppState, None]:
    state = AppState.create(base_url=BASE_URL, transport=ASGITransport(app=app))
    yield state
    await state.close()


async def sign_in(api: ApiClient, user: User) -> None:
    await api.sign_in(user.email, TEST_PASSWORD)


class GatedApi:
    """Stand-in API whose list calls finish only when the test resolves them."""

    def __init__(self):
        self.pending = []

    async def list_properties(self, filters, page=1, limit=10, sort_by="newest"):
        future = asyncio.get_running_loop().create_future()
        self.pending.append(future)
        return await future


class TestApiClient:

    @pytest.mark.asyncio
    async def test_error_message_comes_from_body(self, api: ApiClient):
        with pytest.raises(ApiError) as exc_info:
            await api.list_favorites()

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Unauthorized"
        assert exc_info.value.is_unauthorized

    @pytest.mark.asyncio
    async def test_sign_in_keeps_token(self, api: ApiClient, test_owner: User):
        await sign_in(api, test_owner)
        assert api.token

        await api.sign_out()
        assert api.token is None


class TestSessionManager:

    @pytest.mark.asyncio
    async def test_sign_in_success(self, api: ApiClient, test_owner: User):
        session = SessionManager(api)
        events = []

        async def listener(event, user):
            events.append((event, user["email"] if user else None))

        session.on_auth_state_change(listener)

        assert await session.sign_in(test_owner.email, TEST_PASSWORD) is True
        assert session.user["email"] == test_owner.email
        assert session.is_authenticated
        assert session.redirect_to == "/dashboard"
        assert session.loading is False
        assert session.error is None
        assert events == [(AuthEvent.SIGNED_IN, test_owner.email)]

    @pytest.mark.asyncio
    async def test_sign_in_failure_stores_error(self, api: ApiClient, test_owner: User):
        session = SessionManager(api)

        assert await session.sign_in(test_owner.email, "wrong-password") is False
        assert session.user is None
        assert session.error == "Invalid login credentials"
        assert session.redirect_to is None
        assert session.loading is False

    @pytest.mark.asyncio
    async def test_sign_up_and_out(self, api: ApiClient):
        session = SessionManager(api)

        assert await session.sign_up("brand.new@example.com", "supersecret1", "Brand New") is True
        assert session.user["email"] == "brand.new@example.com"

        assert await session.sign_out() is True
        assert session.user is None
        assert session.redirect_to == "/login"

    @pytest.mark.asyncio
    async def test_load_restores_session(self, api: ApiClient, test_owner: User):
        await sign_in(api, test_owner)
        session = SessionManager(api)

        await session.load()

        assert session.user["id"] == str(test_owner.id)

    @pytest.mark.asyncio
    async def test_unsubscribe(self, api: ApiClient, test_owner: User):
        session = SessionManager(api)
        events = []

        async def listener(event, user):
            events.append(event)

        unsubscribe = session.on_auth_state_change(listener)
        unsubscribe()
        await session.sign_in(test_owner.email, TEST_PASSWORD)

        assert events == []

    @pytest.mark.asyncio
    async def test_password_flows(self, api: ApiClient, test_owner: User, reset_tokens):
        session = SessionManager(api)

        assert await session.reset_password(test_owner.email) is True
        _email, token = reset_tokens[0]

        assert await session.update_password("short", reset_token=token) is False
        assert session.error == "Password should be at least 8 characters"

        assert await session.update_password("longenough42", reset_token=token) is True
        assert await session.sign_in(test_owner.email, "longenough42") is True


class TestPropertyListResource:

    @pytest.mark.asyncio
    async def test_load_more_until_exhausted(
        self, api: ApiClient, property_repository: PropertyRepository, test_owner: User
    ):
        for i in range(7):
            await PropertyFactory.create_property(property_repository, test_owner.id, title=f"Unit {i}")

        resource = PropertyListResource(api, limit=3)
        await resource.refetch()
        assert len(resource.items) == 3
        assert resource.total == 7
        assert resource.has_more is True

        while resource.has_more:
            await resource.load_more()

        assert len(resource.items) == 7
        assert len({item["id"] for item in resource.items}) == 7
        assert resource.page == 3

    @pytest.mark.asyncio
    async def test_load_more_before_refetch_starts_at_first_page(
        self, api: ApiClient, property_repository: PropertyRepository, test_owner: User
    ):
        for i in range(5):
            await PropertyFactory.create_property(property_repository, test_owner.id, title=f"Unit {i}")

        resource = PropertyListResource(api, limit=3)
        await resource.load_more()

        assert resource.page == 1
        assert len(resource.items) == 3
        assert resource.has_more is True

        await resource.load_more()

        assert resource.page == 2
        assert len({item["id"] for item in resource.items}) == 5
        assert resource.has_more is False

    @pytest.mark.asyncio
    async def test_set_filters_resets_pagination(
        self, api: ApiClient, property_repository: PropertyRepository, test_owner: User
    ):
        await PropertyFactory.create_property(property_repository, test_owner.id, title="Cheap", price=500)
        await PropertyFactory.create_property(property_repository, test_owner.id, title="Pricey", price=5000)

        resource = PropertyListResource(api)
        await resource.refetch()
        assert len(resource.items) == 2

        await resource.set_filters({"max_price": 1000})

        assert [item["title"] for item in resource.items] == ["Cheap"]
        assert resource.page == 1
        assert resource.has_more is False

    @pytest.mark.asyncio
    async def test_superseded_response_is_discarded(self):
        api = GatedApi()
        resource = PropertyListResource(api)

        first = asyncio.create_task(resource.refetch())
        await asyncio.sleep(0)
        second = asyncio.create_task(resource.refetch())
        await asyncio.sleep(0)

        api.pending[1].set_result(([{"id": "fresh"}], 1))
        await second
        api.pending[0].set_result(([{"id": "stale"}], 1))
        await first

        assert resource.items == [{"id": "fresh"}]
        assert resource.loading is False

    @pytest.mark.asyncio
    async def test_mutations_patch_from_server(self, api: ApiClient, test_owner: User):
        await sign_in(api, test_owner)
        resource = PropertyListResource(api, mine=True)
        await resource.refetch()
        assert resource.items == []

        created = await resource.create(property_payload(title="Harbor View"))
        assert created is not None
        assert resource.items[0]["id"] == created["id"]

        updated = await resource.update(created["id"], {"price": 3333})
        assert updated["price"] == 3333
        assert resource.items[0]["price"] == 3333

        assert await resource.delete(created["id"]) is True
        assert resource.items == []

    @pytest.mark.asyncio
    async def test_create_failure_is_stored(self, api: ApiClient):
        resource = PropertyListResource(api)

        assert await resource.create(property_payload()) is None
        assert resource.error == "Unauthorized"
        assert resource.items == []


class TestPropertyResource:

    @pytest.mark.asyncio
    async def test_not_found_is_distinct_from_error(self, api: ApiClient):
        resource = PropertyResource(api, "00000000-0000-0000-0000-000000000000")

        await resource.refetch()

        assert resource.not_found is True
        assert resource.error is None
        assert resource.item is None

    @pytest.mark.asyncio
    async def test_change_status(self, api: ApiClient, test_owner: User, test_property: Property):
        await sign_in(api, test_owner)
        resource = PropertyResource(api, str(test_property.id))
        await resource.refetch()
        assert resource.item["status"] == "available"

        assert await resource.change_status("pending") is True
        assert resource.item["status"] == "pending"

        assert await resource.change_status("maintenance") is False
        assert resource.error
        assert resource.item["status"] == "pending"


class TestFavoritesStore:

    @pytest.mark.asyncio
    async def test_follows_auth_state(self, app_state: AppState, test_renter: User, test_property: Property):
        await app_state.session.sign_in(test_renter.email, TEST_PASSWORD)
        assert app_state.favorites.favorites == []

        assert await app_state.favorites.add(str(test_property.id)) is True
        assert app_state.favorites.is_favorite(str(test_property.id))

        await app_state.session.sign_out()
        assert app_state.favorites.favorites == []

        await app_state.session.sign_in(test_renter.email, TEST_PASSWORD)
        assert app_state.favorites.ids == [str(test_property.id)]

    @pytest.mark.asyncio
    async def test_remove_after_server_confirms(
        self, app_state: AppState, test_renter: User, test_property: Property
    ):
        await app_state.session.sign_in(test_renter.email, TEST_PASSWORD)
        await app_state.favorites.add(str(test_property.id))

        assert await app_state.favorites.remove(str(test_property.id)) is True
        assert app_state.favorites.favorites == []

    @pytest.mark.asyncio
    async def test_failed_add_leaves_list_untouched(self, app_state: AppState, test_renter: User):
        await app_state.session.sign_in(test_renter.email, TEST_PASSWORD)

        assert await app_state.favorites.add("00000000-0000-0000-0000-000000000000") is False
        assert app_state.favorites.error == "Property not found"
        assert app_state.favorites.favorites == []

    @pytest.mark.asyncio
    async def test_toggle(self, app_state: AppState, test_renter: User, test_property: Property):
        await app_state.session.sign_in(test_renter.email, TEST_PASSWORD)
        property_id = str(test_property.id)

        assert await app_state.favorites.toggle(property_id) is True
        assert app_state.favorites.is_favorite(property_id)

        assert await app_state.favorites.toggle(property_id) is False
        assert not app_state.favorites.is_favorite(property_id)

    @pytest.mark.asyncio
    async def test_invalidate_reloads_from_server(
        self, app_state: AppState, async_client: AsyncClient, test_renter: User, test_property: Property
    ):
        await app_state.session.sign_in(test_renter.email, TEST_PASSWORD)

        # Another tab favorites the property behind this store's back
        await async_client.post("/api/auth/signin", json={"email": test_renter.email, "password": TEST_PASSWORD})
        await async_client.post("/api/favorites", json={"propertyId": str(test_property.id)})
        assert app_state.favorites.favorites == []

        await app_state.invalidate()

        assert app_state.favorites.ids == [str(test_property.id)]
        assert app_state.session.user["email"] == test_renter.email


class TestUploadStore:

    @pytest.mark.asyncio
    async def test_upload_and_delete(self, api: ApiClient, test_owner: User, file_storage):
        await sign_in(api, test_owner)
        store = UploadStore(api)

        stored = await store.upload([("front.jpg", create_test_image(), "image/jpeg")])

        assert stored is not None
        assert stored[0]["path"].startswith(f"users/{test_owner.id}/")
        assert store.uploaded == stored
        assert store.uploading is False
        assert store.error is None

        assert await store.delete(stored[0]["path"]) is True
        assert store.uploaded == []
        assert not await file_storage.exists(stored[0]["path"])

    @pytest.mark.asyncio
    async def test_rejected_upload_is_stored_as_error(self, api: ApiClient, test_owner: User):
        await sign_in(api, test_owner)
        store = UploadStore(api)

        assert await store.upload([("notes.txt", b"hello", "text/plain")]) is None
        assert store.error
        assert store.uploading is False
        assert store.uploaded == []

    @pytest.mark.asyncio
    async def test_delete_foreign_file_fails(self, api: ApiClient, test_owner: User):
        await sign_in(api, test_owner)
        store = UploadStore(api)

        assert await store.delete("users/someone-else/photo.jpg") is False
        assert store.error

    @pytest.mark.asyncio
    async def test_signed_out_upload(self, api: ApiClient):
        store = UploadStore(api)

        assert await store.upload([("front.jpg", create_test_image(), "image/jpeg")]) is None
        assert store.error == "Unauthorized"
