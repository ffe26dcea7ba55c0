"""
Tests for repository classes.
Covers CRUD operations, list filters, pagination and favorite membership.
"""

import pytest
import uuid

from renthive.models.property import PropertyCategory, PropertyStatus
from renthive.models.user import User
from renthive.repositories.user import UserRepository
from renthive.repositories.property import PropertyRepository
from renthive.repositories.favorite import FavoriteRepository
from renthive.schemas.property import PropertyFilters, SortOption
from tests.conftest import PropertyFactory, UserFactory


class TestBaseRepository:
    """Test base repository functionality through UserRepository."""

    @pytest.mark.asyncio
    async def test_create(self, user_repository: UserRepository):
        user = await UserFactory.create_user(user_repository, email="New.Person@Example.com")

        assert user.id is not None
        assert user.email == "new.person@example.com"
        assert user.created_at is not None
        assert user.hashed_password != "testpassword123"

    @pytest.mark.asyncio
    async def test_create_duplicate_email(self, user_repository: UserRepository, test_owner: User):
        with pytest.raises(ValueError):
            await UserFactory.create_user(user_repository, email=test_owner.email)

    @pytest.mark.asyncio
    async def test_get_by_id_not_found(self, user_repository: UserRepository):
        assert await user_repository.get_by_id(uuid.uuid4()) is None

    @pytest.mark.asyncio
    async def test_update(self, user_repository: UserRepository, test_owner: User):
        updated = await user_repository.update(test_owner.id, {"full_name": "Updated Name"})

        assert updated is not None
        assert updated.full_name == "Updated Name"

    @pytest.mark.asyncio
    async def test_delete(self, user_repository: UserRepository):
        user = await UserFactory.create_user(user_repository)

        assert await user_repository.delete(user.id) is True
        assert await user_repository.get_by_id(user.id) is None
        assert await user_repository.delete(user.id) is False

    @pytest.mark.asyncio
    async def test_count_with_filters(self, user_repository: UserRepository):
        await UserFactory.create_user(user_repository, is_active=True)
        await UserFactory.create_user(user_repository, is_active=False)

        assert await user_repository.count() == 2
        assert await user_repository.count({"is_active": False}) == 1


class TestPropertyRepository:
    """Test property listing queries."""

    @pytest.mark.asyncio
    async def test_default_filters_only_return_available(
        self, property_repository: PropertyRepository, test_owner: User
    ):
        await PropertyFactory.create_property(property_repository, test_owner.id, title="Open Flat")
        await PropertyFactory.create_property(
            property_repository, test_owner.id, title="Taken Flat", status=PropertyStatus.RENTED
        )

        properties, total = await property_repository.list_properties(PropertyFilters())

        assert total == 1
        assert [p.title for p in properties] == ["Open Flat"]

    @pytest.mark.asyncio
    async def test_filters_are_combined(self, property_repository: PropertyRepository, test_owner: User):
        await PropertyFactory.create_property(
            property_repository, test_owner.id, title="Match", price=1500, bedrooms=3, city="Denver"
        )
        await PropertyFactory.create_property(
            property_repository, test_owner.id, title="Too Expensive", price=5000, bedrooms=3, city="Denver"
        )
        await PropertyFactory.create_property(
            property_repository, test_owner.id, title="Too Small", price=1500, bedrooms=1, city="Denver"
        )
        await PropertyFactory.create_property(
            property_repository, test_owner.id, title="Elsewhere", price=1500, bedrooms=3, city="Boston", state="MA"
        )

        filters = PropertyFilters(max_price=2000, bedrooms=2, location="denver")
        properties, total = await property_repository.list_properties(filters)

        assert total == 1
        assert properties[0].title == "Match"

    @pytest.mark.asyncio
    async def test_location_matches_state_and_address(
        self, property_repository: PropertyRepository, test_owner: User
    ):
        await PropertyFactory.create_property(
            property_repository, test_owner.id, title="By State", city="Salem", state="Oregon"
        )
        await PropertyFactory.create_property(
            property_repository, test_owner.id, title="By Address", address="9 Oregon Trail", city="Boise", state="ID"
        )
        await PropertyFactory.create_property(
            property_repository, test_owner.id, title="No Match", city="Miami", state="FL"
        )

        properties, total = await property_repository.list_properties(PropertyFilters(location="OREGON"))

        assert total == 2
        assert {p.title for p in properties} == {"By State", "By Address"}

    @pytest.mark.asyncio
    async def test_location_wildcards_are_literal(
        self, property_repository: PropertyRepository, test_owner: User
    ):
        await PropertyFactory.create_property(property_repository, test_owner.id, city="Austin")

        _properties, total = await property_repository.list_properties(PropertyFilters(location="%"))

        assert total == 0

    @pytest.mark.asyncio
    async def test_amenities_require_every_tag(self, property_repository: PropertyRepository, test_owner: User):
        await PropertyFactory.create_property(
            property_repository, test_owner.id, title="Both", amenities=["Pool", "Gym"]
        )
        await PropertyFactory.create_property(
            property_repository, test_owner.id, title="Pool Only", amenities=["Pool"]
        )
        await PropertyFactory.create_property(
            property_repository, test_owner.id, title="Pool Table", amenities=["Pool Table"]
        )

        properties, total = await property_repository.list_properties(PropertyFilters(amenities=["Pool", "Gym"]))
        assert total == 1
        assert properties[0].title == "Both"

        properties, total = await property_repository.list_properties(PropertyFilters(amenities=["Pool"]))
        assert {p.title for p in properties} == {"Both", "Pool Only"}

    @pytest.mark.asyncio
    async def test_category_and_area_filters(self, property_repository: PropertyRepository, test_owner: User):
        await PropertyFactory.create_property(
            property_repository, test_owner.id, title="House", category=PropertyCategory.HOUSE, area=2000
        )
        await PropertyFactory.create_property(
            property_repository, test_owner.id, title="Condo", category=PropertyCategory.CONDO, area=800
        )
        await PropertyFactory.create_property(
            property_repository, test_owner.id, title="Flat", category=PropertyCategory.APARTMENT, area=700
        )

        filters = PropertyFilters(
            category=[PropertyCategory.HOUSE, PropertyCategory.CONDO],
            min_area=750,
        )
        properties, total = await property_repository.list_properties(filters)

        assert total == 2
        assert {p.title for p in properties} == {"House", "Condo"}

    @pytest.mark.asyncio
    async def test_sort_by_price(self, property_repository: PropertyRepository, test_owner: User):
        for price in (3000, 1000, 2000):
            await PropertyFactory.create_property(property_repository, test_owner.id, price=price)

        ascending, _ = await property_repository.list_properties(PropertyFilters(), sort_by=SortOption.PRICE_ASC)
        descending, _ = await property_repository.list_properties(PropertyFilters(), sort_by=SortOption.PRICE_DESC)

        assert [p.price for p in ascending] == [1000, 2000, 3000]
        assert [p.price for p in descending] == [3000, 2000, 1000]

    @pytest.mark.asyncio
    async def test_pages_are_disjoint_and_exhaustive(
        self, property_repository: PropertyRepository, test_owner: User
    ):
        # Equal prices force the id tiebreaker to decide the order
        for i in range(7):
            await PropertyFactory.create_property(property_repository, test_owner.id, title=f"Unit {i}", price=1000)

        seen = []
        for page in range(3):
            properties, total = await property_repository.list_properties(
                PropertyFilters(), skip=page * 3, limit=3, sort_by=SortOption.PRICE_ASC
            )
            assert total == 7
            seen.extend(p.id for p in properties)

        assert len(seen) == 7
        assert len(set(seen)) == 7

    @pytest.mark.asyncio
    async def test_get_properties_by_owner_includes_every_status(
        self, property_repository: PropertyRepository, test_owner: User, test_renter: User
    ):
        await PropertyFactory.create_property(property_repository, test_owner.id)
        await PropertyFactory.create_property(property_repository, test_owner.id, status=PropertyStatus.SOLD)
        await PropertyFactory.create_property(property_repository, test_renter.id)

        properties, total = await property_repository.get_properties_by_owner(test_owner.id)

        assert total == 2
        assert all(p.owner_id == test_owner.id for p in properties)

    @pytest.mark.asyncio
    async def test_status_counts_are_zero_filled(
        self, property_repository: PropertyRepository, test_owner: User
    ):
        await PropertyFactory.create_property(property_repository, test_owner.id)
        await PropertyFactory.create_property(property_repository, test_owner.id, status=PropertyStatus.RENTED)

        counts = await property_repository.get_status_counts(test_owner.id)

        assert counts == {"available": 1, "pending": 0, "rented": 1, "sold": 0, "maintenance": 0}

    @pytest.mark.asyncio
    async def test_create_rejects_negative_price(self, property_repository: PropertyRepository, test_owner: User):
        with pytest.raises(ValueError):
            await PropertyFactory.create_property(property_repository, test_owner.id, price=-1)

    @pytest.mark.asyncio
    async def test_remove_image_url_only_touches_owner_listings(
        self, property_repository: PropertyRepository, test_owner: User, test_renter: User
    ):
        url = "/storage/property-images/users/x/photo.jpg"
        own = await PropertyFactory.create_property(
            property_repository, test_owner.id, images=[url, "/other.jpg"]
        )
        foreign = await PropertyFactory.create_property(property_repository, test_renter.id, images=[url])

        changed = await property_repository.remove_image_url(test_owner.id, url)

        assert changed == 1
        assert (await property_repository.get_by_id(own.id)).images == ["/other.jpg"]
        assert (await property_repository.get_by_id(foreign.id)).images == [url]


class TestFavoriteRepository:
    """Test favorite membership changes."""

    @pytest.mark.asyncio
    async def test_add_is_idempotent(self, favorite_repository: FavoriteRepository, test_renter, test_property):
        assert await favorite_repository.add(test_renter.id, test_property.id) is True
        assert await favorite_repository.add(test_renter.id, test_property.id) is False
        assert await favorite_repository.count({"user_id": test_renter.id}) == 1

    @pytest.mark.asyncio
    async def test_remove_absent_pair(self, favorite_repository: FavoriteRepository, test_renter, test_property):
        assert await favorite_repository.remove(test_renter.id, test_property.id) is False

    @pytest.mark.asyncio
    async def test_toggle_flips_membership(
        self, favorite_repository: FavoriteRepository, test_renter, test_property
    ):
        assert await favorite_repository.toggle(test_renter.id, test_property.id) is True
        assert await favorite_repository.is_favorite(test_renter.id, test_property.id) is True

        assert await favorite_repository.toggle(test_renter.id, test_property.id) is False
        assert await favorite_repository.is_favorite(test_renter.id, test_property.id) is False

    @pytest.mark.asyncio
    async def test_list_favorite_properties(
        self,
        favorite_repository: FavoriteRepository,
        property_repository: PropertyRepository,
        test_owner,
        test_renter,
        test_property
    ):
        other = await PropertyFactory.create_property(property_repository, test_owner.id, title="Other")
        await favorite_repository.add(test_renter.id, test_property.id)
        await favorite_repository.add(test_renter.id, other.id)

        properties = await favorite_repository.list_favorite_properties(test_renter.id)

        assert {p.id for p in properties} == {test_property.id, other.id}
        assert await favorite_repository.list_favorite_properties(test_owner.id) == []

    @pytest.mark.asyncio
    async def test_deleting_property_removes_its_favorites(
        self,
        favorite_repository: FavoriteRepository,
        property_repository: PropertyRepository,
        test_renter,
        test_property
    ):
        await favorite_repository.add(test_renter.id, test_property.id)

        assert await property_repository.delete_property(test_property.id) is True
        assert await favorite_repository.count({"property_id": test_property.id}) == 0
