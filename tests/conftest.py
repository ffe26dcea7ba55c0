"""
Test configuration and fixtures for the RentHive API.
Provides database fixtures, test data factories, and common test utilities.
"""

import os
import tempfile

# Settings are read at import time, so the environment is prepared first
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="renthive-tests-"))

import io
import uuid
from typing import AsyncGenerator, Dict, List, Tuple

import pytest
from httpx import ASGITransport, AsyncClient
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from renthive.main import app
from renthive.database import build_engine, create_tables, get_db
from renthive.models.user import User
from renthive.models.property import Property, PropertyCategory, PropertyStatus
from renthive.repositories.user import UserRepository
from renthive.repositories.property import PropertyRepository
from renthive.repositories.favorite import FavoriteRepository
from renthive.services.auth import AuthService
from renthive.services.property import PropertyService
from renthive.services.favorite import FavoriteService
from renthive.services.upload import UploadService
from renthive.utils.auth import create_access_token
from renthive.utils.dependencies import get_file_storage, get_reset_delivery
from renthive.utils.file_utils import FileStorage


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "testpassword123"
BASE_URL = "http://testserver"


@pytest.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database per test."""
    engine = build_engine(TEST_DATABASE_URL)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def file_storage(tmp_path) -> FileStorage:
    return FileStorage(base_dir=tmp_path / "property-images")


@pytest.fixture
def reset_tokens() -> List[Tuple[str, str]]:
    """(email, token) pairs handed to the password reset delivery hook."""
    return []


@pytest.fixture
async def async_client(
    db_session: AsyncSession,
    file_storage: FileStorage,
    reset_tokens: List[Tuple[str, str]]
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with database, storage and mail overrides."""
    async def override_get_db():
        yield db_session

    async def capture_reset_token(user: User, token: str) -> None:
        reset_tokens.append((user.email, token))

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_file_storage] = lambda: file_storage
    app.dependency_overrides[get_reset_delivery] = lambda: capture_reset_token

    async with AsyncClient(transport=ASGITransport(app=app), base_url=BASE_URL) as client:
        yield client

    app.dependency_overrides.clear()


# Repository fixtures
@pytest.fixture
def user_repository(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
def property_repository(db_session: AsyncSession) -> PropertyRepository:
    return PropertyRepository(db_session)


@pytest.fixture
def favorite_repository(db_session: AsyncSession) -> FavoriteRepository:
    return FavoriteRepository(db_session)


# Service fixtures
@pytest.fixture
def auth_service(db_session: AsyncSession, reset_tokens: List[Tuple[str, str]]) -> AuthService:
    async def capture_reset_token(user: User, token: str) -> None:
        reset_tokens.append((user.email, token))

    return AuthService(db_session, reset_delivery=capture_reset_token)


@pytest.fixture
def property_service(db_session: AsyncSession) -> PropertyService:
    return PropertyService(db_session)


@pytest.fixture
def favorite_service(db_session: AsyncSession) -> FavoriteService:
    return FavoriteService(db_session)


@pytest.fixture
def upload_service(db_session: AsyncSession, file_storage: FileStorage) -> UploadService:
    return UploadService(db_session, storage=file_storage)


# Test data factories
class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    def create_user_data(
        email: str = None,
        password: str = TEST_PASSWORD,
        full_name: str = "Test User",
        is_active: bool = True
    ) -> dict:
        return {
            "email": email or f"user{uuid.uuid4().hex[:8]}@example.com",
            "password": password,
            "full_name": full_name,
            "is_active": is_active
        }

    @staticmethod
    async def create_user(
        user_repo: UserRepository,
        email: str = None,
        password: str = TEST_PASSWORD,
        full_name: str = "Test User",
        is_active: bool = True
    ) -> User:
        """Create a test user in the database."""
        user_data = UserFactory.create_user_data(
            email=email,
            password=password,
            full_name=full_name,
            is_active=is_active
        )
        return await user_repo.create_user(user_data)


class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    def create_property_data(
        title: str = "Test Property",
        price: int = 1500,
        bedrooms: int = 2,
        bathrooms: int = 1,
        area: int = 900,
        address: str = "1 Main Street",
        city: str = "Austin",
        state: str = "TX",
        category: PropertyCategory = PropertyCategory.APARTMENT,
        status: PropertyStatus = PropertyStatus.AVAILABLE,
        featured: bool = False,
        amenities: List[str] = None,
        images: List[str] = None,
        owner_id: uuid.UUID = None
    ) -> dict:
        return {
            "title": title,
            "description": "A bright test listing",
            "price": price,
            "bedrooms": bedrooms,
            "bathrooms": bathrooms,
            "area": area,
            "address": address,
            "city": city,
            "state": state,
            "zip_code": "73301",
            "country": "USA",
            "category": category,
            "status": status,
            "featured": featured,
            "amenities": amenities if amenities is not None else [],
            "images": images if images is not None else [],
            "owner_id": owner_id,
        }

    @staticmethod
    async def create_property(property_repo: PropertyRepository, owner_id: uuid.UUID, **overrides) -> Property:
        """Create a test property in the database."""
        property_data = PropertyFactory.create_property_data(owner_id=owner_id, **overrides)
        return await property_repo.create_property(property_data)


def property_payload(**overrides) -> Dict:
    """JSON body for POST /api/properties."""
    payload = {
        "title": "Sunny Loft",
        "description": "Top floor loft with lots of light",
        "price": 2100,
        "bedrooms": 2,
        "bathrooms": 1,
        "area": 950,
        "address": "42 Oak Avenue",
        "city": "Portland",
        "state": "OR",
        "zip_code": "97201",
        "category": "apartment",
        "amenities": ["Parking", "Balcony"],
    }
    payload.update(overrides)
    return payload


def auth_headers(user: User) -> Dict[str, str]:
    """Bearer header for a session of ``user``."""
    token = create_access_token(user_id=user.id, email=user.email)
    return {"Authorization": f"Bearer {token}"}


def create_test_image(width: int = 32, height: int = 32, image_format: str = "JPEG") -> bytes:
    """Create a small in-memory image."""
    img = Image.new("RGB", (width, height), color="red")
    img_bytes = io.BytesIO()
    img.save(img_bytes, format=image_format)
    return img_bytes.getvalue()


# Common test fixtures
@pytest.fixture
async def test_owner(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(user_repository, email="owner@example.com", full_name="Olive Owner")


@pytest.fixture
async def test_renter(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(user_repository, email="renter@example.com", full_name="Remy Renter")


@pytest.fixture
async def test_inactive_user(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(user_repository, email="inactive@example.com", is_active=False)


@pytest.fixture
async def test_property(property_repository: PropertyRepository, test_owner: User) -> Property:
    return await PropertyFactory.create_property(
        property_repository,
        owner_id=test_owner.id,
        title="Garden Cottage",
        price=1800,
        bedrooms=3,
        amenities=["Garden", "Parking"]
    )
