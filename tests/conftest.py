"""
Test configuration and fixtures for Estate CMS.
Provides an in-memory database per test, repository/service fixtures,
test data factories and an HTTP client bound to the app.
"""

import os
import tempfile

# Settings are read at import time, so the test environment goes first
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-estate-cms-0123456789abcdef")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="estate-cms-uploads-"))

import pytest
import uuid
from typing import AsyncGenerator, Dict, Any, Optional
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from estate_cms.main import app
from estate_cms.config import settings
from estate_cms.database import Base, get_db, enable_sqlite_foreign_keys
from estate_cms.models.admin import Admin
from estate_cms.models.property import Property, PropertyStatus, PropertyType
from estate_cms.repositories.admin import AdminRepository
from estate_cms.repositories.property import PropertyRepository
from estate_cms.services.auth import AuthService
from estate_cms.services.property import PropertyService
from estate_cms.utils.auth import create_access_token


TEST_ADMIN_PASSWORD = "testpassword123"


@pytest.fixture
async def test_engine():
    """Fresh in-memory database for each test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )
    event.listen(engine.sync_engine, "connect", enable_sqlite_foreign_keys)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session_factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()
            await session.close()


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with database session override."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
async def admin_client(async_client: AsyncClient, test_admin: Admin) -> AsyncClient:
    """Async client carrying a valid session cookie for the test admin."""
    async_client.cookies.set(settings.auth_cookie_name, create_access_token(test_admin.id, test_admin.email))
    return async_client


# Repository fixtures
@pytest.fixture
def admin_repository(db_session: AsyncSession) -> AdminRepository:
    return AdminRepository(db_session)


@pytest.fixture
def property_repository(db_session: AsyncSession) -> PropertyRepository:
    return PropertyRepository(db_session)


# Service fixtures
@pytest.fixture
def auth_service(db_session: AsyncSession) -> AuthService:
    return AuthService(db_session)


@pytest.fixture
def property_service(db_session: AsyncSession) -> PropertyService:
    return PropertyService(db_session)


# Test data factories
class AdminFactory:
    """Factory for creating test admins."""

    @staticmethod
    async def create_admin(
        admin_repo: AdminRepository,
        email: Optional[str] = None,
        password: str = TEST_ADMIN_PASSWORD,
        name: Optional[str] = "Test Admin"
    ) -> Admin:
        """Create a test admin in the database."""
        return await admin_repo.create_admin(
            email or f"admin{uuid.uuid4().hex[:8]}@example.com",
            password,
            name
        )


class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    def translation_data(
        title: str = "Test Villa",
        description: str = "A beautiful test villa",
        subtitle: Optional[str] = None,
        features: Optional[list] = None
    ) -> Dict[str, Any]:
        return {
            "title": title,
            "description": description,
            "subtitle": subtitle,
            "features": features or [],
        }

    @staticmethod
    def create_property_data(
        slug: Optional[str] = None,
        status: PropertyStatus = PropertyStatus.AVAILABLE,
        property_type: PropertyType = PropertyType.RESIDENTIAL,
        price: float = 1000000.0,
        year: Optional[int] = None,
        bedrooms: Optional[int] = 4,
        bathrooms: Optional[int] = 3,
        area: Optional[float] = 350.0,
        location: str = "Mallorca",
        coordinates: Optional[Dict[str, float]] = None,
        featured: bool = False,
        images: Optional[list] = None
    ) -> Dict[str, Any]:
        """Create shared property fields."""
        return {
            "slug": slug or f"villa-{uuid.uuid4().hex[:8]}",
            "status": status,
            "type": property_type,
            "price": price,
            "year": year,
            "bedrooms": bedrooms,
            "bathrooms": bathrooms,
            "area": area,
            "location": location,
            "coordinates": coordinates,
            "featured": featured,
            "images": images or [],
        }

    @staticmethod
    def create_payload(slug: str = "villa-test", **overrides) -> Dict[str, Any]:
        """JSON body accepted by POST /api/properties."""
        payload = {
            "slug": slug,
            "status": "available",
            "type": "residential",
            "price": 1000000,
            "location": "Mallorca",
            "images": [],
            "translations": {
                "en": {"title": "Test Villa", "description": "desc", "features": []}
            },
        }
        payload.update(overrides)
        return payload

    @staticmethod
    async def create_property(
        property_repo: PropertyRepository,
        translations: Optional[Dict[str, Dict[str, Any]]] = None,
        **fields
    ) -> Property:
        """Create a test property with translations in the database."""
        if translations is None:
            translations = {"en": PropertyFactory.translation_data()}
        return await property_repo.create_property(
            PropertyFactory.create_property_data(**fields),
            translations
        )


# Common test fixtures
@pytest.fixture
async def test_admin(admin_repository: AdminRepository) -> Admin:
    """Create a test admin."""
    return await AdminFactory.create_admin(admin_repository, email="admin@example.com")


@pytest.fixture
async def test_property(property_repository: PropertyRepository) -> Property:
    """Create a test property with English and German translations."""
    return await PropertyFactory.create_property(
        property_repository,
        slug="villa-port-adriano",
        translations={
            "en": PropertyFactory.translation_data(title="Sea View Villa", features=["Pool", "Garden"]),
            "de": PropertyFactory.translation_data(title="Villa mit Meerblick", description="Eine schoene Villa"),
        },
        year=2021,
        coordinates={"lat": 39.5283, "lng": 2.5363}
    )


def translations_by_locale(property_obj: Property) -> Dict[str, Any]:
    return {translation.locale: translation for translation in property_obj.translations}
