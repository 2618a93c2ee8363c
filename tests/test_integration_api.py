"""
Integration tests for all API endpoints.
Tests complete request/response cycles through the ASGI app.
"""

import pytest
import uuid
from http.cookies import SimpleCookie
from httpx import AsyncClient
from fastapi import status
from sqlalchemy import select, func

from estate_cms.config import settings
from estate_cms.models.admin import Admin
from estate_cms.models.property import Property, PropertyTranslation
from estate_cms.utils.auth import create_access_token, verify_token
from tests.conftest import TEST_ADMIN_PASSWORD, PropertyFactory


def session_cookie(response) -> str:
    """Token value from the response's Set-Cookie header."""
    return SimpleCookie(response.headers["set-cookie"])[settings.auth_cookie_name].value


class TestAuthenticationEndpoints:
    """Integration tests for authentication endpoints."""

    @pytest.mark.asyncio
    async def test_login_success(self, async_client: AsyncClient, test_admin: Admin):
        response = await async_client.post(
            "/api/auth/login",
            json={"email": test_admin.email, "password": TEST_ADMIN_PASSWORD}
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["success"] is True
        assert data["admin"] == {"id": str(test_admin.id), "email": test_admin.email, "name": "Test Admin"}
        assert "token" not in data

        token = session_cookie(response)
        claims = verify_token(token)
        assert claims is not None
        assert claims.admin_id == str(test_admin.id)

    @pytest.mark.asyncio
    async def test_login_cookie_flags(self, async_client: AsyncClient, test_admin: Admin):
        response = await async_client.post(
            "/api/auth/login",
            json={"email": test_admin.email, "password": TEST_ADMIN_PASSWORD}
        )

        cookie_header = response.headers["set-cookie"].lower()
        assert cookie_header.startswith(f"{settings.auth_cookie_name}=")
        assert "httponly" in cookie_header
        assert "samesite=lax" in cookie_header
        assert f"max-age={7 * 24 * 60 * 60}" in cookie_header
        # Secure only in production
        assert "secure" not in cookie_header

    @pytest.mark.asyncio
    async def test_login_invalid_password(self, async_client: AsyncClient, test_admin: Admin):
        response = await async_client.post(
            "/api/auth/login",
            json={"email": test_admin.email, "password": "wrongpassword"}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"] == "Invalid credentials"
        assert settings.auth_cookie_name not in response.cookies

    @pytest.mark.asyncio
    async def test_login_unknown_email_same_message(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/auth/login",
            json={"email": "nobody@example.com", "password": "password123"}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"] == "Invalid credentials"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{}, {"email": "admin@example.com"}, {"password": "secret123"}])
    async def test_login_missing_fields(self, async_client: AsyncClient, body):
        response = await async_client.post("/api/auth/login", json=body)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        data = response.json()
        assert data["code"] == "VALIDATION_ERROR"
        assert "details" in data

    @pytest.mark.asyncio
    async def test_login_then_me(self, async_client: AsyncClient, test_admin: Admin):
        login = await async_client.post(
            "/api/auth/login",
            json={"email": test_admin.email, "password": TEST_ADMIN_PASSWORD}
        )
        token = session_cookie(login)
        async_client.cookies.clear()
        async_client.cookies.set(settings.auth_cookie_name, token)

        response = await async_client.get("/api/auth/me")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "admin": {"id": str(test_admin.id), "email": test_admin.email, "name": "Test Admin"}
        }

    @pytest.mark.asyncio
    async def test_me_without_cookie(self, async_client: AsyncClient):
        response = await async_client.get("/api/auth/me")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["code"] == "UNAUTHORIZED"

    @pytest.mark.asyncio
    async def test_me_with_invalid_token(self, async_client: AsyncClient):
        async_client.cookies.set(settings.auth_cookie_name, "not-a-valid-token")

        response = await async_client.get("/api/auth/me")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"] == "Invalid token"

    @pytest.mark.asyncio
    async def test_me_for_deleted_admin(self, async_client: AsyncClient):
        """A valid token for an admin that no longer exists fails gracefully."""
        async_client.cookies.set(
            settings.auth_cookie_name,
            create_access_token(uuid.uuid4(), "gone@example.com")
        )

        response = await async_client.get("/api/auth/me")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_logout_clears_cookie(self, admin_client: AsyncClient):
        response = await admin_client.post("/api/auth/logout")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"success": True}
        cookie_header = response.headers["set-cookie"].lower()
        assert cookie_header.startswith(f"{settings.auth_cookie_name}=")
        assert "max-age=0" in cookie_header


class TestPublicPropertyEndpoints:
    """Integration tests for public property reads."""

    @pytest.mark.asyncio
    async def test_list_properties(self, async_client: AsyncClient, test_property: Property):
        response = await async_client.get("/api/properties", params={"locale": "de"})

        assert response.status_code == status.HTTP_200_OK
        properties = response.json()["properties"]
        assert len(properties) == 1
        assert properties[0]["slug"] == "villa-port-adriano"
        assert [t["locale"] for t in properties[0]["translations"]] == ["de"]

    @pytest.mark.asyncio
    async def test_list_defaults_to_fallback_locale(self, async_client: AsyncClient, test_property: Property):
        response = await async_client.get("/api/properties")

        translations = response.json()["properties"][0]["translations"]
        assert [t["locale"] for t in translations] == [settings.default_locale]

    @pytest.mark.asyncio
    async def test_list_missing_locale_not_mislabeled(self, async_client: AsyncClient, property_repository):
        await PropertyFactory.create_property(property_repository, slug="english-only")

        response = await async_client.get("/api/properties", params={"locale": "es"})

        assert response.json()["properties"][0]["translations"] == []

    @pytest.mark.asyncio
    async def test_list_without_translations(self, async_client: AsyncClient, test_property: Property):
        response = await async_client.get(
            "/api/properties", params={"locale": "en", "includeTranslations": "false"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert "translations" not in response.json()["properties"][0]

    @pytest.mark.asyncio
    async def test_list_unsupported_locale(self, async_client: AsyncClient):
        response = await async_client.get("/api/properties", params={"locale": "fr"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_get_property(self, async_client: AsyncClient, test_property: Property):
        response = await async_client.get(f"/api/properties/{test_property.id}", params={"locale": "en"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["property"]
        assert data["id"] == str(test_property.id)
        assert data["coordinates"] == {"lat": 39.5283, "lng": 2.5363}
        assert len(data["translations"]) == 1
        assert data["translations"][0]["title"] == "Sea View Villa"

    @pytest.mark.asyncio
    async def test_get_property_not_found(self, async_client: AsyncClient):
        response = await async_client.get(f"/api/properties/{uuid.uuid4()}")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert "error" in response.json()

    @pytest.mark.asyncio
    async def test_get_property_by_slug(self, async_client: AsyncClient, test_property: Property):
        response = await async_client.get("/api/properties/slug/villa-port-adriano", params={"locale": "de"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["property"]
        assert data["id"] == str(test_property.id)
        assert data["translations"][0]["title"] == "Villa mit Meerblick"

    @pytest.mark.asyncio
    async def test_get_property_by_slug_not_found(self, async_client: AsyncClient):
        response = await async_client.get("/api/properties/slug/no-such-villa")

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestAdminPropertyEndpoints:
    """Integration tests for authenticated property writes."""

    @pytest.mark.asyncio
    async def test_create_requires_authentication(self, async_client: AsyncClient):
        response = await async_client.post("/api/properties", json=PropertyFactory.create_payload())

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_create_property(self, admin_client: AsyncClient):
        response = await admin_client.post("/api/properties", json=PropertyFactory.create_payload())

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()["property"]
        assert data["slug"] == "villa-test"
        assert data["price"] == 1000000
        assert data["featured"] is False
        assert data["bedrooms"] is None
        assert len(data["translations"]) == 1
        assert data["translations"][0]["locale"] == "en"
        assert data["translations"][0]["title"] == "Test Villa"

    @pytest.mark.asyncio
    async def test_create_with_all_locales(self, admin_client: AsyncClient):
        payload = PropertyFactory.create_payload(
            year="2019",
            bedrooms="5",
            bathrooms="",
            area="420.5",
            coordinates={"lat": 39.5, "lng": 2.6},
            featured=True,
            images=["/uploads/properties/a.jpg", "/uploads/properties/b.jpg"],
            translations={
                "en": {"title": "Villa", "description": "English", "features": ["Pool", " "]},
                "de": {"title": "Villa", "description": "Deutsch", "subtitle": ""},
                "es": {"title": "Villa", "description": "Espanol"},
            }
        )

        response = await admin_client.post("/api/properties", json=payload)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()["property"]
        assert data["year"] == 2019
        assert data["bedrooms"] == 5
        assert data["bathrooms"] is None
        assert data["area"] == 420.5
        assert data["images"] == ["/uploads/properties/a.jpg", "/uploads/properties/b.jpg"]
        translations = {t["locale"]: t for t in data["translations"]}
        assert set(translations) == {"en", "de", "es"}
        assert translations["en"]["features"] == ["Pool"]
        assert translations["de"]["subtitle"] is None

    @pytest.mark.asyncio
    async def test_create_duplicate_slug_conflict(self, admin_client: AsyncClient):
        first = await admin_client.post("/api/properties", json=PropertyFactory.create_payload())
        second = await admin_client.post("/api/properties", json=PropertyFactory.create_payload())

        assert first.status_code == status.HTTP_201_CREATED
        assert second.status_code == status.HTTP_409_CONFLICT
        assert "already exists" in second.json()["error"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["slug", "status", "type", "price", "location", "translations"])
    async def test_create_missing_required_field(self, admin_client: AsyncClient, missing):
        payload = PropertyFactory.create_payload()
        del payload[missing]

        response = await admin_client.post("/api/properties", json=payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    @pytest.mark.parametrize("overrides", [
        {"price": 0},
        {"price": -5},
        {"price": "abc"},
        {"status": "demolished"},
        {"type": "castle"},
        {"slug": "Not A Slug"},
        {"bedrooms": "two"},
        {"unknown_field": True},
        {"translations": {"fr": {"title": "Villa", "description": "desc"}}},
        {"translations": {"en": {"title": "", "description": "desc"}}},
    ])
    async def test_create_invalid_payload(self, admin_client: AsyncClient, overrides):
        response = await admin_client.post("/api/properties", json=PropertyFactory.create_payload(**overrides))

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_update_requires_authentication(self, async_client: AsyncClient, test_property: Property):
        response = await async_client.put(f"/api/properties/{test_property.id}", json={"price": 1})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_update_price_without_translations(
        self, admin_client: AsyncClient, db_session
    ):
        created = await admin_client.post("/api/properties", json=PropertyFactory.create_payload())
        property_id = created.json()["property"]["id"]

        response = await admin_client.put(f"/api/properties/{property_id}", json={"price": 1200000})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["property"]
        assert data["price"] == 1200000
        assert [t["locale"] for t in data["translations"]] == ["en"]

        result = await db_session.execute(
            select(func.count(PropertyTranslation.id)).where(PropertyTranslation.locale == "de")
        )
        assert result.scalar() == 0

    @pytest.mark.asyncio
    async def test_update_adds_locale_and_keeps_others(self, admin_client: AsyncClient, test_property: Property):
        response = await admin_client.put(
            f"/api/properties/{test_property.id}",
            json={"translations": {"es": {"title": "Villa con vistas", "description": "Descripcion"}}}
        )

        assert response.status_code == status.HTTP_200_OK
        translations = {t["locale"]: t for t in response.json()["property"]["translations"]}
        assert set(translations) == {"en", "de", "es"}
        assert translations["en"]["title"] == "Sea View Villa"
        assert translations["de"]["title"] == "Villa mit Meerblick"
        assert translations["es"]["title"] == "Villa con vistas"

    @pytest.mark.asyncio
    async def test_update_title_only_keeps_description(self, admin_client: AsyncClient, test_property: Property):
        response = await admin_client.put(
            f"/api/properties/{test_property.id}",
            json={"translations": {"en": {"title": "Renamed Villa"}}}
        )

        assert response.status_code == status.HTTP_200_OK
        translations = {t["locale"]: t for t in response.json()["property"]["translations"]}
        assert translations["en"]["title"] == "Renamed Villa"
        assert translations["en"]["description"] == "A beautiful test villa"
        assert translations["en"]["features"] == ["Pool", "Garden"]
        assert translations["de"]["title"] == "Villa mit Meerblick"

    @pytest.mark.asyncio
    async def test_update_new_locale_without_description(
        self, admin_client: AsyncClient, test_property: Property, db_session
    ):
        response = await admin_client.put(
            f"/api/properties/{test_property.id}",
            json={"translations": {"es": {"title": "Villa con vistas"}}}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        data = response.json()
        assert data["code"] == "VALIDATION_ERROR"
        assert data["details"][0]["field"] == "translations -> es -> description"

        result = await db_session.execute(
            select(func.count(PropertyTranslation.id)).where(PropertyTranslation.locale == "es")
        )
        assert result.scalar() == 0

    @pytest.mark.asyncio
    async def test_update_cannot_null_translation_title(self, admin_client: AsyncClient, test_property: Property):
        response = await admin_client.put(
            f"/api/properties/{test_property.id}",
            json={"translations": {"en": {"title": None}}}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_update_cannot_clear_required_field(self, admin_client: AsyncClient, test_property: Property):
        response = await admin_client.put(f"/api/properties/{test_property.id}", json={"price": None})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_update_clears_optional_number(self, admin_client: AsyncClient, test_property: Property):
        response = await admin_client.put(f"/api/properties/{test_property.id}", json={"bedrooms": ""})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["property"]["bedrooms"] is None

    @pytest.mark.asyncio
    async def test_update_slug_conflict(self, admin_client: AsyncClient, test_property: Property):
        created = await admin_client.post("/api/properties", json=PropertyFactory.create_payload(slug="other-villa"))
        other_id = created.json()["property"]["id"]

        response = await admin_client.put(f"/api/properties/{other_id}", json={"slug": test_property.slug})

        assert response.status_code == status.HTTP_409_CONFLICT

    @pytest.mark.asyncio
    async def test_update_not_found(self, admin_client: AsyncClient):
        response = await admin_client.put(f"/api/properties/{uuid.uuid4()}", json={"price": 1})

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_delete_requires_authentication(self, async_client: AsyncClient, test_property: Property):
        response = await async_client.delete(f"/api/properties/{test_property.id}")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_delete_property(self, admin_client: AsyncClient, test_property: Property, db_session):
        property_id = test_property.id

        response = await admin_client.delete(f"/api/properties/{property_id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"success": True}

        follow_up = await admin_client.get(f"/api/properties/{property_id}")
        assert follow_up.status_code == status.HTTP_404_NOT_FOUND

        result = await db_session.execute(
            select(func.count(PropertyTranslation.id)).where(PropertyTranslation.property_id == property_id)
        )
        assert result.scalar() == 0

    @pytest.mark.asyncio
    async def test_delete_missing_property(self, admin_client: AsyncClient):
        response = await admin_client.delete(f"/api/properties/{uuid.uuid4()}")

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestHealthEndpoints:
    """Root and health endpoints."""

    @pytest.mark.asyncio
    async def test_root(self, async_client: AsyncClient):
        response = await async_client.get("/")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["locales"] == settings.supported_locales

    @pytest.mark.asyncio
    async def test_health(self, async_client: AsyncClient):
        response = await async_client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "healthy"
