"""
Integration tests for user routes.

Tests cover:
- Self-service profile read, update and password change
- Self deactivation and its dependents rule
- Admin-only listing, search and status/role changes
- Authentication and authorization errors
"""

import pytest
from httpx import AsyncClient

from src.models.user import User

TEST_PASSWORD = "secret123"


class TestSelfService:
    """Endpoints acting on the authenticated user."""

    @pytest.mark.asyncio
    async def test_get_me(self, async_client: AsyncClient, auth_headers: dict, test_user: User):
        response = await async_client.get("/api/usuarios/me", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == test_user.id
        assert data["email"] == "testuser@example.com"
        assert "password_hash" not in data

    @pytest.mark.asyncio
    async def test_get_me_without_token(self, async_client: AsyncClient):
        response = await async_client.get("/api/usuarios/me")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
        assert response.json()["error"]["code"] == "MISSING_CREDENTIALS"
        assert "request_id" in response.json()["meta"]

    @pytest.mark.asyncio
    async def test_get_me_with_invalid_token(self, async_client: AsyncClient):
        response = await async_client.get(
            "/api/usuarios/me", headers={"Authorization": "Bearer garbage"}
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_TOKEN"

    @pytest.mark.asyncio
    async def test_inactive_user_token_is_forbidden(
        self, async_client: AsyncClient, inactive_user: User, token_service
    ):
        token = token_service.issue(inactive_user.email, inactive_user.id, inactive_user.role)

        response = await async_client.get(
            "/api/usuarios/me", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "INACTIVE_USER"

    @pytest.mark.asyncio
    async def test_update_me(self, async_client: AsyncClient, auth_headers: dict):
        response = await async_client.put(
            "/api/usuarios/me",
            headers=auth_headers,
            json={"name": "Renamed User", "email": "renamed@example.com"},
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Renamed User"
        assert response.json()["email"] == "renamed@example.com"

    @pytest.mark.asyncio
    async def test_email_change_retires_old_token(
        self, async_client: AsyncClient, auth_headers: dict
    ):
        await async_client.put(
            "/api/usuarios/me", headers=auth_headers, json={"email": "renamed@example.com"}
        )

        validation = await async_client.post("/api/auth/validar-token", headers=auth_headers)
        me = await async_client.get("/api/usuarios/me", headers=auth_headers)
        refresh = await async_client.post("/api/auth/refresh", headers=auth_headers)

        assert validation.json()["valid"] is False
        assert me.status_code == 401
        assert me.json()["error"]["code"] == "INVALID_TOKEN"
        assert refresh.status_code == 401

    @pytest.mark.asyncio
    async def test_update_me_with_taken_email(
        self, async_client: AsyncClient, auth_headers: dict, other_user: User
    ):
        response = await async_client.put(
            "/api/usuarios/me", headers=auth_headers, json={"email": "other@example.com"}
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "DUPLICATE_EMAIL"

    @pytest.mark.asyncio
    async def test_change_password_then_login(
        self, async_client: AsyncClient, auth_headers: dict
    ):
        response = await async_client.put(
            "/api/usuarios/me/senha",
            headers=auth_headers,
            json={"current_password": TEST_PASSWORD, "new_password": "new-secret"},
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Password changed successfully"

        old_login = await async_client.post(
            "/api/auth/login",
            json={"email": "testuser@example.com", "password": TEST_PASSWORD},
        )
        new_login = await async_client.post(
            "/api/auth/login",
            json={"email": "testuser@example.com", "password": "new-secret"},
        )
        assert old_login.status_code == 401
        assert new_login.status_code == 200

    @pytest.mark.asyncio
    async def test_change_password_wrong_current(
        self, async_client: AsyncClient, auth_headers: dict
    ):
        response = await async_client.put(
            "/api/usuarios/me/senha",
            headers=auth_headers,
            json={"current_password": "wrong", "new_password": "new-secret"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INCORRECT_PASSWORD"

    @pytest.mark.asyncio
    async def test_deactivate_me_blocked_by_account(
        self, async_client: AsyncClient, auth_headers: dict, test_account
    ):
        response = await async_client.delete("/api/usuarios/me", headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "HAS_DEPENDENTS"

    @pytest.mark.asyncio
    async def test_deactivate_me(self, async_client: AsyncClient, auth_headers: dict):
        response = await async_client.delete("/api/usuarios/me", headers=auth_headers)

        assert response.status_code == 204

        login = await async_client.post(
            "/api/auth/login",
            json={"email": "testuser@example.com", "password": TEST_PASSWORD},
        )
        assert login.status_code == 401


class TestAdminEndpoints:
    """Endpoints restricted to admins."""

    @pytest.mark.asyncio
    async def test_regular_user_is_forbidden(self, async_client: AsyncClient, auth_headers: dict):
        response = await async_client.get("/api/usuarios", headers=auth_headers)

        assert response.status_code == 403
        assert response.json()["error"] == {
            "code": "INSUFFICIENT_PERMISSIONS",
            "message": "Administrator privileges required",
            "details": {},
        }

    @pytest.mark.asyncio
    async def test_list_active_users(
        self,
        async_client: AsyncClient,
        admin_headers: dict,
        test_user: User,
        inactive_user: User,
    ):
        response = await async_client.get("/api/usuarios", headers=admin_headers)

        assert response.status_code == 200
        emails = [u["email"] for u in response.json()]
        assert "testuser@example.com" in emails
        assert "inactive@example.com" not in emails

    @pytest.mark.asyncio
    async def test_search_role_and_count(
        self, async_client: AsyncClient, admin_headers: dict, test_user: User
    ):
        search = await async_client.get(
            "/api/usuarios/buscar", params={"nome": "test"}, headers=admin_headers
        )
        admins = await async_client.get("/api/usuarios/perfil/admin", headers=admin_headers)
        count = await async_client.get("/api/usuarios/count", headers=admin_headers)

        assert [u["id"] for u in search.json()] == [test_user.id]
        assert [u["email"] for u in admins.json()] == ["admin@example.com"]
        assert count.json() == {"count": 2}

    @pytest.mark.asyncio
    async def test_check_email(self, async_client: AsyncClient, admin_headers: dict):
        taken = await async_client.get(
            "/api/usuarios/verificar-email",
            params={"email": "ADMIN@example.com"},
            headers=admin_headers,
        )
        free = await async_client.get(
            "/api/usuarios/verificar-email",
            params={"email": "free@example.com"},
            headers=admin_headers,
        )

        assert taken.json()["exists"] is True
        assert free.json()["exists"] is False

    @pytest.mark.asyncio
    async def test_get_user_by_id(
        self, async_client: AsyncClient, admin_headers: dict, test_user: User
    ):
        found = await async_client.get(f"/api/usuarios/{test_user.id}", headers=admin_headers)
        missing = await async_client.get("/api/usuarios/999", headers=admin_headers)

        assert found.status_code == 200
        assert found.json()["email"] == "testuser@example.com"
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_change_status_and_role(
        self, async_client: AsyncClient, admin_headers: dict, test_user: User
    ):
        deactivated = await async_client.patch(
            f"/api/usuarios/{test_user.id}/status",
            json={"is_active": False},
            headers=admin_headers,
        )
        promoted = await async_client.patch(
            f"/api/usuarios/{test_user.id}/perfil",
            json={"role": "admin"},
            headers=admin_headers,
        )

        assert deactivated.json()["is_active"] is False
        assert promoted.json()["role"] == "admin"

    @pytest.mark.asyncio
    async def test_invalid_role_is_rejected(
        self, async_client: AsyncClient, admin_headers: dict, test_user: User
    ):
        response = await async_client.patch(
            f"/api/usuarios/{test_user.id}/perfil",
            json={"role": "superuser"},
            headers=admin_headers,
        )

        assert response.status_code == 422
