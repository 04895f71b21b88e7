"""
API tests for User/Authentication controller.

This module contains API endpoint tests for signup, login, session status
and logout, including the session cookie handling.
"""

import uuid

import pytest
from fastapi import status
from httpx import AsyncClient

from app.core.dependencies import auth


class TestUserAuthController:
    """Test cases for User/Authentication API endpoints."""

    @pytest.mark.asyncio
    async def test_signup_success(self, client: AsyncClient, test_db):
        """Test successful user signup."""
        signup_data = {"name": "New User", "email": "newuser@example.com", "password": "hunter22"}

        response = await client.post("/api/user/signup", json=signup_data)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json() == {"message": "OK", "name": "New User", "email": "newuser@example.com"}
        cookie_header = response.headers["set-cookie"]
        assert cookie_header.startswith("auth-token=")
        assert "HttpOnly" in cookie_header
        assert "Path=/" in cookie_header

    @pytest.mark.asyncio
    async def test_signup_cookie_authenticates(self, client: AsyncClient, test_db):
        """The cookie set at signup is accepted by the chat endpoints."""
        response = await client.post(
            "/api/user/signup", json={"name": "Cookie", "email": "cookie@example.com", "password": "hunter22"}
        )
        client.cookies.set("auth-token", response.cookies["auth-token"])

        listing = await client.get("/api/chat/all-chats")

        assert listing.status_code == status.HTTP_200_OK
        assert listing.json()["conversations"] == []

    @pytest.mark.asyncio
    async def test_signup_duplicate_user(self, client: AsyncClient, test_user):
        """Test signup with an already registered email."""
        response = await client.post(
            "/api/user/signup", json={"name": "Again", "email": "test@example.com", "password": "hunter22"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        data = response.json()
        assert data["error_code"] == "USER_ALREADY_EXISTS"
        assert "set-cookie" not in response.headers

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"name": "No Email", "password": "hunter22"},
            {"name": "Bad Email", "email": "not-an-email", "password": "hunter22"},
            {"name": "Short", "email": "short@example.com", "password": "abc"},
            {"name": "   ", "email": "blank@example.com", "password": "hunter22"},
        ],
    )
    async def test_signup_invalid_payload(self, client: AsyncClient, test_db, payload):
        """Test signup request validation."""
        response = await client.post("/api/user/signup", json=payload)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_login_success(self, client: AsyncClient, test_user, test_password):
        """Test login with valid credentials."""
        response = await client.post("/api/user/login", json={"email": "test@example.com", "password": test_password})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["name"] == "Test User"
        token = response.cookies["auth-token"]
        assert auth.verify_token(token)["id"] == str(test_user.id)

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client: AsyncClient, test_user):
        """Test login with a wrong password."""
        response = await client.post("/api/user/login", json={"email": "test@example.com", "password": "nope-nope"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error_code"] == "INVALID_CREDENTIALS"

    @pytest.mark.asyncio
    async def test_login_unknown_email(self, client: AsyncClient, test_db):
        """Unknown emails get the same answer as wrong passwords."""
        response = await client.post("/api/user/login", json={"email": "ghost@example.com", "password": "whatever"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error_code"] == "INVALID_CREDENTIALS"

    @pytest.mark.asyncio
    async def test_auth_status(self, authenticated_client: AsyncClient, test_user):
        """Test the session status of an authenticated user."""
        response = await authenticated_client.get("/api/user/auth-status")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"message": "OK", "name": test_user.name, "email": test_user.email}

    @pytest.mark.asyncio
    async def test_auth_status_without_token(self, client: AsyncClient):
        """Test the session status without a token."""
        response = await client.get("/api/user/auth-status")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_auth_status_unknown_user(self, client: AsyncClient, test_db):
        """A valid token for a removed account is rejected."""
        headers = {"Authorization": f"Bearer {auth.create_token(uuid.uuid4())}"}

        response = await client.get("/api/user/auth-status", headers=headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_logout(self, authenticated_client: AsyncClient):
        """Logout clears the session cookie."""
        response = await authenticated_client.get("/api/user/logout")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"message": "OK"}
        cookie_header = response.headers["set-cookie"]
        assert cookie_header.startswith('auth-token=""') or "Max-Age=0" in cookie_header
