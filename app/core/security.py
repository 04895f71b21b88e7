"""Security related functions."""

from datetime import UTC, datetime, timedelta
from uuid import UUID

import bcrypt
import jwt
from fastapi import HTTPException, status
from jwt import InvalidTokenError

from app.core.config import settings


class TokenAuthenticator:
    """
    Issues and verifies signed session tokens.

    Tokens are HS256 JSON Web Tokens whose ``id`` claim holds the user id.
    They travel either in an ``Authorization: Bearer`` header or in the
    session cookie set at login.

    :ivar secret_key: The secret key used to sign and verify tokens.
    :type secret_key: str
    :ivar algorithm: JWT signing algorithm.
    :type algorithm: str
    """

    def __init__(self, secret_key: str | None = None, algorithm: str | None = None):
        self.secret_key = secret_key or settings.secret_key
        self.algorithm = algorithm or settings.algorithm

    def create_token(self, user_id: UUID, expires_in: timedelta | None = None) -> str:
        """Create a signed token for a user."""
        expires_in = expires_in or timedelta(days=settings.access_token_expire_days)
        payload = {
            "id": str(user_id),
            "exp": datetime.now(UTC) + expires_in,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> dict:
        """
        Verifies a token's signature and expiry and returns its payload.

        :param token: The JWT token to be verified.
        :return: The decoded payload.
        :raises HTTPException: 401 if the token is invalid or expired.
        """
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except InvalidTokenError as e:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f"Invalid authentication token: {str(e)}",
            ) from e


def hash_password(password: str) -> str:
    """Hash password using bcrypt"""
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Verify password against hash"""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False
