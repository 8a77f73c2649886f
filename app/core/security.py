"""Security related functions."""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt
from fastapi import HTTPException, status
from jwt import InvalidTokenError

from app.core.config import Settings, settings


class TokenAuthenticator:
    """
    Issues and verifies the HS256 access tokens that carry a caller's identity.

    The ``sub`` claim holds the user id. The role claim is informational only;
    the role used for access decisions is always read from the user record.

    :ivar secret_key: The secret key used to sign and verify tokens.
    :type secret_key: str
    :ivar algorithm: The JWT signing algorithm.
    :type algorithm: str
    """

    def __init__(self, config: Settings | None = None):
        config = config or settings
        self.secret_key = config.secret_key
        self.algorithm = config.algorithm
        self.expire_minutes = config.access_token_expire_minutes

    def create_access_token(
        self, user_id: UUID, role: str | None = None, expires_delta: timedelta | None = None
    ) -> str:
        expire = datetime.now(timezone.utc) + (
            expires_delta or timedelta(minutes=self.expire_minutes)
        )
        payload = {"sub": str(user_id), "exp": expire}
        if role:
            payload["role"] = role
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    async def verify_token(self, token: str) -> dict:
        """
        Verify the signature and expiry of a token and return its claims.

        :param token: The JWT token to be verified.
        :return: A dictionary containing the decoded payload of the token.
        """
        try:
            return jwt.decode(
                token,
                key=self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"]},
            )
        except InvalidTokenError as e:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f"Invalid authentication token: {str(e)}",
                headers={"WWW-Authenticate": "Bearer"},
            ) from e


def create_access_token(user_id: UUID, role: str | None = None) -> str:
    return TokenAuthenticator().create_access_token(user_id, role)
