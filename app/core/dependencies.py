# app/core/dependencies.py
import logging

import pydantic
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core.security import TokenAuthenticator
from app.database import get_db
from app.schemas.user import Caller, TokenPayload
from models import User

logger = logging.getLogger(__name__)

security = HTTPBearer()
auth = TokenAuthenticator()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def validate_token(
    token: HTTPAuthorizationCredentials = Depends(security),
) -> TokenPayload:
    """Verify the bearer token and parse its claims.

    Returns:
        TokenPayload: claims with ``sub`` parsed as the user id

    Raises:
        HTTPException: 401 if the token is missing, invalid, expired or
            carries no usable subject
    """
    if not token or not token.credentials:
        raise _unauthorized("Authentication token is required")

    try:
        claims = await auth.verify_token(token.credentials)
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Token validation error: %s", str(e))
        raise _unauthorized("Authentication failed") from e

    if not claims:
        raise _unauthorized("Invalid authentication token")

    try:
        return TokenPayload.model_validate(claims)
    except pydantic.ValidationError as e:
        raise _unauthorized("Invalid token payload - missing user ID") from e


async def get_current_user(
    request: Request,
    payload: TokenPayload = Depends(validate_token),
    db: AsyncSession = Depends(get_db),
) -> Caller:
    """Resolve the caller's identity from the token's subject.

    The role always comes from the user record, never from the token.

    Raises:
        HTTPException: 404 if the user does not exist, 403 if inactive
    """
    try:
        result = await db.execute(select(User).where(User.id == payload.sub))
        user = result.scalar_one_or_none()
    except Exception as e:
        logger.error("User authentication error: %s", str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Authentication service error",
        ) from e

    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="User account is inactive"
        )

    # Add user info to request state for logging
    request.state.user_id = user.id

    return Caller(id=user.id, role=user.role)
