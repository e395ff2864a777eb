"""
Bearer token authentication.

Access tokens are issued by the hosted identity provider and signed with a
shared HS256 secret. This module verifies them with authlib and exposes the
authenticated user to FastAPI endpoints.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

from authlib.jose import JoseError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from booktalks_buddy.core.database.entities.users import User
from booktalks_buddy.core.database.session import get_session

from .config import AuthConfig, settings

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    """Authenticated caller derived from verified token claims."""

    id: str = Field(description="Subject of the access token")
    email: Optional[str] = Field(default=None, description="Email claim, when present")
    role: Optional[str] = Field(default=None, description="Identity provider role claim")


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def verify_access_token(token: str, config: Optional[AuthConfig] = None) -> Dict[str, Any]:
    """
    Verify signature, expiry and audience of an access token.

    Args:
        token: Encoded JWT from the Authorization header.
        config: Auth settings; defaults to the application settings.

    Returns:
        The validated claims.

    Raises:
        HTTPException: 401 when the token is malformed, badly signed, expired
            or issued for another audience.
    """
    cfg = config or settings.auth
    claims_options: Dict[str, Any] = {"sub": {"essential": True}, "exp": {"essential": True}}
    if cfg.jwt_audience:
        claims_options["aud"] = {"essential": True, "values": [cfg.jwt_audience]}

    try:
        claims = jwt.decode(token, cfg.jwt_secret, claims_options=claims_options)
        claims.validate(now=int(time.time()))
    except (JoseError, ValueError) as exc:
        logger.info(f"Rejected access token: {exc}")
        raise _unauthorized("Invalid or expired token") from exc

    header_alg = claims.header.get("alg") if getattr(claims, "header", None) else None
    if header_alg and header_alg != cfg.jwt_algorithm:
        raise _unauthorized("Disallowed token algorithm")
    return dict(claims)


def create_access_token(
    user_id: str,
    email: Optional[str] = None,
    expires_in: int = 3600,
    config: Optional[AuthConfig] = None,
    extra_claims: Optional[Dict[str, Any]] = None,
) -> str:
    """Sign a token the way the identity provider does; used by tooling and tests."""
    cfg = config or settings.auth
    now = int(time.time())
    payload: Dict[str, Any] = {"sub": user_id, "iat": now, "exp": now + expires_in, "role": "authenticated"}
    if email:
        payload["email"] = email
    if cfg.jwt_audience:
        payload["aud"] = cfg.jwt_audience
    payload.update(extra_claims or {})
    token = jwt.encode({"alg": cfg.jwt_algorithm, "typ": "JWT"}, payload, cfg.jwt_secret)
    return token.decode("utf-8") if isinstance(token, bytes) else token


async def ensure_user(session: AsyncSession, current: CurrentUser) -> User:
    """Create the ``users`` row for a subject seen for the first time."""
    user = await session.get(User, current.id)
    if user is None:
        user = User(id=current.id, email=current.email)
        session.add(user)
        await session.commit()
        await session.refresh(user)
        logger.info(f"Registered new user {current.id}")
    return user


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_session),
) -> Optional[CurrentUser]:
    """Current user when a bearer token is sent, otherwise None."""
    if credentials is None or not credentials.credentials:
        return None
    claims = verify_access_token(credentials.credentials)
    current = CurrentUser(id=str(claims["sub"]), email=claims.get("email"), role=claims.get("role"))
    await ensure_user(session, current)
    return current


async def get_current_user(user: Optional[CurrentUser] = Depends(get_optional_user)) -> CurrentUser:
    """Authenticated user; 401 for anonymous requests."""
    if user is None:
        raise _unauthorized("Authentication required")
    return user
