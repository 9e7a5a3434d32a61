"""Steam Authentication Routes

Key Endpoints:
- GET /api/v1/auth/steam/login: Redirect the user to Steam
- GET /api/v1/auth/steam/return: Steam OpenID return handler, issues an access token
- GET /api/v1/auth/steam/me: Current user from the access token
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from steam_auth.config.settings import get_settings
from steam_auth.core.factory import get_steam_strategy
from steam_auth.core.openid.relying_party import OpenIDVerificationError
from steam_auth.core.strategy import SteamStrategy
from steam_auth.domain.models.identity import UserIdentity
from steam_auth.infrastructure.auth.token_manager import AuthenticationError, SessionTokenManager

router = APIRouter(prefix="/api/v1/auth/steam", tags=["steam-authentication"])
logger = logging.getLogger(__name__)


# ============================================================================
# Request/Response Models
# ============================================================================

class LoginResponse(BaseModel):
    """Successful login response."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds
    user: UserIdentity


class CurrentUserResponse(BaseModel):
    """Claims of the current access token."""
    user_id: str
    display_name: str
    provider: str


# ============================================================================
# Dependencies
# ============================================================================

def get_token_manager() -> SessionTokenManager:
    """Get session token manager"""
    settings = get_settings()
    return SessionTokenManager(
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        access_token_expire_minutes=settings.access_token_expire_minutes,
    )


async def extract_bearer_token(
    authorization: Optional[str] = Header(None, alias="Authorization")
) -> Optional[str]:
    """Extract Bearer token from Authorization header."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    return authorization[7:].strip()


# ============================================================================
# Endpoints
# ============================================================================

@router.get("/login")
async def steam_login(strategy: SteamStrategy = Depends(get_steam_strategy)):
    """Start Steam login by redirecting to the Steam OpenID endpoint."""
    try:
        login_url = await strategy.get_login_url()
    except OpenIDVerificationError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Steam is unavailable. Please try again later.",
        ) from e

    return RedirectResponse(login_url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)


@router.get("/return", response_model=LoginResponse)
async def steam_return(
    request: Request,
    strategy: SteamStrategy = Depends(get_steam_strategy),
    token_manager: SessionTokenManager = Depends(get_token_manager),
):
    """Complete Steam login.

    Returns:
        Access token and user on success

    Raises:
        401: The assertion was rejected (invalid claimed identity, canceled)
        502: Steam or the Steam Web API failed
    """
    outcome = await strategy.authenticate(dict(request.query_params), str(request.url))

    if outcome.is_failure:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Steam authentication could not be completed. Please try again later.",
        )

    if not outcome.is_success:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=outcome.message or "Steam authentication failed.",
        )

    user: UserIdentity = outcome.user
    logger.info(f"Steam login accepted for {user.user_id}")

    return LoginResponse(
        access_token=token_manager.create_access_token(user),
        expires_in=token_manager.expires_in,
        user=user,
    )


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user(
    token: Optional[str] = Depends(extract_bearer_token),
    token_manager: SessionTokenManager = Depends(get_token_manager),
):
    """Get the user behind the current access token."""
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = token_manager.decode_access_token(token)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    return CurrentUserResponse(
        user_id=claims["sub"],
        display_name=claims.get("name", claims["sub"]),
        provider=claims.get("provider", "steam"),
    )
