import logging
from urllib.parse import urlencode

from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import RedirectResponse

from barbershop.api.schemas.auth import AdminLoginRequest, AdminToken, GoogleProfile
from barbershop.core.config import settings
from barbershop.core.security import admin_session_seconds, create_admin_token, verify_password
from barbershop.services.google_auth_service import (
    decode_state,
    get_google_authorization_url,
    verify_google_code,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/admin/login", response_model=AdminToken)
async def admin_login(body: AdminLoginRequest) -> AdminToken:
    if not verify_password(body.password, settings.admin_password_hash):
        logger.warning("Rejected admin login")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect password",
        )
    return AdminToken(access_token=create_admin_token(), expires_in=admin_session_seconds())


# --- Google sign-in ---

def _is_allowed_redirect_uri(redirect_uri: str) -> bool:
    """Allow only redirect URIs under configured CORS origins."""
    for origin in settings.cors_origins_list:
        if redirect_uri == origin or redirect_uri.startswith(origin.rstrip("/") + "/"):
            return True
    return False


def _require_google() -> None:
    if not settings.google_enabled:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Google sign-in is not configured",
        )


@router.get("/auth/google")
async def google_login(redirect_uri: str | None = Query(None)):
    _require_google()
    if redirect_uri and _is_allowed_redirect_uri(redirect_uri):
        return RedirectResponse(url=get_google_authorization_url(redirect_uri=redirect_uri), status_code=302)
    return {"authorization_url": get_google_authorization_url()}


@router.get("/auth/google/callback", response_model=GoogleProfile)
async def google_callback(code: str = Query(...), state: str | None = Query(None)):
    _require_google()
    profile = await verify_google_code(code)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Google sign-in failed",
        )
    logger.info("Google sign-in for %s", profile.email)
    frontend_redirect = decode_state(state)
    if frontend_redirect and _is_allowed_redirect_uri(frontend_redirect):
        fragment = urlencode(profile.model_dump(exclude_none=True))
        return RedirectResponse(url=f"{frontend_redirect}#{fragment}", status_code=302)
    return profile
