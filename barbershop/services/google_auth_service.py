import base64
import logging
from urllib.parse import urlencode

import httpx

from barbershop.api.schemas.auth import GoogleProfile
from barbershop.core.config import settings

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"


def get_google_authorization_url(redirect_uri: str | None = None, state: str | None = None) -> str:
    params = {
        "client_id": settings.google_client_id,
        "redirect_uri": settings.google_redirect_uri,
        "response_type": "code",
        "scope": "openid email profile",
        "prompt": "select_account",
    }
    # Encode the frontend redirect in state so the callback can send the profile there
    if redirect_uri:
        params["state"] = base64.urlsafe_b64encode(redirect_uri.encode()).decode().rstrip("=")
    elif state:
        params["state"] = state
    return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"


def decode_state(state: str | None) -> str | None:
    if not state:
        return None
    padded = state + "=" * (-len(state) % 4)
    try:
        return base64.urlsafe_b64decode(padded).decode()
    except (ValueError, UnicodeDecodeError):
        return None


async def exchange_code_for_tokens(code: str, client: httpx.AsyncClient) -> dict | None:
    resp = await client.post(
        GOOGLE_TOKEN_URL,
        data={
            "code": code,
            "client_id": settings.google_client_id,
            "client_secret": settings.google_client_secret,
            "redirect_uri": settings.google_redirect_uri,
            "grant_type": "authorization_code",
        },
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    if resp.status_code != 200:
        logger.warning(
            "Google token exchange failed: status=%s body=%s redirect_uri=%s",
            resp.status_code,
            resp.text[:500],
            settings.google_redirect_uri,
        )
        return None
    return resp.json()


async def get_google_user_info(access_token: str, client: httpx.AsyncClient) -> dict | None:
    resp = await client.get(
        GOOGLE_USERINFO_URL,
        headers={"Authorization": f"Bearer {access_token}"},
    )
    if resp.status_code != 200:
        logger.warning("Google userinfo failed: status=%s", resp.status_code)
        return None
    return resp.json()


async def verify_google_code(code: str, client: httpx.AsyncClient | None = None) -> GoogleProfile | None:
    """Exchange an authorization code for the signed-in user's verified profile."""
    if client is None:
        async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as own_client:
            return await verify_google_code(code, own_client)
    tokens = await exchange_code_for_tokens(code, client)
    if not tokens or not tokens.get("access_token"):
        return None
    info = await get_google_user_info(tokens["access_token"], client)
    if not info or not info.get("email"):
        return None
    if info.get("verified_email") is False:
        logger.warning("Google account %s has an unverified email", info["email"])
        return None
    email = info["email"]
    return GoogleProfile(
        name=info.get("name") or email.split("@")[0],
        email=email,
        picture=info.get("picture"),
    )
