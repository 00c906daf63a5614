import httpx

from barbershop.services.google_auth_service import (
    GOOGLE_TOKEN_URL,
    decode_state,
    get_google_authorization_url,
    verify_google_code,
)


def _client(userinfo: dict, token_status: int = 200) -> httpx.AsyncClient:
    def handler(request: httpx.Request) -> httpx.Response:
        if str(request.url) == GOOGLE_TOKEN_URL:
            return httpx.Response(token_status, json={"access_token": "at"})
        return httpx.Response(200, json=userinfo)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


async def test_verified_profile():
    async with _client({"email": "ana@example.com", "name": "Ana", "verified_email": True}) as client:
        profile = await verify_google_code("code", client)
    assert profile.email == "ana@example.com"
    assert profile.name == "Ana"


async def test_name_defaults_to_email_user():
    async with _client({"email": "ana@example.com"}) as client:
        profile = await verify_google_code("code", client)
    assert profile.name == "ana"


async def test_unverified_email_rejected():
    async with _client({"email": "ana@example.com", "verified_email": False}) as client:
        assert await verify_google_code("code", client) is None


async def test_failed_token_exchange():
    async with _client({}, token_status=400) as client:
        assert await verify_google_code("code", client) is None


def test_state_roundtrip():
    url = get_google_authorization_url(redirect_uri="http://localhost:5173/login")
    state = httpx.URL(url).params["state"]
    assert decode_state(state) == "http://localhost:5173/login"
    assert decode_state(None) is None
