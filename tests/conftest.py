"""Shared test fixtures.

The API runs in-process through ``httpx.ASGITransport`` against a fresh
in-memory SQLite database per test, with the clock pinned.
"""
import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["AUTO_CREATE_TABLES"] = "false"

from datetime import datetime  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402

from barbershop.api.deps import get_now  # noqa: E402
from barbershop.client.api import BookingApi  # noqa: E402
from barbershop.core.config import settings  # noqa: E402
from barbershop.core.db import build_engine, build_session_maker, get_session, init_db  # noqa: E402
from barbershop.core.security import hash_password  # noqa: E402
from barbershop.main import app  # noqa: E402

ADMIN_PASSWORD = "1234"
# Monday 2026-01-05, 09:00 shop time
NOW = datetime(2026, 1, 5, 9, 0)

_ADMIN_HASH = hash_password(ADMIN_PASSWORD)


class Clock:
    def __init__(self, now: datetime) -> None:
        self.now = now


@pytest.fixture
def clock() -> Clock:
    return Clock(NOW)


@pytest.fixture(autouse=True)
def admin_password(monkeypatch):
    monkeypatch.setattr(settings, "admin_password_hash", _ADMIN_HASH)


@pytest.fixture
async def session_maker():
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    await init_db(engine)
    yield build_session_maker(engine)
    await engine.dispose()


@pytest.fixture
async def session(session_maker):
    async with session_maker() as s:
        yield s


@pytest.fixture
async def client(session_maker, clock):
    async def _get_session():
        async with session_maker() as s:
            try:
                yield s
                await s.commit()
            except Exception:
                await s.rollback()
                raise

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_now] = lambda: clock.now
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def admin_headers(client) -> dict[str, str]:
    resp = await client.post("/api/admin/login", json={"password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
async def api(client):
    """Client library pointed at the in-process app."""
    http = httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test/api")
    async with BookingApi(http) as booking_api:
        yield booking_api


@pytest.fixture
def booking():
    """Factory for POST /turnos bodies."""
    def _make(date: str = "2026-01-06", time: str = "10:00", **overrides) -> dict:
        body = {
            "clientName": "Juan Perez",
            "mail": "juan@example.com",
            "date": date,
            "time": time,
            "service": "Corte",
        }
        body.update(overrides)
        return body
    return _make
