from datetime import datetime

from barbershop.core.config import settings


async def test_book_appointment(client, booking):
    resp = await client.post("/api/turnos", json=booking())
    assert resp.status_code == 201
    body = resp.json()
    assert body["clientName"] == "Juan Perez"
    assert body["clientEmail"] == "juan@example.com"
    assert body["date"] == "2026-01-06T00:00:00.000Z"
    assert body["time"] == "10:00"
    assert body["id"]


async def test_book_accepts_iso_instant(client, booking):
    resp = await client.post("/api/turnos", json=booking(date="2026-01-08T00:00:00.000Z"))
    assert resp.status_code == 201
    assert resp.json()["date"] == "2026-01-08T00:00:00.000Z"


async def test_double_booking_is_a_conflict(client, booking):
    assert (await client.post("/api/turnos", json=booking())).status_code == 201
    resp = await client.post("/api/turnos", json=booking(clientName="Other", mail="other@example.com"))
    assert resp.status_code == 409
    assert "error" in resp.json()
    listed = await client.get("/api/turnos")
    assert len(listed.json()["data"]) == 1


async def test_list_is_ordered(client, booking):
    await client.post("/api/turnos", json=booking(date="2026-01-07", time="10:00"))
    await client.post("/api/turnos", json=booking(date="2026-01-06", time="11:00"))
    await client.post("/api/turnos", json=booking(date="2026-01-06", time="10:30"))
    data = (await client.get("/api/turnos")).json()["data"]
    assert [(a["date"][:10], a["time"]) for a in data] == [
        ("2026-01-06", "10:30"),
        ("2026-01-06", "11:00"),
        ("2026-01-07", "10:00"),
    ]


async def test_sunday_is_rejected(client, booking):
    resp = await client.post("/api/turnos", json=booking(date="2026-01-11"))
    assert resp.status_code == 422
    assert "Sunday" in resp.json()["error"]


async def test_past_date_is_rejected(client, booking):
    resp = await client.post("/api/turnos", json=booking(date="2026-01-02"))
    assert resp.status_code == 422


async def test_off_grid_time_is_rejected(client, booking):
    assert (await client.post("/api/turnos", json=booking(time="10:15"))).status_code == 422
    assert (await client.post("/api/turnos", json=booking(time="9am"))).status_code == 422


async def test_elapsed_slot_today_is_rejected(client, booking, clock):
    clock.now = datetime(2026, 1, 5, 12, 10)
    resp = await client.post("/api/turnos", json=booking(date="2026-01-05", time="12:00"))
    assert resp.status_code == 422
    resp = await client.post("/api/turnos", json=booking(date="2026-01-05", time="12:30"))
    assert resp.status_code == 201


async def test_missing_and_invalid_fields(client, booking):
    assert (await client.post("/api/turnos", json=booking(mail="not-an-email"))).status_code == 422
    assert (await client.post("/api/turnos", json=booking(clientName=""))).status_code == 422
    assert (await client.post("/api/turnos", json=booking(date="someday"))).status_code == 422


async def test_malformed_json(client):
    resp = await client.post(
        "/api/turnos", content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert resp.status_code == 400


async def test_list_by_email_is_case_insensitive(client, booking):
    await client.post("/api/turnos", json=booking(mail="Juan@Example.com"))
    await client.post("/api/turnos", json=booking(time="11:00", mail="ana@example.com"))
    data = (await client.get("/api/turnos/email/JUAN@example.com")).json()["data"]
    assert len(data) == 1
    assert data[0]["clientEmail"] == "juan@example.com"


async def test_edit_outside_window(client, booking):
    created = (await client.post("/api/turnos", json=booking())).json()
    resp = await client.put(
        f"/api/turnos/editar/{created['id']}",
        json={"date": "2026-01-06", "time": "11:00", "service": "Barba"},
    )
    assert resp.status_code == 200
    assert resp.json()["time"] == "11:00"
    assert resp.json()["service"] == "Barba"


async def test_edit_keeping_same_slot(client, booking):
    created = (await client.post("/api/turnos", json=booking())).json()
    resp = await client.put(
        f"/api/turnos/editar/{created['id']}",
        json={"date": created["date"], "time": "10:00", "service": "Barba"},
    )
    assert resp.status_code == 200


async def test_edit_into_taken_slot_conflicts(client, booking):
    first = (await client.post("/api/turnos", json=booking())).json()
    await client.post("/api/turnos", json=booking(time="10:30"))
    resp = await client.put(
        f"/api/turnos/editar/{first['id']}",
        json={"date": "2026-01-06", "time": "10:30", "service": "Corte"},
    )
    assert resp.status_code == 409


async def test_edit_inside_window_is_forbidden(client, booking):
    # 14:00 today is five hours away
    created = (await client.post("/api/turnos", json=booking(date="2026-01-05", time="14:00"))).json()
    resp = await client.put(
        f"/api/turnos/editar/{created['id']}",
        json={"date": "2026-01-06", "time": "11:00", "service": "Corte"},
    )
    assert resp.status_code == 403
    assert "hours remaining" in resp.json()["error"]


async def test_cancel(client, booking):
    created = (await client.post("/api/turnos", json=booking())).json()
    resp = await client.delete(f"/api/turnos/cancelar/{created['id']}")
    assert resp.status_code == 200
    assert (await client.get("/api/turnos")).json()["data"] == []
    again = await client.delete(f"/api/turnos/cancelar/{created['id']}")
    assert again.status_code == 404


async def test_cancel_inside_window_is_forbidden(client, booking, clock):
    created = (await client.post("/api/turnos", json=booking())).json()
    clock.now = datetime(2026, 1, 6, 4, 0)
    resp = await client.delete(f"/api/turnos/cancelar/{created['id']}")
    assert resp.status_code == 403
    assert len((await client.get("/api/turnos")).json()["data"]) == 1


async def test_unknown_appointment(client):
    resp = await client.put(
        "/api/turnos/editar/missing", json={"date": "2026-01-06", "time": "10:00", "service": "Corte"}
    )
    assert resp.status_code == 404


async def test_admin_routes_require_token(client, booking):
    created = (await client.post("/api/turnos", json=booking())).json()
    assert (await client.put(f"/api/turnos/{created['id']}", json=booking())).status_code == 401
    assert (await client.delete(f"/api/turnos/{created['id']}")).status_code == 401
    bad = {"Authorization": "Bearer not-a-token"}
    assert (await client.delete(f"/api/turnos/{created['id']}", headers=bad)).status_code == 401


async def test_admin_replace_ignores_edit_window(client, booking, admin_headers):
    created = (await client.post("/api/turnos", json=booking(date="2026-01-05", time="14:00"))).json()
    resp = await client.put(
        f"/api/turnos/{created['id']}",
        json=booking(date="2026-01-05", time="15:00", clientName="Juan P."),
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["time"] == "15:00"
    assert resp.json()["clientName"] == "Juan P."


async def test_admin_delete(client, booking, admin_headers):
    created = (await client.post("/api/turnos", json=booking(date="2026-01-05", time="14:00"))).json()
    resp = await client.delete(f"/api/turnos/{created['id']}", headers=admin_headers)
    assert resp.status_code == 200
    assert (await client.delete(f"/api/turnos/{created['id']}", headers=admin_headers)).status_code == 404


async def test_admin_login_wrong_password(client):
    resp = await client.post("/api/admin/login", json={"password": "nope"})
    assert resp.status_code == 401


async def test_admin_login_returns_eight_hour_session(client):
    resp = await client.post("/api/admin/login", json={"password": "1234"})
    assert resp.status_code == 200
    assert resp.json()["expires_in"] == 8 * 3600
    assert resp.json()["token_type"] == "bearer"


async def test_health(client):
    assert (await client.get("/health")).json() == {"status": "ok"}


async def test_auth_failures_use_error_body(client, booking):
    created = (await client.post("/api/turnos", json=booking())).json()
    resp = await client.delete(f"/api/turnos/{created['id']}")
    assert resp.status_code == 401
    assert resp.json() == {"error": "Missing or invalid authorization header"}
    assert resp.headers["www-authenticate"] == "Bearer"
    login = await client.post("/api/admin/login", json={"password": "nope"})
    assert login.json() == {"error": "Incorrect password"}


async def test_google_not_configured(client, monkeypatch):
    monkeypatch.setattr(settings, "google_client_id", "")
    resp = await client.get("/api/auth/google")
    assert resp.status_code == 503
    assert resp.json() == {"error": "Google sign-in is not configured"}


async def test_unknown_route_uses_error_body(client):
    resp = await client.get("/api/nope")
    assert resp.status_code == 404
    assert "error" in resp.json()
