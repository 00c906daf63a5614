from barbershop.services.slot_service import default_grid


async def test_block_requires_admin(client):
    resp = await client.post("/api/dias-no-disponibles", json={"date": "2026-01-06", "blockedTimes": ["10:00"]})
    assert resp.status_code == 401


async def test_block_and_merge(client, admin_headers):
    resp = await client.post(
        "/api/dias-no-disponibles",
        json={"date": "2026-01-06", "blockedTimes": ["10:30", "10:00"]},
        headers=admin_headers,
    )
    assert resp.status_code == 201
    assert resp.json()["blockedTimes"] == ["10:00", "10:30"]

    resp = await client.post(
        "/api/dias-no-disponibles",
        json={"date": "2026-01-06T00:00:00.000Z", "blockedTimes": ["11:00", "10:00"]},
        headers=admin_headers,
    )
    assert resp.json()["blockedTimes"] == ["10:00", "10:30", "11:00"]

    listed = (await client.get("/api/dias-no-disponibles")).json()
    assert len(listed) == 1
    assert listed[0]["date"] == "2026-01-06"


async def test_block_rejects_sunday_and_off_grid(client, admin_headers):
    sunday = await client.post(
        "/api/dias-no-disponibles", json={"date": "2026-01-11", "blockedTimes": ["10:00"]}, headers=admin_headers
    )
    assert sunday.status_code == 422
    off_grid = await client.post(
        "/api/dias-no-disponibles", json={"date": "2026-01-06", "blockedTimes": ["09:00"]}, headers=admin_headers
    )
    assert off_grid.status_code == 422


async def test_availability_reflects_blocks_and_bookings(client, admin_headers, booking):
    await client.post(
        "/api/dias-no-disponibles",
        json={"date": "2026-01-06", "blockedTimes": ["10:00", "10:30"]},
        headers=admin_headers,
    )
    await client.post("/api/turnos", json=booking(time="14:00"))
    body = (await client.get("/api/disponibilidad", params={"date": "2026-01-06"})).json()
    assert body["status"] == "partially_blocked"
    assert len(body["slots"]) == 17
    assert "14:00" not in body["slots"]


async def test_blocked_time_cannot_be_booked(client, admin_headers, booking):
    await client.post(
        "/api/dias-no-disponibles", json={"date": "2026-01-06", "blockedTimes": ["10:00"]}, headers=admin_headers
    )
    resp = await client.post("/api/turnos", json=booking(time="10:00"))
    assert resp.status_code == 422


async def test_full_day_block(client, admin_headers):
    await client.post(
        "/api/dias-no-disponibles",
        json={"date": "2026-01-07", "blockedTimes": list(default_grid())},
        headers=admin_headers,
    )
    body = (await client.get("/api/disponibilidad", params={"date": "2026-01-07"})).json()
    assert body == {"date": "2026-01-07", "status": "fully_blocked", "slots": []}


async def test_availability_for_sunday_and_open_day(client):
    sunday = (await client.get("/api/disponibilidad", params={"date": "2026-01-11"})).json()
    assert sunday["status"] == "disabled"
    assert sunday["slots"] == []
    open_day = (await client.get("/api/disponibilidad", params={"date": "2026-01-06"})).json()
    assert open_day["status"] == "open"
    assert len(open_day["slots"]) == 20


async def test_unblock_one_time_then_the_rest(client, admin_headers):
    await client.post(
        "/api/dias-no-disponibles",
        json={"date": "2026-01-06", "blockedTimes": ["10:00", "10:30"]},
        headers=admin_headers,
    )
    resp = await client.request(
        "DELETE", "/api/dias-no-disponibles", json={"date": "2026-01-06", "time": "10:00"}, headers=admin_headers
    )
    assert resp.status_code == 200
    listed = (await client.get("/api/dias-no-disponibles")).json()
    assert listed[0]["blockedTimes"] == ["10:30"]

    missing = await client.request(
        "DELETE", "/api/dias-no-disponibles", json={"date": "2026-01-06", "time": "10:00"}, headers=admin_headers
    )
    assert missing.status_code == 404

    resp = await client.request(
        "DELETE", "/api/dias-no-disponibles", json={"date": "2026-01-06", "time": "10:30"}, headers=admin_headers
    )
    assert resp.status_code == 200
    assert (await client.get("/api/dias-no-disponibles")).json() == []


async def test_unblock_whole_day(client, admin_headers):
    await client.post(
        "/api/dias-no-disponibles",
        json={"date": "2026-01-06", "blockedTimes": ["10:00", "10:30"]},
        headers=admin_headers,
    )
    resp = await client.request("DELETE", "/api/dias-no-disponibles", json={"date": "2026-01-06"}, headers=admin_headers)
    assert resp.status_code == 200
    assert (await client.get("/api/dias-no-disponibles")).json() == []
    again = await client.request(
        "DELETE", "/api/dias-no-disponibles", json={"date": "2026-01-06"}, headers=admin_headers
    )
    assert again.status_code == 404
