"""HTTP access to the booking backend.

Every non-2xx status is mapped to one error kind from
:mod:`barbershop.core.errors`; a 409 always becomes :class:`ConflictError`
and is never retried.
"""
import logging
from datetime import date
from typing import Any
from urllib.parse import quote

import httpx

from barbershop.client.models import AppointmentRecord, BlockedDayRecord
from barbershop.core.config import settings
from barbershop.core.errors import (
    AuthError,
    BookingError,
    ConflictError,
    NotFoundError,
    PolicyViolation,
    TransportError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_ERRORS: dict[int, type[BookingError]] = {
    400: ValidationError,
    401: AuthError,
    403: PolicyViolation,
    404: NotFoundError,
    409: ConflictError,
    422: ValidationError,
}


def _error_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("error") or body.get("detail")
        return message if isinstance(message, str) else None
    return None


def raise_for_status(response: httpx.Response) -> None:
    if response.is_success:
        return
    message = _error_message(response)
    error_cls = _STATUS_ERRORS.get(response.status_code)
    if error_cls is None:
        logger.warning("%s %s -> %s", response.request.method, response.request.url, response.status_code)
        raise TransportError(message or f"Unexpected response status {response.status_code}")
    raise error_cls(message)


def _day(value: date | str) -> str:
    return value.isoformat() if isinstance(value, date) else value


class BookingApi:
    """Async REST client; also the default ``BookingRepository`` for the store."""

    def __init__(self, client: httpx.AsyncClient, admin_token: str | None = None) -> None:
        self._client = client
        self.admin_token = admin_token

    @classmethod
    def from_settings(cls, admin_token: str | None = None) -> "BookingApi":
        client = httpx.AsyncClient(
            base_url=settings.api_base_url.rstrip("/") + "/",
            timeout=settings.http_timeout_seconds,
        )
        return cls(client, admin_token=admin_token)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "BookingApi":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _admin_headers(self) -> dict[str, str]:
        if not self.admin_token:
            return {}
        return {"Authorization": f"Bearer {self.admin_token}"}

    async def _request(self, method: str, path: str, admin: bool = False, **kwargs) -> Any:
        headers = self._admin_headers() if admin else {}
        try:
            response = await self._client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise TransportError() from e
        raise_for_status(response)
        try:
            return response.json()
        except ValueError as e:
            raise TransportError("Malformed response from booking service") from e

    # --- appointments ---

    async def list_appointments(self) -> list[AppointmentRecord]:
        body = await self._request("GET", "turnos")
        return self._appointments(body)

    async def list_appointments_for_email(self, email: str) -> list[AppointmentRecord]:
        body = await self._request("GET", f"turnos/email/{quote(email, safe='@')}")
        return self._appointments(body)

    async def create_appointment(
        self, client_name: str, client_email: str, day: date | str, time: str, service: str
    ) -> AppointmentRecord:
        body = await self._request(
            "POST",
            "turnos",
            json={"clientName": client_name, "mail": client_email, "date": _day(day), "time": time, "service": service},
        )
        return AppointmentRecord.from_api(body)

    async def replace_appointment(self, appointment: AppointmentRecord) -> AppointmentRecord:
        body = await self._request(
            "PUT",
            f"turnos/{appointment.id}",
            admin=True,
            json={
                "clientName": appointment.client_name,
                "mail": appointment.client_email,
                "date": appointment.date,
                "time": appointment.time,
                "service": appointment.service,
            },
        )
        return AppointmentRecord.from_api(body)

    async def edit_appointment(self, appointment_id: str, day: date | str, time: str, service: str) -> AppointmentRecord:
        body = await self._request(
            "PUT",
            f"turnos/editar/{appointment_id}",
            json={"date": _day(day), "time": time, "service": service},
        )
        return AppointmentRecord.from_api(body)

    async def cancel_appointment(self, appointment_id: str) -> None:
        await self._request("DELETE", f"turnos/cancelar/{appointment_id}")

    async def delete_appointment(self, appointment_id: str) -> None:
        await self._request("DELETE", f"turnos/{appointment_id}", admin=True)

    # --- blocked days ---

    async def list_blocked_days(self) -> list[BlockedDayRecord]:
        body = await self._request("GET", "dias-no-disponibles")
        if not isinstance(body, list):
            raise TransportError("Malformed blocked days response")
        return [BlockedDayRecord.from_api(item) for item in body]

    async def block(self, day: date | str, times: list[str]) -> BlockedDayRecord:
        body = await self._request(
            "POST", "dias-no-disponibles", admin=True, json={"date": _day(day), "blockedTimes": times}
        )
        return BlockedDayRecord.from_api(body)

    async def unblock(self, day: date | str, time: str | None = None) -> None:
        payload: dict[str, str] = {"date": _day(day)}
        if time is not None:
            payload["time"] = time
        await self._request("DELETE", "dias-no-disponibles", admin=True, json=payload)

    # --- admin ---

    async def admin_login(self, password: str) -> tuple[str, int]:
        """Return ``(token, expires_in_seconds)`` and keep the token for admin calls.

        A wrong password raises :class:`AuthError`.
        """
        body = await self._request("POST", "admin/login", json={"password": password})
        if not isinstance(body, dict) or "access_token" not in body:
            raise TransportError("Malformed login response")
        self.admin_token = body["access_token"]
        return body["access_token"], int(body["expires_in"])

    @staticmethod
    def _appointments(body: Any) -> list[AppointmentRecord]:
        if not isinstance(body, dict) or not isinstance(body.get("data", []), list):
            raise TransportError("Malformed appointments response")
        return [AppointmentRecord.from_api(item) for item in body.get("data") or []]
