"""Immutable records held by the client store.

Payloads are parsed once here. Older backends sent Spanish keys (``_id``,
``cliente``, ``fecha``, ``hora``, ``horarios``) and a ``peluquero`` that was
either an id string or an embedded object; both shapes resolve to the same
records so nothing downstream inspects raw JSON.
"""
from typing import Any

from pydantic import BaseModel, ConfigDict

from barbershop.core.errors import TransportError


class BarberRef(BaseModel):
    """Barber known only by id."""

    model_config = ConfigDict(frozen=True)

    id: str


class Barber(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str


def parse_barber(raw: Any) -> BarberRef | Barber | None:
    if isinstance(raw, str) and raw:
        return BarberRef(id=raw)
    if isinstance(raw, dict):
        barber_id = raw.get("id") or raw.get("_id") or ""
        name = raw.get("name") or raw.get("nombre")
        if name:
            return Barber(id=str(barber_id), name=str(name))
        if barber_id:
            return BarberRef(id=str(barber_id))
    return None


def _first(payload: dict, *keys: str) -> Any:
    for key in keys:
        if payload.get(key) is not None:
            return payload[key]
    return None


class AppointmentRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    client_name: str
    client_email: str
    date: str  # as sent by the server; normalize before comparing
    time: str
    service: str = ""
    barber: BarberRef | Barber | None = None

    @classmethod
    def from_api(cls, payload: Any) -> "AppointmentRecord":
        if not isinstance(payload, dict):
            raise TransportError("Malformed appointment in response")
        record_id = _first(payload, "id", "_id")
        date = _first(payload, "date", "fecha")
        time = _first(payload, "time", "hora")
        if record_id is None or date is None or time is None:
            raise TransportError("Malformed appointment in response")
        return cls(
            id=str(record_id),
            client_name=str(_first(payload, "clientName", "cliente") or ""),
            client_email=str(_first(payload, "clientEmail", "mail") or ""),
            date=str(date),
            time=str(time),
            service=str(_first(payload, "service", "servicio") or ""),
            barber=parse_barber(payload.get("peluquero")),
        )


class BlockedDayRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    date: str
    blocked_times: tuple[str, ...] = ()

    @classmethod
    def from_api(cls, payload: Any) -> "BlockedDayRecord":
        if not isinstance(payload, dict):
            raise TransportError("Malformed blocked day in response")
        date = _first(payload, "date", "fecha")
        if date is None:
            raise TransportError("Malformed blocked day in response")
        times = _first(payload, "blockedTimes", "horarios")
        return cls(
            id=str(_first(payload, "id", "_id") or ""),
            date=str(date),
            blocked_times=tuple(str(t) for t in times) if isinstance(times, list) else (),
        )
