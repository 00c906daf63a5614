from datetime import UTC, datetime, date as Date
from uuid import uuid4

from sqlalchemy import Column, DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _new_id() -> str:
    return uuid4().hex


class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    __table_args__ = (
        UniqueConstraint("date", "time", name="uq_appointments_date_time"),  # one booking per slot
    )

    id: str = Field(default_factory=_new_id, primary_key=True)
    client_name: str
    client_email: str = Field(index=True)
    date: Date = Field(index=True)
    time: str
    service: str
    created_at: datetime = Field(
        default_factory=_utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class AppointmentCreate(SQLModel):
    client_name: str
    client_email: str
    date: Date
    time: str
    service: str


class AppointmentEdit(SQLModel):
    date: Date
    time: str
    service: str
