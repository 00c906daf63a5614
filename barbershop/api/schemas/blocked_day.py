from datetime import date as Date

from pydantic import BaseModel, Field, field_validator

from barbershop.api.schemas.appointment import CamelModel, coerce_date
from barbershop.services.availability_service import DayStatus


class BlockedDayPublic(CamelModel):
    id: str
    date: str  # YYYY-MM-DD
    blocked_times: list[str]


class BlockRequest(CamelModel):
    date: Date
    blocked_times: list[str] = Field(default_factory=list)

    @field_validator("date", mode="before")
    @classmethod
    def parse_date_field(cls, value: object) -> Date:
        return coerce_date(value)


class UnblockRequest(BaseModel):
    date: Date
    time: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def parse_date_field(cls, value: object) -> Date:
        return coerce_date(value)


class AvailabilityResponse(BaseModel):
    date: str  # YYYY-MM-DD
    status: DayStatus
    slots: list[str]
