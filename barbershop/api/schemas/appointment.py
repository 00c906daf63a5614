from datetime import date as Date

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from barbershop.core.dates import parse_date

_HHMM = r"^\d{2}:\d{2}$"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def coerce_date(value: object) -> Date:
    parsed = parse_date(value)
    if parsed is None:
        raise ValueError("Invalid date, expected YYYY-MM-DD or an ISO instant")
    return parsed


class AppointmentPublic(CamelModel):
    id: str
    client_name: str
    client_email: str
    date: str  # ISO instant, date-only semantics
    time: str
    service: str


class AppointmentList(BaseModel):
    data: list[AppointmentPublic]


class BookAppointmentRequest(CamelModel):
    client_name: str = Field(min_length=1)
    client_email: EmailStr = Field(alias="mail")
    date: Date
    time: str = Field(pattern=_HHMM)
    service: str = Field(min_length=1)

    @field_validator("date", mode="before")
    @classmethod
    def parse_date_field(cls, value: object) -> Date:
        return coerce_date(value)


class EditAppointmentRequest(CamelModel):
    date: Date
    time: str = Field(pattern=_HHMM)
    service: str = Field(min_length=1)

    @field_validator("date", mode="before")
    @classmethod
    def parse_date_field(cls, value: object) -> Date:
        return coerce_date(value)


class MessageResponse(BaseModel):
    message: str
