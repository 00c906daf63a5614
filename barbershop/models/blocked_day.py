from datetime import date as Date
from uuid import uuid4

from sqlalchemy import Column
from sqlalchemy.types import JSON
from sqlmodel import Field, SQLModel


def _new_id() -> str:
    return uuid4().hex


class BlockedDay(SQLModel, table=True):
    __tablename__ = "blocked_days"

    id: str = Field(default_factory=_new_id, primary_key=True)
    date: Date = Field(unique=True, index=True)
    # Subset of the slot grid, kept in grid order; the full grid means the whole day is off
    blocked_times: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
