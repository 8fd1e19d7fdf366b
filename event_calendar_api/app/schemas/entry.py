"""
Pydantic models for calendar entries.

``CalendarEntry`` is the read model handed to the scheduling core: a
snapshot the layout engine reads but never mutates.  ``EntryCreate``
and ``EntryUpdate`` are request bodies for the CRUD endpoints.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class EntryBase(BaseModel):
    title: str = Field(..., min_length=1, example="Stage setup")
    description: Optional[str] = Field(None, example="Load-in for the main stage crew")
    location: Optional[str] = Field(None, example="Hall A")
    start_time: datetime = Field(..., example="2026-10-19T09:00:00Z")
    end_time: datetime = Field(..., example="2026-10-19T10:00:00Z")
    is_all_day: bool = Field(False, example=False)
    calendar_id: Optional[int] = Field(None, example=1)

    @model_validator(mode="after")
    def _check_range(self):
        if self.end_time < self.start_time:
            raise ValueError("end_time must not be earlier than start_time")
        return self


class EntryCreate(EntryBase):
    """Schema for creating an entry."""
    pass


class CalendarEntry(EntryBase):
    """An entry as stored, with its identifier."""

    id: int

    model_config = {
        "from_attributes": True,
        "frozen": True,
    }


class EntryUpdate(BaseModel):
    """Schema for updating an entry.

    All fields are optional; only provided fields will be updated.  When
    both ``start_time`` and ``end_time`` are sent they are checked
    against each other here; a one-sided change is checked by the
    service against the stored value.
    """
    title: str | None = None
    description: str | None = None
    location: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    is_all_day: bool | None = None
    calendar_id: int | None = None

    @model_validator(mode="after")
    def _check_range(self):
        if self.start_time and self.end_time and self.end_time < self.start_time:
            raise ValueError("end_time must not be earlier than start_time")
        return self
