"""
Pydantic models for calendars.

A calendar groups entries and carries the colour and visibility flag
the views use.  ``CalendarStyle`` is the narrow, read-only projection
the layout engine receives as a side table keyed by calendar id.
"""

from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_COLOR = "#3b82f6"
COLOR_PATTERN = r"^#[0-9a-fA-F]{6}$"


class CalendarBase(BaseModel):
    name: str = Field(..., min_length=1, example="Logistics")
    color: str = Field(DEFAULT_COLOR, pattern=COLOR_PATTERN, example="#22c55e")
    is_visible: bool = Field(True, example=True)
    is_default: bool = Field(False, example=False)


class CalendarCreate(CalendarBase):
    """Schema for creating a calendar."""
    pass


class CalendarRead(CalendarBase):
    """Schema for reading a calendar from the API."""

    id: int
    model_config = {
        "from_attributes": True,
    }


class CalendarUpdate(BaseModel):
    """Schema for updating a calendar; unspecified fields stay unchanged."""
    name: Optional[str] = None
    color: Optional[str] = Field(None, pattern=COLOR_PATTERN)
    is_visible: Optional[bool] = None
    is_default: Optional[bool] = None


class CalendarStyle(BaseModel):
    """Colour and visibility of one calendar, as seen by the views."""

    id: int
    color: str = DEFAULT_COLOR
    is_visible: bool = True

    model_config = {
        "from_attributes": True,
        "frozen": True,
    }
