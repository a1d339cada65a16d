"""
Appointment data models and defensive decoding of remote rows.
"""

import datetime as dt
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError

from services.exceptions import DecodeError


class AppointmentStatus(Enum):
    """Closed set of display statuses; UNKNOWN is the safe default"""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"

    @classmethod
    def decode(cls, value: Any) -> 'AppointmentStatus':
        """Map a wire value to a status; anything unrecognised becomes UNKNOWN"""
        if isinstance(value, str):
            try:
                status = cls(value.strip().lower())
            except ValueError:
                return cls.UNKNOWN
            return status
        return cls.UNKNOWN

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def badge_style(self) -> str:
        return STATUS_BADGE_STYLES[self]


STATUS_BADGE_STYLES = {
    AppointmentStatus.PENDING: "yellow",
    AppointmentStatus.CONFIRMED: "green",
    AppointmentStatus.CANCELLED: "red",
    AppointmentStatus.UNKNOWN: "gray",
}


@dataclass(frozen=True)
class Appointment:
    """Immutable snapshot of one booking record"""
    id: str
    date: date
    time_slot: str
    event_type: str
    location: str
    status: AppointmentStatus
    details: Optional[str] = None
    created_at: Optional[datetime] = None
    name: Optional[str] = None

    @property
    def date_display(self) -> str:
        return self.date.strftime("%B %d, %Y")

    @property
    def when_display(self) -> str:
        if self.time_slot:
            return f"{self.date_display} at {self.time_slot}"
        return self.date_display

    def display_fields(self) -> Dict[str, Any]:
        """Fields handed to presentation components"""
        return {
            "date": self.date_display,
            "time_slot": self.time_slot,
            "event_type": self.event_type,
            "location": self.location,
            "status": self.status.label,
            "details": self.details,
        }


class AppointmentRow(BaseModel):
    """Wire shape of an ``appointments`` row"""
    model_config = ConfigDict(extra="ignore")

    id: str
    date: dt.date
    time_slot: str = ""
    event_type: str = ""
    location: str = ""
    status: Any = None
    details: Optional[str] = None
    created_at: Optional[datetime] = None
    name: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, str)) and not isinstance(value, bool):
            value = str(value).strip()
            if value:
                return value
        raise ValueError("id must be a non-empty string")

    @field_validator("date", mode="before")
    @classmethod
    def _date_prefix(cls, value: Any) -> Any:
        # Timestamps are accepted; only the calendar date is kept
        if isinstance(value, str) and len(value) > 10 and value[10] in "T ":
            return value[:10]
        return value

    @field_validator("time_slot", "event_type", "location", mode="before")
    @classmethod
    def _text_or_empty(cls, value: Any) -> Any:
        return "" if value is None else str(value)

    @field_validator("details", "name", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        return str(value)

    @field_validator("created_at", mode="before")
    @classmethod
    def _lenient_timestamp(cls, value: Any) -> Any:
        if value in (None, ""):
            return None
        try:
            return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None


def decode_appointment(record: Dict[str, Any]) -> Appointment:
    """
    Decode one remote row.

    Unknown statuses and missing optional fields are coerced; a row without a
    usable id or date raises DecodeError.
    """
    try:
        row = AppointmentRow.model_validate(record)
    except PydanticValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
        record_id = record.get("id") if isinstance(record, dict) else None
        raise DecodeError(
            f"Undecodable appointment record ({fields})",
            record_id=None if record_id is None else str(record_id),
        ) from e

    return Appointment(
        id=row.id,
        date=row.date,
        time_slot=row.time_slot,
        event_type=row.event_type,
        location=row.location,
        status=AppointmentStatus.decode(row.status),
        details=row.details,
        created_at=row.created_at,
        name=row.name,
    )
