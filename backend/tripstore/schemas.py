from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer

INSTANT_FORMAT = "%m-%dT%H:%M:%S"


def _parse_instant(value: Any) -> datetime:
    if isinstance(value, str):
        text = value.strip()
        if text[-1:] in {"z", "Z"}:
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValueError(f"invalid RFC 3339 timestamp: {value!r}") from exc
        if parsed.tzinfo is None:
            raise ValueError(f"timestamp must carry a UTC offset: {value!r}")
        value = parsed
    if not isinstance(value, datetime):
        raise ValueError("expected an RFC 3339 timestamp")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    try:
        value = value.astimezone(timezone.utc)
    except OverflowError as exc:
        raise ValueError(f"timestamp out of range in UTC: {value!r}") from exc
    return value.replace(microsecond=(value.microsecond // 1000) * 1000)


def format_instant(value: datetime) -> str:
    value = value.astimezone(timezone.utc)
    return f"{value.year:04d}-{value.strftime(INSTANT_FORMAT)}.{value.microsecond // 1000:03d}Z"


# UTC datetime with millisecond precision, written as YYYY-MM-DDTHH:MM:SS.sssZ.
Instant = Annotated[
    datetime,
    BeforeValidator(_parse_instant),
    PlainSerializer(format_instant, return_type=str, when_used="json"),
]


class TripStatus(str, Enum):
    draft = "draft"
    planning = "planning"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"


KNOWN_TRIP_STATUSES = {status.value for status in TripStatus}


class Coordinates(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    lat: float
    lng: float


class Destination(BaseModel):
    name: str
    country: str
    coordinates: Optional[Coordinates] = None


class DateRange(BaseModel):
    start_date: Instant
    end_date: Instant
    days: int


class BudgetRange(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    min: float
    max: float
    currency: str


class UserPreferences(BaseModel):
    budget: Optional[BudgetRange] = None
    interests: List[str]
    accommodation_type: Optional[List[str]] = None
    transportation_preference: Optional[List[str]] = None
    dietary_restrictions: Optional[List[str]] = None
    accessibility_needs: Optional[List[str]] = None


class Location(BaseModel):
    name: str
    address: str
    coordinates: Optional[Coordinates] = None


class TimeSlot(BaseModel):
    start: str
    end: str
    duration: int


class Activity(BaseModel):
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    id: str
    activity_type: str = Field(alias="type")
    name: str
    description: Optional[str] = None
    location: Location
    time: TimeSlot
    cost: Optional[float] = None
    rating: Optional[float] = None
    booking_url: Optional[str] = None
    notes: Optional[str] = None


class DayPlan(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    day_number: int
    date: Instant
    activities: List[Activity]
    notes: Optional[str] = None
    estimated_budget: Optional[float] = None


class Trip(BaseModel):
    id: str
    name: str
    destination: Destination
    duration: DateRange
    preferences: UserPreferences
    itinerary: List[DayPlan]
    status: str
    created_at: Instant
    updated_at: Instant


class TripSummary(BaseModel):
    """Lightweight projection of a trip for list views."""

    id: str
    name: str
    destination: str
    duration: int
    status: str
    created_at: Instant
    updated_at: Instant

    @classmethod
    def from_trip(cls, trip: Trip) -> "TripSummary":
        return cls(
            id=trip.id,
            name=trip.name,
            destination=f"{trip.destination.name}, {trip.destination.country}",
            duration=trip.duration.days,
            status=trip.status,
            created_at=trip.created_at,
            updated_at=trip.updated_at,
        )


def dump_record(record: BaseModel) -> str:
    return record.model_dump_json(by_alias=True, exclude_none=True, indent=2)
