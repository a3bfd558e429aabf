"""Scheduling API records and the Workout card model derived from them."""

from pydantic import BaseModel, ConfigDict, Field


class ScheduledQ(BaseModel):
    """A leader (Q) assigned to a scheduled event."""

    model_config = ConfigDict(extra="ignore")

    f3_name: str
    status: str | None = None  # "accepted", "unconfirmed", "declined"
    is_vq: bool = False


class ScheduledEvent(BaseModel):
    """One entry of ``scheduled_events`` from /api-get-scheduled-qs."""

    model_config = ConfigDict(extra="ignore")

    ao_name: str
    start_time: str | None = None  # "HH:MM:SS"
    event_type: str | None = None
    workout_types: list[str] = Field(default_factory=list)
    qs: list[ScheduledQ] = Field(default_factory=list)


class AODetails(BaseModel):
    """One entry of ``aos`` from /api-get-ao."""

    model_config = ConfigDict(extra="ignore")

    name: str
    location: str | None = None
    shutdown_date: str | None = None  # "YYYY-MM-DD"


class Workout(BaseModel):
    """A workout ready to be rendered as an Event Message card."""

    ao: str
    the_q: str = "TBD"
    start: str = "TBD"  # "HHMM"
    types: str = ""  # emoji string
    event_type: str | None = None  # normalized: 1stF, 2ndF, 3rdF
    raw_event_type: str | None = None
    location: str = ""
    is_closed: bool = False
    unknown_types: list[str] = Field(default_factory=list)


class CalendarLinks(BaseModel):
    google: str = ""
    ical: str = ""
