"""Convert scheduling API records into Workout cards and pick tomorrow's set."""

import logging
import re
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from schedule_bot.models.workout import AODetails, ScheduledEvent, Workout

logger = logging.getLogger(__name__)

WORKOUT_TYPE_EMOJIS: dict[str, str] = {
    "running": "🏃",
    "run": "🏃",
    "running with pain stations": "🏃",
    "running w/ pain stations": "🏃",
    "rucking": "🎒",
    "ruck": "🎒",
    "bootcamp": "🥾",
    "kettlebell": "🫖",
    "heavy lifting": "💪",
    "heavy": "💪",
    "swimming": "🏊",
    "cycling": "🚴",
    "yoga": "🧘",
    "gear workout": "⚙️",
    "gear": "⚙️",
    "q school": "🏫",
    "bible study": "📖",
    "topical discussion": "💬",
    "running bootcamp": "🏃🥾",
    # known, intentionally no emoji
    "moderate": "",
    "2ndf": "",
    "3rdf": "",
}

VQ_MARKER = "🌟"

# date.weekday() order
_DAY_ABBREVIATIONS = ["Mo", "Tu", "We", "Th", "Fr", "Sa", "Su"]

# "Tu: Bootcamp, Th: Running" style per-day entries
_DAY_PREFIX = re.compile(r"(Su|Mo|Tu|We|Th|Fr|Sa):\s*([^,]+)", re.IGNORECASE)

_DAY_NAMES = r"(Mon|Monday|Tue|Tuesday|Wed|Wednesday|Thu|Thursday|Fri|Friday|Sat|Saturday|Sun|Sunday)"
_AO_DAY_SUFFIXES = [
    re.compile(rf"\s*\(?\b{_DAY_NAMES}\)?$", re.IGNORECASE),
    re.compile(rf"\s*-\s*{_DAY_NAMES}\s*$", re.IGNORECASE),
]


def tomorrow_date(tz_name: str, now: datetime | None = None) -> str:
    """Tomorrow's date in ``tz_name`` as ``YYYY-MM-DD``."""
    tz = ZoneInfo(tz_name)
    current = now.astimezone(tz) if now is not None else datetime.now(tz)
    return (current.date() + timedelta(days=1)).isoformat()


def workout_type_emojis(workout_types: Iterable[str], event_date: date) -> tuple[str, list[str]]:
    """Map workout type strings to an emoji string.

    Entries with day prefixes only contribute on the matching weekday.
    Returns the emoji string and the list of types not in the mapping.
    """
    emojis = ""
    unknown: list[str] = []
    day = _DAY_ABBREVIATIONS[event_date.weekday()]

    for entry in workout_types:
        to_parse = entry
        day_matches = _DAY_PREFIX.findall(entry)
        if day_matches:
            todays = [types for prefix, types in day_matches if prefix.capitalize() == day]
            if not todays:
                continue
            to_parse = todays[0]

        for name in (part.strip().lower() for part in to_parse.split(",")):
            if not name:
                continue
            if name in WORKOUT_TYPE_EMOJIS:
                emojis += WORKOUT_TYPE_EMOJIS[name]
            else:
                unknown.append(name)

    return emojis, unknown


def normalize_event_type(event_type: str | None) -> str | None:
    """Collapse free-form event types to ``1stF``, ``2ndF`` or ``3rdF``."""
    if not event_type:
        return None
    lowered = event_type.lower()
    if "1stf" in lowered or "1st f" in lowered:
        return "1stF"
    if "2ndf" in lowered or "2nd f" in lowered:
        return "2ndF"
    if "3rdf" in lowered or "3rd f" in lowered:
        return "3rdF"
    return None


def clean_ao_name(name: str) -> str:
    """Strip weekday suffixes: ``"Dawn Patrol (Tue)"`` -> ``"Dawn Patrol"``."""
    cleaned = name
    for pattern in _AO_DAY_SUFFIXES:
        cleaned = pattern.sub("", cleaned).strip()
    return re.sub(r"[\s-]+$", "", cleaned).strip()


def convert_event_to_workout(event: ScheduledEvent, ao: AODetails | None, date_str: str) -> Workout:
    """Build a Workout card model from a scheduled event and its AO."""
    valid_qs = [q for q in event.qs if q.status != "declined"]
    the_q = ", ".join(f"{q.f3_name} {VQ_MARKER}" if q.is_vq else q.f3_name for q in valid_qs)

    emojis, unknown = workout_type_emojis(event.workout_types, date.fromisoformat(date_str))
    start = event.start_time[:5].replace(":", "") if event.start_time else "TBD"

    return Workout(
        ao=clean_ao_name(event.ao_name),
        the_q=the_q or "TBD",
        start=start,
        types=emojis,
        event_type=normalize_event_type(event.event_type),
        raw_event_type=event.event_type,
        location=(ao.location if ao else None) or "",
        is_closed=not valid_qs,
        unknown_types=unknown,
    )


def select_workouts(
    events: Iterable[ScheduledEvent],
    aos: Iterable[AODetails],
    date_str: str,
    include_types: set[str],
) -> tuple[list[Workout], list[str]]:
    """Filter, convert and sort the day's events.

    Skips events whose normalized type is not in ``include_types``, events at
    AOs shut down on or before ``date_str``, and events with no valid Q.

    Returns:
        Workouts sorted by start time then AO name, and the unknown workout
        types seen (first-seen order, no duplicates).
    """
    ao_map = {ao.name: ao for ao in aos}
    event_date = date.fromisoformat(date_str)
    workouts: list[Workout] = []
    unknown: dict[str, None] = {}

    for event in events:
        if normalize_event_type(event.event_type) not in include_types:
            continue

        ao = ao_map.get(event.ao_name)
        if ao and ao.shutdown_date and event_date >= date.fromisoformat(ao.shutdown_date[:10]):
            logger.info("Skipping %s: AO shut down on %s", event.ao_name, ao.shutdown_date)
            continue

        workout = convert_event_to_workout(event, ao, date_str)
        if workout.is_closed:
            logger.info("Skipping %s: no valid Q assigned", event.ao_name)
            continue

        unknown.update(dict.fromkeys(workout.unknown_types))
        workouts.append(workout)

    workouts.sort(key=lambda w: (w.start, w.ao))
    return workouts, list(unknown)
