"""Tests for workout conversion, filtering, and date helpers."""

from datetime import date, datetime, timezone

import pytest

from schedule_bot.models.workout import AODetails, ScheduledEvent, ScheduledQ
from schedule_bot.schedule.workouts import (
    clean_ao_name,
    convert_event_to_workout,
    normalize_event_type,
    select_workouts,
    tomorrow_date,
    workout_type_emojis,
)

TUESDAY = "2026-01-20"


def _event(**overrides: object) -> ScheduledEvent:
    base = {
        "ao_name": "The Yard",
        "start_time": "05:30:00",
        "event_type": "1stF Workout",
        "workout_types": ["Running"],
        "qs": [{"f3_name": "Hamhock", "status": "accepted"}],
    }
    base.update(overrides)
    return ScheduledEvent.model_validate(base)


# -- tomorrow_date --


def test_tomorrow_date_uses_local_zone():
    """03:00 UTC on the 20th is still the 19th in New York."""
    now = datetime(2026, 1, 20, 3, 0, tzinfo=timezone.utc)
    assert tomorrow_date("America/New_York", now) == "2026-01-20"
    assert tomorrow_date("UTC", now) == "2026-01-21"


# -- workout_type_emojis --


def test_emojis_for_known_types():
    emojis, unknown = workout_type_emojis(["Running, Rucking"], date(2026, 1, 20))
    assert emojis == "🏃🎒"
    assert unknown == []


def test_unknown_types_reported():
    emojis, unknown = workout_type_emojis(["Bootcamp", "Underwater Basket Weaving"], date(2026, 1, 20))
    assert emojis == "🥾"
    assert unknown == ["underwater basket weaving"]


def test_known_types_without_emoji():
    assert workout_type_emojis(["Moderate"], date(2026, 1, 20)) == ("", [])


def test_day_prefixed_types_apply_on_matching_day():
    types = ["Tu: Bootcamp, Th: Running"]
    assert workout_type_emojis(types, date(2026, 1, 20)) == ("🥾", [])  # Tuesday
    assert workout_type_emojis(types, date(2026, 1, 22)) == ("🏃", [])  # Thursday
    assert workout_type_emojis(types, date(2026, 1, 21)) == ("", [])  # Wednesday


# -- normalize_event_type --


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("1stF Workout", "1stF"),
        ("1st F", "1stF"),
        ("2ndF Coffeteria", "2ndF"),
        ("3rd F - Bible Study", "3rdF"),
        ("Convergence", None),
        (None, None),
    ],
)
def test_normalize_event_type(raw: str | None, expected: str | None):
    assert normalize_event_type(raw) == expected


# -- clean_ao_name --


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Dawn Patrol (Tue)", "Dawn Patrol"),
        ("Dawn Patrol - Tuesday", "Dawn Patrol"),
        ("Dawn Patrol Tue", "Dawn Patrol"),
        ("Summon", "Summon"),
        ("The Yard", "The Yard"),
    ],
)
def test_clean_ao_name(raw: str, expected: str):
    assert clean_ao_name(raw) == expected


# -- convert_event_to_workout --


def test_convert_event():
    event = _event(
        ao_name="The Yard (Tue)",
        qs=[
            {"f3_name": "Hamhock", "status": "accepted"},
            {"f3_name": "Rookie", "status": "unconfirmed", "is_vq": True},
            {"f3_name": "Flake", "status": "declined"},
        ],
    )
    workout = convert_event_to_workout(event, AODetails(name="The Yard (Tue)", location="Central Park"), TUESDAY)

    assert workout.ao == "The Yard"
    assert workout.the_q == "Hamhock, Rookie 🌟"
    assert workout.start == "0530"
    assert workout.types == "🏃"
    assert workout.event_type == "1stF"
    assert workout.location == "Central Park"
    assert workout.is_closed is False


def test_convert_event_all_declined_is_closed():
    event = _event(qs=[ScheduledQ(f3_name="Flake", status="declined").model_dump()])
    workout = convert_event_to_workout(event, None, TUESDAY)

    assert workout.is_closed is True
    assert workout.the_q == "TBD"
    assert workout.location == ""


# -- select_workouts --


def test_select_filters_and_sorts():
    events = [
        _event(ao_name="Zeta", start_time="05:30:00"),
        _event(ao_name="Alpha", start_time="05:30:00"),
        _event(ao_name="Early", start_time="05:00:00"),
        _event(ao_name="Coffee", event_type="2ndF Coffeteria"),
        _event(ao_name="Closed", qs=[]),
        _event(ao_name="Gone"),
        _event(ao_name="Weird", workout_types=["Parkour"]),
    ]
    aos = [AODetails(name="Gone", shutdown_date="2026-01-15")]

    workouts, unknown = select_workouts(events, aos, TUESDAY, {"1stF"})

    assert [w.ao for w in workouts] == ["Early", "Alpha", "Weird", "Zeta"]
    assert unknown == ["parkour"]


def test_select_includes_enabled_types():
    events = [_event(ao_name="Coffee", event_type="2ndF Coffeteria", workout_types=["2ndF"])]

    workouts, _ = select_workouts(events, [], TUESDAY, {"1stF", "2ndF"})

    assert [w.ao for w in workouts] == ["Coffee"]


def test_select_future_shutdown_keeps_event():
    aos = [AODetails(name="The Yard", shutdown_date="2026-02-01")]

    workouts, _ = select_workouts([_event()], aos, TUESDAY, {"1stF"})

    assert len(workouts) == 1
