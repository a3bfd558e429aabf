"""Schedule ingestion from GloomSchedule and daily posting to Slack."""

from schedule_bot.schedule.gloomschedule import GloomScheduleClient, ScheduleApiError
from schedule_bot.schedule.poster import (
    build_workout_card,
    post_tomorrows_schedule,
    post_workout_schedule,
)
from schedule_bot.schedule.workouts import (
    clean_ao_name,
    convert_event_to_workout,
    normalize_event_type,
    select_workouts,
    tomorrow_date,
    workout_type_emojis,
)

__all__ = [
    "build_workout_card",
    "clean_ao_name",
    "convert_event_to_workout",
    "GloomScheduleClient",
    "normalize_event_type",
    "post_tomorrows_schedule",
    "post_workout_schedule",
    "ScheduleApiError",
    "select_workouts",
    "tomorrow_date",
    "workout_type_emojis",
]
