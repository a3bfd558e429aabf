"""Application configuration via pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_id_list(raw: str) -> frozenset[str]:
    """Split a comma-separated identifier list, dropping blanks and whitespace."""
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Slack
    slack_bot_token: str = ""
    slack_signing_secret: str = ""
    denied_user_ids: str = ""  # comma-separated, e.g. "U0123,U0456"

    # Schedule posting
    schedule_channel_id: str = ""
    schedule_admin_user_id: str = ""
    schedule_timezone: str = "America/New_York"
    calendar_google_link: str = ""
    calendar_ical_link: str = ""
    include_1stf: bool = True
    include_2ndf: bool = False
    include_3rdf: bool = False

    # GloomSchedule API
    gs_api_key: str = ""
    gs_api_endpoint: str = ""

    # Scheduler
    scheduler_secret: str = ""

    # App
    environment: str = "development"
    log_level: str = "INFO"
    port: int = 8080

    @property
    def denied_users(self) -> frozenset[str]:
        """Deny-list as a set of Slack user IDs."""
        return parse_id_list(self.denied_user_ids)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings. Lazy initialization to avoid import-time errors."""
    return Settings()
