"""Async GloomSchedule API client.

The API issues short-lived tokens in exchange for a static API key. The
client requests a token lazily and renews it 60 seconds before expiry.
Transient failures (transport errors, 429, 5xx) are retried with
exponential backoff; anything else raises ScheduleApiError immediately.
"""

import logging
from datetime import datetime, timedelta, timezone

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from schedule_bot.models.workout import AODetails, ScheduledEvent

logger = logging.getLogger(__name__)

TOKEN_EXPIRY_BUFFER = timedelta(seconds=60)


class ScheduleApiError(Exception):
    """A GloomSchedule request failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _is_retryable(error: BaseException) -> bool:
    """True for transport errors, rate limits (429) and server errors (5xx)."""
    if isinstance(error, httpx.TransportError):
        return True
    if isinstance(error, ScheduleApiError) and error.status_code is not None:
        return error.status_code == 429 or error.status_code >= 500
    return False


def _parse_expiry(value: str) -> datetime:
    expires_at = datetime.fromisoformat(value)
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    return expires_at


class GloomScheduleClient:
    """Token-authenticated reader for AO details and scheduled Qs."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("API key is required")
        if not base_url:
            raise ValueError("Base URL is required")

        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._http = http_client or httpx.AsyncClient(timeout=httpx.Timeout(10.0))

        self.token: str | None = None
        self.token_expires_at: datetime | None = None
        self.region_id: int | str | None = None
        self.region_name: str | None = None

    async def __aenter__(self) -> "GloomScheduleClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @retry(
        retry=retry_if_exception(_is_retryable),
        wait=wait_exponential_jitter(initial=1, max=30, jitter=2),
        stop=stop_after_attempt(4),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _request(self, method: str, path: str, **kwargs: object) -> dict:
        response = await self._http.request(method, f"{self.base_url}{path}", **kwargs)
        if response.is_error:
            raise ScheduleApiError(
                f"{method} {path} failed: {response.status_code} - {response.text}",
                status_code=response.status_code,
            )
        return response.json()

    async def request_token(self) -> dict:
        """Exchange the API key for a token and cache it with region info."""
        data = await self._request("POST", "/api-request-token", json={"api_key": self.api_key})
        self.token = data["token"]
        self.token_expires_at = _parse_expiry(data["expires_at"])
        self.region_id = data.get("region_id")
        self.region_name = data.get("region_name")
        logger.info("Obtained GloomSchedule token for region %s", self.region_name)
        return data

    def is_token_valid(self) -> bool:
        if not self.token or self.token_expires_at is None:
            return False
        return self.token_expires_at - datetime.now(timezone.utc) > TOKEN_EXPIRY_BUFFER

    async def ensure_valid_token(self) -> str:
        if not self.is_token_valid():
            await self.request_token()
        return self.token

    async def get_ao_details(self, active_only: bool = True) -> list[AODetails]:
        """List AOs (workout sites) with location and shutdown date."""
        token = await self.ensure_valid_token()
        data = await self._request(
            "GET",
            "/api-get-ao",
            params={"token": token, "activeOnly": str(active_only).lower()},
        )
        return [AODetails.model_validate(ao) for ao in data.get("aos", [])]

    async def get_scheduled_qs(self, date: str) -> list[ScheduledEvent]:
        """List scheduled events for a date in ``YYYY-MM-DD`` form."""
        if not date:
            raise ValueError("Date is required (YYYY-MM-DD)")
        token = await self.ensure_valid_token()
        data = await self._request(
            "GET",
            "/api-get-scheduled-qs",
            params={"token": token, "date": date},
        )
        return [ScheduledEvent.model_validate(event) for event in data.get("scheduled_events", [])]

    def region_info(self) -> dict | None:
        if self.region_id is None or not self.region_name:
            return None
        return {"id": self.region_id, "name": self.region_name}
