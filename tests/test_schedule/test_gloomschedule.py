"""Tests for the GloomSchedule API client using httpx.MockTransport."""

from datetime import datetime, timedelta, timezone

import httpx
import pytest

from schedule_bot.schedule.gloomschedule import GloomScheduleClient, ScheduleApiError

BASE_URL = "https://gloom.example.com/api"


def _token_body(expires_in: timedelta = timedelta(hours=1)) -> dict:
    return {
        "token": "tok-123",
        "expires_at": (datetime.now(timezone.utc) + expires_in).isoformat(),
        "region_id": 42,
        "region_name": "Metro",
    }


class Recorder:
    """MockTransport handler that serves canned responses and records requests."""

    def __init__(self, routes: dict[str, httpx.Response]) -> None:
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.routes[request.url.path.rsplit("/", 1)[-1]]

    def paths(self) -> list[str]:
        return [r.url.path.rsplit("/", 1)[-1] for r in self.requests]


def _client(recorder: Recorder) -> GloomScheduleClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    return GloomScheduleClient("key-abc", BASE_URL + "/", http_client=http)


def test_requires_credentials():
    with pytest.raises(ValueError):
        GloomScheduleClient("", BASE_URL)
    with pytest.raises(ValueError):
        GloomScheduleClient("key", "")


@pytest.mark.asyncio
async def test_get_scheduled_qs_requests_token_first():
    recorder = Recorder(
        {
            "api-request-token": httpx.Response(200, json=_token_body()),
            "api-get-scheduled-qs": httpx.Response(
                200,
                json={
                    "date": "2026-01-20",
                    "scheduled_events": [
                        {
                            "ao_name": "The Yard",
                            "start_time": "05:30:00",
                            "event_type": "1stF",
                            "workout_types": ["Running"],
                            "qs": [{"f3_name": "Hamhock", "status": "accepted", "is_vq": False}],
                            "unexpected_field": True,
                        }
                    ],
                },
            ),
        }
    )

    async with _client(recorder) as client:
        events = await client.get_scheduled_qs("2026-01-20")

    assert recorder.paths() == ["api-request-token", "api-get-scheduled-qs"]
    assert recorder.requests[1].url.params["token"] == "tok-123"
    assert recorder.requests[1].url.params["date"] == "2026-01-20"
    assert events[0].ao_name == "The Yard"
    assert events[0].qs[0].f3_name == "Hamhock"
    assert client.region_info() == {"id": 42, "name": "Metro"}


@pytest.mark.asyncio
async def test_token_reused_until_near_expiry():
    recorder = Recorder(
        {
            "api-request-token": httpx.Response(200, json=_token_body()),
            "api-get-ao": httpx.Response(200, json={"aos": [{"name": "The Yard", "location": "Park"}]}),
        }
    )

    async with _client(recorder) as client:
        await client.get_ao_details()
        aos = await client.get_ao_details(active_only=False)

    assert recorder.paths() == ["api-request-token", "api-get-ao", "api-get-ao"]
    assert recorder.requests[2].url.params["activeOnly"] == "false"
    assert aos[0].location == "Park"


@pytest.mark.asyncio
async def test_token_renewed_inside_expiry_buffer():
    recorder = Recorder({"api-request-token": httpx.Response(200, json=_token_body(timedelta(seconds=30)))})

    async with _client(recorder) as client:
        await client.request_token()
        assert client.is_token_valid() is False
        await client.ensure_valid_token()

    assert recorder.paths() == ["api-request-token", "api-request-token"]


@pytest.mark.asyncio
async def test_client_error_not_retried():
    recorder = Recorder({"api-request-token": httpx.Response(401, text="bad key")})

    async with _client(recorder) as client:
        with pytest.raises(ScheduleApiError) as excinfo:
            await client.get_scheduled_qs("2026-01-20")

    assert excinfo.value.status_code == 401
    assert "bad key" in str(excinfo.value)
    assert len(recorder.requests) == 1


def test_region_info_before_token():
    assert GloomScheduleClient("key", BASE_URL).region_info() is None
