"""Shared test fixtures."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from slack_sdk.errors import SlackApiError

from schedule_bot.app import app


@pytest.fixture(scope="session")
def client() -> TestClient:
    """Create a TestClient for the FastAPI app (lifespan not started)."""
    return TestClient(app)


@pytest.fixture()
def slack_api_error():
    """Factory building a SlackApiError whose response carries the given error code."""

    def _make(error_code: str) -> SlackApiError:
        resp = MagicMock()
        resp.get = MagicMock(
            side_effect=lambda key, default="": error_code if key == "error" else default,
        )
        resp.__getitem__ = MagicMock(
            side_effect=lambda key: error_code if key == "error" else None,
        )
        return SlackApiError(message=f"slack error: {error_code}", response=resp)

    return _make
