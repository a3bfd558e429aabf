"""Slack request signature verification as a FastAPI dependency."""

import json
from urllib.parse import parse_qs

from fastapi import HTTPException, Request
from slack_sdk.signature import SignatureVerifier

from schedule_bot.config import get_settings


async def verify_slack_interaction(request: Request) -> dict:
    """Verify the Slack signature and return the decoded interaction payload.

    Interactivity requests are form-encoded with a single ``payload`` field
    holding JSON. The signature covers the raw body, so it is checked before
    anything is parsed.

    Raises HTTPException(403) if the signature is invalid and
    HTTPException(400) if the body carries no JSON payload.
    """
    settings = get_settings()
    body = (await request.body()).decode("utf-8")

    timestamp = request.headers.get("X-Slack-Request-Timestamp", "")
    signature = request.headers.get("X-Slack-Signature", "")

    verifier = SignatureVerifier(signing_secret=settings.slack_signing_secret)
    if not verifier.is_valid(body=body, timestamp=timestamp, signature=signature):
        raise HTTPException(status_code=403, detail="Invalid Slack signature")

    fields = parse_qs(body)
    try:
        payload = json.loads(fields["payload"][0])
    except (KeyError, IndexError, json.JSONDecodeError):
        raise HTTPException(status_code=400, detail="Missing interaction payload")
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Missing interaction payload")
    return payload
