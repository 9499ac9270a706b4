import json
import logging

import httpx
import pytest

from foodrescue.services.notifier import Notifier, build_message, format_date, format_time_window

pytestmark = pytest.mark.anyio

URL = "https://hooks.slack.example.com/services/T/B/X"

REQUEST = {
    "id": "req123",
    "food_description": "50 lbs sandwiches",
    "estimated_weight": 50.0,
    "pickup_address": {"street": "1 Main St", "city": "Springfield", "state": "IL", "zip": "62701"},
    "pickup_time_window": "morning",
    "contact_on_arrival": "Call 555-123-4567",
}
DONOR = {"business_name": "Corner Bistro", "contact_name": "Sam Rivera"}


def _texts(message):
    out = []
    for block in message["blocks"]:
        if "text" in block:
            out.append(block["text"]["text"])
        for f in block.get("fields", []) + block.get("elements", []):
            out.append(f["text"])
    return "\n".join(out)


def test_format_helpers():
    assert format_date("2024-06-01") == "Saturday, June 1, 2024"
    assert format_date("not a date") == "not a date"
    assert format_time_window("evening") == "Evening (5pm-8pm)"
    assert format_time_window("midnight") == "midnight"


def test_message_summarises_the_request():
    text = _texts(build_message(REQUEST, DONOR, "2024-06-01"))
    assert "*Corner Bistro* has food ready for rescue!" in text
    assert "50 lbs sandwiches" in text
    assert "~50 lbs" in text
    assert "Saturday, June 1, 2024" in text
    assert "Morning (8am-12pm)" in text
    assert "1 Main St, Springfield, IL 62701" in text
    assert "https://maps.google.com/?q=1%20Main%20St%2C%20Springfield%2C%20IL%2062701" in text
    assert "Sam Rivera" in text
    assert "Call 555-123-4567" in text
    assert "`req123`" in text
    assert "Special Instructions" not in text


def test_special_instructions_included_when_present():
    text = _texts(build_message({**REQUEST, "special_instructions": "Use the alley"}, DONOR, "2024-06-01"))
    assert "Use the alley" in text


async def test_posts_once_to_webhook():
    calls = []

    def handler(request: httpx.Request):
        calls.append(request)
        return httpx.Response(200)

    await Notifier(URL, transport=httpx.MockTransport(handler)).notify(REQUEST, DONOR, "2024-06-01")
    assert len(calls) == 1
    assert str(calls[0].url) == URL
    assert json.loads(calls[0].content)["blocks"][0]["type"] == "header"


async def test_missing_url_is_a_logged_noop(caplog):
    def handler(request):
        raise AssertionError("should not be called")

    with caplog.at_level(logging.WARNING):
        await Notifier(None, transport=httpx.MockTransport(handler)).notify(REQUEST, DONOR, "2024-06-01")
    assert "not configured" in caplog.text


async def test_network_error_is_swallowed(caplog):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with caplog.at_level(logging.ERROR):
        await Notifier(URL, transport=httpx.MockTransport(handler)).notify(REQUEST, DONOR, "2024-06-01")
    assert "req123" in caplog.text


async def test_non_2xx_is_logged_not_raised(caplog):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(500, text="boom")

    with caplog.at_level(logging.ERROR):
        await Notifier(URL, transport=httpx.MockTransport(handler)).notify(REQUEST, DONOR, "2024-06-01")
    assert len(calls) == 1  # no retry
    assert "HTTP 500" in caplog.text
