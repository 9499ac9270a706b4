# foodrescue/services/notifier.py
"""New-request alerts to a Slack incoming webhook.

Best effort: one POST per request, no retry, and nothing raised to the
caller. A missing webhook URL turns notify() into a logged no-op.
"""
import urllib.parse
from datetime import date
from typing import Any, Dict, Optional

import httpx

from foodrescue.core.logging import get_logger
from foodrescue.models.pickup import TIME_WINDOW_LABELS

logger = get_logger(__name__)


def format_address(address: Dict[str, str]) -> str:
    return f"{address['street']}, {address['city']}, {address['state']} {address['zip']}"


def format_time_window(window: str) -> str:
    return TIME_WINDOW_LABELS.get(window, window)


def format_date(date_string: str) -> str:
    try:
        d = date.fromisoformat(date_string[:10])
    except ValueError:
        return date_string
    return f"{d:%A}, {d:%B} {d.day}, {d.year}"


def _field(text: str) -> Dict[str, str]:
    return {"type": "mrkdwn", "text": text}


def build_message(request: Dict[str, Any], donor: Dict[str, Any], pickup_date_string: str) -> Dict[str, Any]:
    address = format_address(request["pickup_address"])
    maps_url = "https://maps.google.com/?q=" + urllib.parse.quote(address, safe="")

    blocks = [
        {"type": "header", "text": {"type": "plain_text", "text": "🚨 New Pickup Request", "emoji": True}},
        {"type": "section", "text": _field(f"*{donor['business_name']}* has food ready for rescue!")},
        {"type": "divider"},
        {"type": "section", "fields": [
            _field(f":package: *Food*\n{request['food_description']}"),
            _field(f":scales: *Estimated Weight*\n~{request['estimated_weight']:g} lbs"),
        ]},
        {"type": "section", "fields": [
            _field(f":calendar: *Pickup Date*\n{format_date(pickup_date_string)}"),
            _field(f":clock3: *Time Window*\n{format_time_window(request['pickup_time_window'])}"),
        ]},
        {"type": "section", "text": _field(f":round_pushpin: *Pickup Location*\n{address}\n<{maps_url}|Open in Google Maps>")},
        {"type": "section", "fields": [
            _field(f":bust_in_silhouette: *Contact*\n{donor['contact_name']}"),
            _field(f":telephone_receiver: *On Arrival*\n{request['contact_on_arrival']}"),
        ]},
    ]
    if request.get("special_instructions"):
        blocks.append({"type": "section", "text": _field(f":memo: *Special Instructions*\n{request['special_instructions']}")})
    blocks.append({"type": "context", "elements": [_field(f"Request ID: `{request['id']}`")]})
    return {"blocks": blocks}


class Notifier:
    def __init__(self, webhook_url: Optional[str], timeout_s: float = 10.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.webhook_url = webhook_url
        self.timeout = httpx.Timeout(timeout_s, connect=min(timeout_s, 5.0))
        self.transport = transport

    async def deliver_one(self, body: Dict[str, Any]) -> int:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            r = await client.post(self.webhook_url, json=body, headers={"Content-Type": "application/json"})
            return r.status_code

    async def notify(self, request: Dict[str, Any], donor: Dict[str, Any], pickup_date_string: str) -> None:
        if not self.webhook_url:
            logger.warning("SLACK_WEBHOOK_URL not configured, skipping notification for %s", request.get("id"))
            return
        try:
            status = await self.deliver_one(build_message(request, donor, pickup_date_string))
        except httpx.HTTPError as ex:
            logger.error("Error sending pickup notification for %s: %r", request.get("id"), ex)
            return
        except Exception:
            logger.exception("Unexpected failure building or sending notification for %s", request.get("id"))
            return

        if not 200 <= status < 300:
            logger.error("Pickup notification for %s rejected with HTTP %s", request.get("id"), status)
        else:
            logger.info("Pickup notification sent for %s", request.get("id"))
