import json
from unittest.mock import MagicMock

from crowdhandler_sdk.diagnostics import DiagnosticChannel, DiagnosticEvent

BASE_URL = "https://api.test/v1"
API_KEY = "pk-test"
HEADERS = {"x-api-key": API_KEY, "Content-Type": "application/json"}


def make_response(status_code: int, json_data: object) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = json_data
    resp.text = json.dumps(json_data) if isinstance(json_data, (dict, list)) else str(json_data)
    return resp


def capture_events(channel: DiagnosticChannel) -> list[DiagnosticEvent]:
    events: list[DiagnosticEvent] = []
    channel.subscribe(events.append)
    return events
