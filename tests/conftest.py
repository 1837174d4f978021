"""Pytest configuration and shared fixtures."""

import json

import httpx
import pytest


@pytest.fixture
def message_activity():
    """Inbound Teams message activity."""
    return {
        "type": "message",
        "id": "1700000000001",
        "text": "hello bot",
        "channelId": "msteams",
        "serviceUrl": "https://smba.trafficmanager.net/emea/",
        "from": {"id": "29:user-1", "name": "Ada"},
        "recipient": {"id": "28:bot-1", "name": "teamsflow"},
        "conversation": {"id": "a:conv-1"},
    }


@pytest.fixture
def members_added_activity():
    """conversationUpdate with the bot and one user joining."""
    return {
        "type": "conversationUpdate",
        "id": "1700000000002",
        "channelId": "msteams",
        "serviceUrl": "https://smba.trafficmanager.net/emea/",
        "from": {"id": "29:user-1"},
        "recipient": {"id": "28:bot-1"},
        "conversation": {"id": "a:conv-1"},
        "membersAdded": [{"id": "28:bot-1"}, {"id": "29:user-2"}],
    }


class RecordingTransport:
    """httpx.MockTransport handler that records requests and replays canned responses."""

    def __init__(self, responses=None):
        self.requests: list[httpx.Request] = []
        self._responses = list(responses or [])

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._responses:
            status, body = self._responses.pop(0)
        else:
            status, body = 200, {}
        if isinstance(body, (dict, list)):
            return httpx.Response(status, json=body)
        return httpx.Response(status, text=body)

    def json_bodies(self) -> list:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def recording_transport():
    return RecordingTransport
