"""Webhook transport: request validation, truncation, ManyChat push, health."""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from studybot.config import MANYCHAT_TIMEOUT_SECONDS, MAX_REPLY_LENGTH
from studybot.dispatch.commands import Command, CommandType
from studybot.dispatch.dispatcher import DispatchResult
from studybot.main import app
from studybot.messages import MESSAGES
from studybot.routers import webhook
from studybot.services.manychat import ManyChatClient, build_payload
from studybot.state.session import MenuTag, SessionPatch


@pytest.fixture
def client(services):
    app.state.services = services
    with TestClient(app) as test_client:
        yield test_client
    for name in ("services", "dispatcher", "manychat"):
        if hasattr(app.state, name):
            delattr(app.state, name)


class StubDispatcher:
    def __init__(self, reply="ok", error=None):
        self.reply = reply
        self.error = error
        self.received = []

    async def handle_message(self, subscriber_id, text):
        self.received.append((subscriber_id, text))
        if self.error:
            raise self.error
        return DispatchResult(
            reply=self.reply,
            patch=SessionPatch(),
            command=Command(CommandType.HELP),
            menu=MenuTag.MAIN,
        )


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestWebhook:

    def test_first_contact_asks_for_name(self, client):
        response = client.post("/api/webhook", json={"subscriber_id": "mc-1", "message": "hi"})
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert body["message"] == MESSAGES["registration"]["ask_name"]
        assert body["command_type"] == "welcome_menu"
        assert body["menu"] == "registration_needs_name"
        assert body["elapsed_ms"] >= 0

    def test_numeric_psid_and_extra_fields(self, client):
        response = client.post("/api/webhook", json={"psid": 12345, "message": "hi", "first_name": "T"})
        assert response.status_code == 200
        assert response.json()["status"] == "success"

    def test_numeric_message_reaches_the_parser(self, client):
        stub = StubDispatcher(reply="ok")
        app.state.dispatcher = stub
        response = client.post("/api/webhook", json={"psid": 1, "message": 2})
        assert response.status_code == 200
        assert response.json()["status"] == "success"
        assert stub.received == [("1", "2")]

    @pytest.mark.parametrize("payload", [
        {"message": "hi"},
        {"subscriber_id": "mc-1"},
        {"subscriber_id": "  ", "message": "hi"},
    ])
    def test_missing_fields_are_rejected(self, client, payload):
        response = client.post("/api/webhook", json=payload)
        assert response.status_code == 400
        assert "error" in response.json()

    def test_long_reply_is_truncated(self, client):
        app.state.dispatcher = StubDispatcher(reply="x" * (MAX_REPLY_LENGTH + 50))
        body = client.post("/api/webhook", json={"subscriber_id": "mc-1", "message": "help"}).json()
        assert len(body["message"]) == MAX_REPLY_LENGTH
        assert body["message"].endswith("...")

    def test_unexpected_error_returns_generic_200(self, client):
        app.state.dispatcher = StubDispatcher(error=RuntimeError("boom"))
        response = client.post("/api/webhook", json={"subscriber_id": "mc-1", "message": "help"})
        assert response.status_code == 200
        assert response.json() == {"status": "error", "message": MESSAGES["errors"]["generic"]}


class TestManyChatPush:

    def test_reply_is_pushed(self, client, monkeypatch):
        sent = []

        def handler(request):
            sent.append((request.url.path, json.loads(request.content)))
            return httpx.Response(200, json={"status": "success"})

        monkeypatch.setattr(webhook, "MANYCHAT_SEND_ENABLED", True)
        app.state.manychat = ManyChatClient(token="t", transport=httpx.MockTransport(handler))
        app.state.dispatcher = StubDispatcher(reply="hello")

        response = client.post("/api/webhook", json={"subscriber_id": "mc-1", "message": "help"})
        assert response.json()["status"] == "success"
        path, payload = sent[0]
        assert path.endswith("/sending/sendContent")
        assert payload["subscriber_id"] == "mc-1"
        assert payload["data"]["content"]["messages"][0]["text"] == "hello"

    def test_push_uses_its_own_timeout(self, client, monkeypatch):
        timeouts = []

        def handler(request):
            timeouts.append(request.extensions["timeout"])
            return httpx.Response(200, json={"status": "success"})

        monkeypatch.setattr(webhook, "MANYCHAT_SEND_ENABLED", True)
        app.state.manychat = ManyChatClient(token="t", transport=httpx.MockTransport(handler))
        app.state.dispatcher = StubDispatcher(reply="hello")

        client.post("/api/webhook", json={"subscriber_id": "mc-1", "message": "help"})
        assert app.state.manychat.timeout == MANYCHAT_TIMEOUT_SECONDS
        assert timeouts[0]["read"] == MANYCHAT_TIMEOUT_SECONDS

    def test_push_failure_still_replies(self, client, monkeypatch):
        monkeypatch.setattr(webhook, "MANYCHAT_SEND_ENABLED", True)
        app.state.manychat = ManyChatClient(
            token="t", transport=httpx.MockTransport(lambda request: httpx.Response(503)),
        )
        app.state.dispatcher = StubDispatcher(reply="hello")

        body = client.post("/api/webhook", json={"subscriber_id": "mc-1", "message": "help"}).json()
        assert body["status"] == "success"
        assert body["message"] == "hello"


class TestHelpers:

    def test_truncate_keeps_short_text(self):
        assert webhook.truncate_reply("short", limit=10) == "short"

    def test_truncate_adds_ellipsis(self):
        assert webhook.truncate_reply("abcdefghijklmno", limit=10) == "abcdefg..."

    def test_payload_shape(self):
        payload = build_payload("42", "hi", message_tag=None)
        assert payload == {
            "subscriber_id": "42",
            "data": {"version": "v2", "content": {"messages": [{"type": "text", "text": "hi"}]}},
        }
