from __future__ import annotations

import asyncio
import http.client
import io
import json
import urllib.error

import pytest

from adapters import telegram_bot_client
from adapters.telegram_bot_client import BotApiError, TelegramBotClient
from adapters.telegram_feed import TelegramUpdateFeed
from adapters.telegram_reply import TelegramReplyDispatcher
from core.config import PollingConfig
from core.models import PollerState
from core.poller import UpdatePoller
from core.ports import FeedError, MalformedUpdateError, TransportError

from fakes import FakeDispatcher, make_processor


class DummyResponse:
    def __init__(self, payload) -> None:
        self._body = json.dumps(payload).encode("utf-8")

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> "DummyResponse":
        return self

    def __exit__(self, *exc) -> None:
        return None


class RecordingUrlopen:
    def __init__(self, payload) -> None:
        self._payload = payload
        self.requests: list[tuple[str, dict, float]] = []

    def __call__(self, request, timeout):
        self.requests.append((request.full_url, json.loads(request.data.decode("utf-8")), timeout))
        if isinstance(self._payload, Exception):
            raise self._payload
        return DummyResponse(self._payload)


def _install(monkeypatch, payload) -> RecordingUrlopen:
    fake = RecordingUrlopen(payload)
    monkeypatch.setattr(telegram_bot_client.urllib.request, "urlopen", fake)
    return fake


def test_feed_requests_updates_after_cursor(monkeypatch) -> None:
    fake = _install(
        monkeypatch,
        {"ok": True, "result": [{"update_id": 8, "message": {"message_id": 1, "chat": {"id": 2}, "text": "x"}}]},
    )
    feed = TelegramUpdateFeed(TelegramBotClient("123:abc"), long_poll_timeout=5)

    events = asyncio.run(feed.fetch(7))

    url, payload, timeout = fake.requests[0]
    assert url == "https://api.telegram.org/bot123:abc/getUpdates"
    assert payload == {"offset": 8, "timeout": 5}
    assert timeout == 15
    assert [event.update_id for event in events] == [8]


def test_feed_not_ok_raises_feed_error(monkeypatch) -> None:
    _install(monkeypatch, {"ok": False, "description": "Conflict"})
    feed = TelegramUpdateFeed(TelegramBotClient("t"))

    with pytest.raises(FeedError, match="Conflict"):
        asyncio.run(feed.fetch(0))


def test_feed_missing_ok_raises_feed_error(monkeypatch) -> None:
    _install(monkeypatch, {"result": []})
    feed = TelegramUpdateFeed(TelegramBotClient("t"))

    with pytest.raises(FeedError):
        asyncio.run(feed.fetch(0))


def test_feed_malformed_result(monkeypatch) -> None:
    _install(monkeypatch, {"ok": True, "result": [{"message": {}}]})
    feed = TelegramUpdateFeed(TelegramBotClient("t"))

    with pytest.raises(MalformedUpdateError):
        asyncio.run(feed.fetch(0))


def test_transport_error_becomes_feed_error(monkeypatch) -> None:
    _install(monkeypatch, urllib.error.URLError("connection refused"))
    feed = TelegramUpdateFeed(TelegramBotClient("t"))

    with pytest.raises(FeedError, match="connection refused"):
        asyncio.run(feed.fetch(0))


def test_reply_sends_reply_to_message(monkeypatch) -> None:
    fake = _install(monkeypatch, {"ok": True, "result": {"message_id": 99}})
    dispatcher = TelegramReplyDispatcher(TelegramBotClient("t"))

    asyncio.run(dispatcher.send_reply(10, 42, "привет"))

    url, payload, _ = fake.requests[0]
    assert url.endswith("/sendMessage")
    assert payload == {"chat_id": 10, "reply_to_message_id": 42, "text": "привет"}


def test_reply_http_error_becomes_transport_error(monkeypatch) -> None:
    body = io.BytesIO(json.dumps({"ok": False, "description": "Forbidden: bot was kicked"}).encode("utf-8"))
    error = urllib.error.HTTPError("https://api.telegram.org", 403, "Forbidden", {}, body)
    _install(monkeypatch, error)
    dispatcher = TelegramReplyDispatcher(TelegramBotClient("t"))

    with pytest.raises(TransportError, match="bot was kicked"):
        asyncio.run(dispatcher.send_reply(10, 42, "привет"))


def test_invalid_json_raises_bot_api_error(monkeypatch) -> None:
    class BrokenResponse(DummyResponse):
        def read(self) -> bytes:
            return b"<html>"

    monkeypatch.setattr(
        telegram_bot_client.urllib.request, "urlopen", lambda request, timeout: BrokenResponse(None)
    )

    with pytest.raises(BotApiError):
        TelegramBotClient("t").call("getMe", {})


def _tick_against(feed: TelegramUpdateFeed, cursor: int):
    poller = UpdatePoller(
        feed=feed,
        processor=make_processor(FakeDispatcher()),
        config=PollingConfig(interval_seconds=0),
    )
    state = PollerState(cursor=cursor)
    return state, asyncio.run(poller.tick(state))


def test_incomplete_read_is_reported_by_tick(monkeypatch) -> None:
    _install(monkeypatch, http.client.IncompleteRead(b"partial"))

    state, report = _tick_against(TelegramUpdateFeed(TelegramBotClient("t")), cursor=5)

    assert report.error is not None
    assert state.cursor == 5
    assert state.last_error == report.error


def test_undecodable_body_is_reported_by_tick(monkeypatch) -> None:
    class GarbageResponse(DummyResponse):
        def read(self) -> bytes:
            return b"\xff\xfe garbage"

    monkeypatch.setattr(
        telegram_bot_client.urllib.request, "urlopen", lambda request, timeout: GarbageResponse(None)
    )

    state, report = _tick_against(TelegramUpdateFeed(TelegramBotClient("t")), cursor=5)

    assert report.error is not None
    assert "invalid JSON" in report.error
    assert state.cursor == 5
