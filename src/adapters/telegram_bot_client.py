"""Telegram Bot API transport.

Wraps the two Bot API methods the bot needs (getUpdates and sendMessage) and
turns transport and protocol failures into the core's error types.
"""

from __future__ import annotations

import http.client
import json
import logging
import urllib.error
import urllib.request
from typing import Any

LOGGER = logging.getLogger(__name__)

API_BASE = "https://api.telegram.org"


class BotApiError(RuntimeError):
    """The Bot API request failed or answered with ok=false."""


class TelegramBotClient:
    """Minimal JSON-over-HTTPS client for the Telegram Bot API."""

    def __init__(self, bot_token: str, request_timeout: float = 10, api_base: str = API_BASE) -> None:
        self._bot_token = bot_token
        self._request_timeout = request_timeout
        self._api_base = api_base.rstrip("/")

    def _endpoint(self, method: str) -> str:
        # The Bot API endpoint is deterministic and derived from the token.
        return f"{self._api_base}/bot{self._bot_token}/{method}"

    def call(self, method: str, payload: dict[str, Any], timeout: float = 0) -> Any:
        """POST payload to method and return the "result" field.

        timeout is added to the socket timeout so long polling requests are
        not cut short by the client.
        """

        data = json.dumps(payload).encode("utf-8")
        request = urllib.request.Request(self._endpoint(method), data=data, method="POST")
        request.add_header("Content-Type", "application/json")
        # We use a blocking HTTP call because the polling loop is strictly
        # sequential; the adapter boundary makes it easy to swap for an async
        # client later.
        try:
            with urllib.request.urlopen(request, timeout=self._request_timeout + timeout) as response:
                raw = response.read()
        except urllib.error.HTTPError as e:
            body = e.read().decode("utf-8", errors="replace")
            raise BotApiError(f"Bot API error {e.code} on {method}: {_describe(body)}") from e
        except (urllib.error.URLError, http.client.HTTPException, OSError) as e:
            raise BotApiError(f"Bot API request {method} failed: {e}") from e

        try:
            decoded = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            raise BotApiError(f"Bot API returned invalid JSON for {method}") from e

        if not isinstance(decoded, dict) or "ok" not in decoded:
            raise BotApiError(f"No ok field in response from Bot API ({method})")
        if decoded["ok"] is not True:
            raise BotApiError(f"Ok from Bot API is false ({method}): {decoded.get('description', 'no description')}")
        return decoded.get("result")


def _describe(body: str) -> str:
    """Extract the Bot API description from an error body when possible."""

    try:
        decoded = json.loads(body)
    except ValueError:
        return body
    if isinstance(decoded, dict) and decoded.get("description"):
        return str(decoded["description"])
    return body
