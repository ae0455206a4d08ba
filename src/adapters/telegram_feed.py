"""Telegram update feed adapter (getUpdates long polling)."""

from __future__ import annotations

from typing import List

from adapters.telegram_bot_client import BotApiError, TelegramBotClient
from adapters.telegram_mapper import build_events
from core.models import InboundEvent
from core.ports import FeedError


class TelegramUpdateFeed:
    """FeedPort implementation backed by Bot API getUpdates."""

    def __init__(self, client: TelegramBotClient, long_poll_timeout: int = 0) -> None:
        self._client = client
        self._long_poll_timeout = long_poll_timeout

    async def fetch(self, after: int) -> List[InboundEvent]:
        """Return updates newer than after.

        getUpdates treats offset as the first id to return and confirms every
        update below it, so offset is always after + 1.
        """

        payload = {"offset": after + 1, "timeout": self._long_poll_timeout}
        try:
            result = self._client.call("getUpdates", payload, timeout=self._long_poll_timeout)
        except BotApiError as exc:
            raise FeedError(str(exc)) from exc
        return build_events(result)
