"""Telegram reply adapter.

Sends the corrected text as a reply to the message that triggered it.
"""

from __future__ import annotations

from adapters.telegram_bot_client import BotApiError, TelegramBotClient
from core.ports import TransportError


class TelegramReplyDispatcher:
    """ReplyPort implementation backed by Bot API sendMessage."""

    def __init__(self, client: TelegramBotClient) -> None:
        self._client = client

    async def send_reply(self, chat_id: int, reply_to_message_id: int, text: str) -> None:
        """Reply to reply_to_message_id in chat_id with text."""

        payload = {
            "chat_id": chat_id,
            "reply_to_message_id": reply_to_message_id,
            "text": text,
        }
        try:
            self._client.call("sendMessage", payload)
        except BotApiError as exc:
            raise TransportError(str(exc)) from exc
