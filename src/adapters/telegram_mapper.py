"""Telegram-to-core update mapping adapter.

This keeps Bot API payload details out of the core pipeline.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Optional

from core.models import InboundEvent
from core.ports import MalformedUpdateError


def _optional_int(value: Any) -> Optional[int]:
    # bool is an int subclass, but never a valid id.
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def _message_date(message: dict) -> Optional[datetime]:
    date = _optional_int(message.get("date"))
    if date is None:
        return None
    return datetime.fromtimestamp(date, tz=timezone.utc)


def build_event(update: Any) -> InboundEvent:
    """Build an InboundEvent from one Bot API Update object.

    Only update_id is mandatory; message, chat, message_id and text are all
    optional so service updates still move the cursor forward.
    """

    if not isinstance(update, dict):
        raise MalformedUpdateError(f"Update is not an object: {update!r}")
    update_id = _optional_int(update.get("update_id"))
    if update_id is None:
        raise MalformedUpdateError(f"Update without update_id: {update!r}")

    message = update.get("message")
    if not isinstance(message, dict):
        return InboundEvent(update_id=update_id)

    chat = message.get("chat")
    chat_id = _optional_int(chat.get("id")) if isinstance(chat, dict) else None
    text = message.get("text")

    return InboundEvent(
        update_id=update_id,
        chat_id=chat_id,
        message_id=_optional_int(message.get("message_id")),
        text=text if isinstance(text, str) else None,
        date=_message_date(message),
    )


def build_events(result: Any) -> List[InboundEvent]:
    """Map the getUpdates result array, rejecting anything that is not a list."""

    if not isinstance(result, list):
        raise MalformedUpdateError(f"getUpdates result is not a list: {type(result).__name__}")
    return [build_event(update) for update in result]
