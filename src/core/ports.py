"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for the update feed, reply delivery and
state storage so that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from core.models import InboundEvent


class FeedError(RuntimeError):
    """The feed could not deliver a batch (transport or protocol level)."""


class MalformedUpdateError(FeedError):
    """The feed answered, but the payload does not have the expected shape."""


class TransportError(RuntimeError):
    """A reply could not be delivered."""


class FeedPort(Protocol):
    """Ordered inbound event feed."""

    async def fetch(self, after: int) -> List[InboundEvent]:
        """Return all events with update_id greater than after, ascending."""
        ...


class ReplyPort(Protocol):
    """Reply delivery required by the core pipeline."""

    async def send_reply(self, chat_id: int, reply_to_message_id: int, text: str) -> None:
        ...


class StatePort(Protocol):
    """Optional persistence for the cursor and the reply ledger."""

    def get_cursor(self) -> Optional[int]:
        ...

    def set_cursor(self, cursor: int) -> None:
        ...

    def is_replied(self, chat_id: int, message_id: int) -> bool:
        ...

    def mark_replied(self, chat_id: int, message_id: int, update_id: int) -> None:
        ...
