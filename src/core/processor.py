"""Core message processing pipeline.

This module is integration-agnostic. It only relies on ports for replies and
state, enabling other transports or storage backends without changes here.
"""

from __future__ import annotations

import logging
from typing import Optional

from core.detector import MismatchDetector
from core.layout import LayoutMap
from core.models import InboundEvent, Reply
from core.ports import ReplyPort, StatePort, TransportError

LOGGER = logging.getLogger(__name__)

# Placeholders used in the per-event record when a field is absent.
MISSING_CHAT_ID = -1
MISSING_TEXT = "NONE"


class MessageProcessor:
    """Scores one event and dispatches the correction when it is confident."""

    def __init__(
        self,
        detector: MismatchDetector,
        layout: LayoutMap,
        dispatcher: ReplyPort,
        threshold: float,
        ledger: Optional[StatePort] = None,
    ) -> None:
        self._detector = detector
        self._layout = layout
        self._dispatcher = dispatcher
        self._threshold = threshold
        self._ledger = ledger

    async def handle(self, event: InboundEvent) -> Optional[Reply]:
        """Process one event; return the reply that was sent, if any."""

        LOGGER.info(
            "Update update_id=%s chat_id=%s text=%s",
            event.update_id,
            event.chat_id if event.chat_id is not None else MISSING_CHAT_ID,
            event.text if event.text is not None else MISSING_TEXT,
        )

        if not event.text:
            return None

        text = event.text.lower()
        score = self._detector.score(text)
        LOGGER.info("Score for update %s is %s", event.update_id, score.describe())
        if not score.exceeds(self._threshold):
            return None

        # Eligibility only gates the reply; the cursor still moves past the event.
        if event.chat_id is None or event.message_id is None:
            return None

        if self._already_replied(event):
            LOGGER.info("Dedup skip for update %s (already replied)", event.update_id)
            return None

        reply = Reply(
            chat_id=event.chat_id,
            reply_to_message_id=event.message_id,
            text=self._layout.remap(text),
        )
        try:
            await self._dispatcher.send_reply(reply.chat_id, reply.reply_to_message_id, reply.text)
        except TransportError as exc:
            LOGGER.warning("Reply to update %s failed: %s", event.update_id, exc)
            return None

        if self._ledger is not None:
            try:
                self._ledger.mark_replied(event.chat_id, event.message_id, event.update_id)
            except Exception:
                LOGGER.exception("Failed to record reply for update %s", event.update_id)
        LOGGER.info("Correction sent for update %s", event.update_id)
        return reply

    def _already_replied(self, event: InboundEvent) -> bool:
        if self._ledger is None:
            return False
        try:
            return self._ledger.is_replied(event.chat_id, event.message_id)
        except Exception:
            # An unreadable ledger must not suppress the correction.
            LOGGER.exception("Failed to check reply ledger for update %s", event.update_id)
            return False
