"""Sequential update polling protocol (core domain).

Each tick follows a strict order:
1) Fetch every event newer than the cursor (one request in flight)
2) Process the batch in ascending update_id order
3) Advance the cursor to the highest update_id of the batch
4) Persist the cursor when a state store is configured

A failed fetch leaves the cursor untouched so the next tick asks for the same
events again. Advancing only after the whole batch means a crash mid-batch
re-delivers that batch instead of losing it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from core.config import PollingConfig
from core.models import InboundEvent, PollerState, Reply, TickReport
from core.ports import FeedError, FeedPort, StatePort
from core.processor import MessageProcessor

LOGGER = logging.getLogger(__name__)


def initial_state(config: PollingConfig, store: Optional[StatePort] = None) -> PollerState:
    """Build the starting state, resuming from the store when it has a cursor."""

    cursor = config.initial_offset
    if store is not None:
        saved = store.get_cursor()
        if saved is not None:
            cursor = max(cursor, saved)
    return PollerState(cursor=cursor)


class UpdatePoller:
    """Drives the fetch -> process -> sleep loop over the update feed."""

    def __init__(
        self,
        feed: FeedPort,
        processor: MessageProcessor,
        config: PollingConfig,
        store: Optional[StatePort] = None,
    ) -> None:
        self._feed = feed
        self._processor = processor
        self._config = config
        self._store = store

    async def tick(self, state: PollerState) -> TickReport:
        """Run one fetch/process cycle against state."""

        state.ticks += 1
        cursor_before = state.cursor
        try:
            events = await self._feed.fetch(state.cursor)
        except FeedError as exc:
            state.last_error = str(exc)
            LOGGER.warning("Processing updates failed: %s", exc)
            return TickReport(cursor_before=cursor_before, cursor_after=state.cursor, error=str(exc))

        state.last_error = None
        if not events:
            return TickReport(cursor_before=cursor_before, cursor_after=state.cursor)

        ordered: List[InboundEvent] = sorted(events, key=lambda event: event.update_id)
        replies: List[Reply] = []
        for event in ordered:
            try:
                reply = await self._processor.handle(event)
            except Exception:
                LOGGER.exception("Error while processing update %s", event.update_id)
                continue
            if reply is not None:
                replies.append(reply)

        state.cursor = max(state.cursor, ordered[-1].update_id)
        if self._store is not None and state.cursor != cursor_before:
            try:
                self._store.set_cursor(state.cursor)
            except Exception:
                # Next successful save overwrites the stale row.
                LOGGER.exception("Failed to persist cursor %s", state.cursor)

        return TickReport(
            cursor_before=cursor_before,
            cursor_after=state.cursor,
            fetched=len(ordered),
            dispatched=len(replies),
            replies=tuple(replies),
        )

    async def run(self, state: PollerState, stop: asyncio.Event) -> None:
        """Tick until stop is set, sleeping between ticks."""

        LOGGER.info("Polling for updates after %s", state.cursor)
        while not stop.is_set():
            report = await self.tick(state)
            if report.fetched:
                LOGGER.debug(
                    "Tick %s: fetched=%s dispatched=%s cursor=%s",
                    state.ticks,
                    report.fetched,
                    report.dispatched,
                    report.cursor_after,
                )
            try:
                await asyncio.wait_for(stop.wait(), timeout=self._config.interval_seconds)
            except asyncio.TimeoutError:
                continue
        LOGGER.info("Polling stopped at cursor %s", state.cursor)
