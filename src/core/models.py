"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union


@dataclass(frozen=True)
class InboundEvent:
    """One received update, as seen by the core pipeline.

    Every attribute except update_id is optional because the feed may deliver
    updates without a message, or messages without text.
    """

    update_id: int
    chat_id: Optional[int] = None
    message_id: Optional[int] = None
    text: Optional[str] = None
    date: Optional[datetime] = None


@dataclass(frozen=True)
class Reply:
    """A correction handed to the reply dispatcher."""

    chat_id: int
    reply_to_message_id: int
    text: str


@dataclass(frozen=True)
class Exempt:
    """Score for text that already contains native characters."""

    reason: str = "native characters present"

    def exceeds(self, threshold: float) -> bool:
        return False

    def describe(self) -> str:
        return f"exempt ({self.reason})"


@dataclass(frozen=True)
class Ratio:
    """Fraction of tokens that matched the vocabulary after remapping."""

    matched: int
    total: int

    @property
    def value(self) -> float:
        if self.total == 0:
            return 0.0
        return self.matched / self.total

    def exceeds(self, threshold: float) -> bool:
        return self.value > threshold

    def describe(self) -> str:
        return f"{self.value:.3f} ({self.matched}/{self.total})"


MismatchScore = Union[Exempt, Ratio]


@dataclass
class PollerState:
    """State owned by the polling loop and passed into every tick.

    cursor is the highest update_id that has been fully processed.
    """

    cursor: int = 0
    ticks: int = 0
    last_error: Optional[str] = None


@dataclass(frozen=True)
class TickReport:
    """Outcome of a single polling tick."""

    cursor_before: int
    cursor_after: int
    fetched: int = 0
    dispatched: int = 0
    error: Optional[str] = None
    replies: tuple[Reply, ...] = field(default_factory=tuple)
