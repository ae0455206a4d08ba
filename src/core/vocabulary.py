"""Vocabulary loading and membership checks (core domain)."""

from __future__ import annotations

import logging
from typing import Iterable

from core.layout import LayoutMap

LOGGER = logging.getLogger(__name__)


class VocabularyError(RuntimeError):
    """Raised when the word list cannot be read."""


def normalize_token(token: str, layout: LayoutMap, punctuation: str) -> str:
    """Remap a token, drop punctuation characters and lowercase it.

    Remapping runs first: several punctuation keys on the source layout are
    letters on the target layout (",", ".", ";" and friends), so stripping
    before remapping would throw real letters away.
    """

    remapped = layout.remap(token)
    stripped = "".join(ch for ch in remapped if ch not in punctuation)
    return stripped.lower()


class Vocabulary:
    """Immutable set of normalized words used for membership queries."""

    def __init__(self, words: Iterable[str]) -> None:
        self._words = frozenset(
            word.strip().lower() for word in words if word and word.strip()
        )

    def __len__(self) -> int:
        return len(self._words)

    def is_known(self, word: str) -> bool:
        """Exact membership test; the caller normalizes word beforehand."""

        return word in self._words


def load_vocabulary(path: str) -> Vocabulary:
    """Load a newline-delimited UTF-8 word list."""

    try:
        with open(path, "r", encoding="utf-8") as handle:
            vocabulary = Vocabulary(handle.read().split("\n"))
    except (OSError, UnicodeDecodeError) as exc:
        raise VocabularyError(f"Cannot read word list {path}: {exc}") from exc

    LOGGER.info("Loaded %s words from %s", len(vocabulary), path)
    return vocabulary
