"""Wrong-layout detection (core domain).

Scoring rules:
- Text containing any native character is exempt and never corrected.
- Otherwise every whitespace-separated token is remapped, stripped of
  punctuation and looked up in the vocabulary.
- The score is the share of tokens that matched; no tokens means 0.
"""

from __future__ import annotations

from core.config import DetectorConfig
from core.layout import LayoutMap
from core.models import Exempt, MismatchScore, Ratio
from core.vocabulary import Vocabulary, normalize_token


class MismatchDetector:
    """Scores how likely a string was typed with the wrong layout active."""

    def __init__(
        self,
        vocabulary: Vocabulary,
        layout: LayoutMap,
        config: DetectorConfig,
    ) -> None:
        self._vocabulary = vocabulary
        self._layout = layout
        self._native_chars = frozenset(config.native_chars)
        self._punctuation = config.punctuation

    def has_native_chars(self, text: str) -> bool:
        return any(ch in self._native_chars for ch in text)

    def score(self, text: str) -> MismatchScore:
        """Return Exempt or the matched-token Ratio for text."""

        if self.has_native_chars(text):
            return Exempt()

        matched = 0
        total = 0
        for token in text.split():
            total += 1
            if self._vocabulary.is_known(normalize_token(token, self._layout, self._punctuation)):
                matched += 1
        return Ratio(matched=matched, total=total)
