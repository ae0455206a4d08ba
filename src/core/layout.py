"""Keyboard layout remapping (core domain)."""

from __future__ import annotations

from typing import Dict

from core.config import LayoutConfig


class LayoutMap:
    """Character substitution table between two keyboard layouts.

    The table is built from two rows of keys read in the same physical order,
    so the character at position i of the source row is what the key produces
    on the source layout and the character at position i of the target row is
    what the same key produces on the target layout. Characters outside the
    source row pass through unchanged, which keeps remap length-preserving.
    """

    def __init__(self, source_alphabet: str, target_alphabet: str) -> None:
        if len(source_alphabet) != len(target_alphabet):
            raise ValueError(
                "Layout alphabets differ in length: "
                f"{len(source_alphabet)} != {len(target_alphabet)}"
            )
        if len(set(source_alphabet)) != len(source_alphabet):
            raise ValueError("Source layout alphabet repeats a character")
        if len(set(target_alphabet)) != len(target_alphabet):
            raise ValueError("Target layout alphabet repeats a character")

        self._source = source_alphabet
        self._target = target_alphabet
        self._table: Dict[int, int] = str.maketrans(source_alphabet, target_alphabet)

    @classmethod
    def from_config(cls, config: LayoutConfig) -> "LayoutMap":
        return cls(config.source_alphabet, config.target_alphabet)

    def remap(self, text: str) -> str:
        """Return text as it would read had the target layout been active."""

        return text.translate(self._table)

    def inverse(self) -> "LayoutMap":
        """Return the map for the opposite direction (target -> source)."""

        return LayoutMap(self._target, self._source)
