"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass
import string

# Classic QWERTY -> JCUKEN table: both rows must stay the same length.
DEFAULT_SOURCE_ALPHABET = "qwertyuiop[]asdfghjkl;'zxcvbnm,./?`&"
DEFAULT_TARGET_ALPHABET = "йцукенгшщзхъфывапролджэячсмитьбю.,ё?"

# Lowercase Cyrillic letters whose presence marks text as already native.
DEFAULT_NATIVE_CHARS = "йцукенгшщзхъфывапролджэячсмитьбю"

DEFAULT_PUNCTUATION = string.punctuation


@dataclass(frozen=True)
class LayoutConfig:
    """Pair of keyboard rows used to build the layout map."""

    source_alphabet: str = DEFAULT_SOURCE_ALPHABET
    target_alphabet: str = DEFAULT_TARGET_ALPHABET


@dataclass(frozen=True)
class DetectorConfig:
    """Mismatch detector settings.

    native_chars and the vocabulary are configured independently on purpose:
    one short-circuits on script presence, the other scores remapped tokens.
    """

    native_chars: str = DEFAULT_NATIVE_CHARS
    punctuation: str = DEFAULT_PUNCTUATION
    threshold: float = 0.4


@dataclass(frozen=True)
class PollingConfig:
    """Settings for the update polling loop."""

    interval_seconds: float = 1.0
    initial_offset: int = 0
    long_poll_timeout: int = 0


@dataclass(frozen=True)
class StateConfig:
    """Optional persistence of the cursor and the reply ledger."""

    enabled: bool = False
    dedup_replies: bool = False
    ttl_days: int = 7
