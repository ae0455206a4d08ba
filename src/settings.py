"""Static configuration for layoutfix.

All user-editable settings (layouts, detector, polling, state, logging) live
in a single JSON file for quick edits without touching Python.
"""

import json
import os

from core.config import (
    DEFAULT_NATIVE_CHARS,
    DEFAULT_PUNCTUATION,
    DEFAULT_SOURCE_ALPHABET,
    DEFAULT_TARGET_ALPHABET,
)

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

CONFIG_PATH = os.environ.get("LAYOUTFIX_CONFIG") or os.path.join(PROJECT_ROOT, "config.json")


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _project_path(path):
    """Resolve relative paths against the project root."""

    if not path or os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Keyboard rows for the layout map. Both rows must have the same length.
_layout = _CONFIG.get("layout", {})
LAYOUT_SOURCE = _layout.get("source_alphabet", DEFAULT_SOURCE_ALPHABET)
LAYOUT_TARGET = _layout.get("target_alphabet", DEFAULT_TARGET_ALPHABET)

# Detector controls:
# - NATIVE_CHARS: any of these in a message exempts it from correction
# - PUNCTUATION: characters stripped from tokens after remapping
# - THRESHOLD: matched-token share that must be exceeded to reply
_detector = _CONFIG.get("detector", {})
NATIVE_CHARS = _detector.get("native_chars", DEFAULT_NATIVE_CHARS)
PUNCTUATION = _detector.get("punctuation", DEFAULT_PUNCTUATION)
THRESHOLD = float(_detector.get("threshold", 0.4))

# Polling loop settings.
_polling = _CONFIG.get("polling", {})
POLL_INTERVAL_SECONDS = float(_polling.get("interval_seconds", 1.0))
INITIAL_OFFSET = int(_polling.get("initial_offset", 0))
LONG_POLL_TIMEOUT = int(_polling.get("long_poll_timeout", 0))
REQUEST_TIMEOUT = float(_polling.get("request_timeout", 10))

# Startup inputs; CLI options take precedence.
_inputs = _CONFIG.get("inputs", {})
WORDS_PATH = _project_path(_inputs.get("words_path"))
TOKEN_PATH = _project_path(_inputs.get("token_path"))

# Optional persistence of the cursor and reply ledger.
# - STATE_ENABLED: keep the cursor in SQLite across restarts
# - DEDUP_REPLIES: never reply twice to the same message
# - DEDUP_TTL_DAYS: cleanup horizon for the reply ledger
_state = _CONFIG.get("state", {})
STATE_ENABLED = bool(_state.get("enabled", False))
DB_PATH = _project_path(_state.get("db_path", "layoutfix.db"))
DEDUP_REPLIES = bool(_state.get("dedup_replies", False))
DEDUP_TTL_DAYS = int(_state.get("ttl_days", 7))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
