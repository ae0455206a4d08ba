"""Telegram Bot API client factory for layoutfix.

The token is read once at startup, either from a token file or from the
BOT_TOKEN environment variable, so secrets stay out of the repo.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from dotenv import load_dotenv

from adapters.telegram_bot_client import TelegramBotClient


def read_token(token_path: Optional[str] = None) -> str:
    """Return the bot token from token_path, falling back to BOT_TOKEN."""

    if token_path:
        try:
            with open(token_path, "r", encoding="utf-8") as handle:
                token = handle.read().strip()
        except OSError as exc:
            raise RuntimeError(f"Cannot read token file {token_path}: {exc}") from exc
        if not token:
            raise RuntimeError(f"Token file {token_path} is empty")
        return token

    load_dotenv()
    token = (os.getenv("BOT_TOKEN") or "").strip()
    # Fail fast on missing credentials instead of polling with a bad URL.
    if not token:
        raise RuntimeError("Missing bot token: pass --token or set BOT_TOKEN")
    return token


def build_client(token: str, request_timeout: float = 10) -> TelegramBotClient:
    """Create a Bot API client for token."""

    logging.getLogger(__name__).info("Initializing Telegram Bot API client")
    return TelegramBotClient(token, request_timeout=request_timeout)
