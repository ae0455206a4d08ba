"""Application entry point for the layoutfix bot."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import signal
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from dotenv import load_dotenv

import settings
from adapters.sqlite_storage import SQLiteStorage
from adapters.telegram_feed import TelegramUpdateFeed
from adapters.telegram_reply import TelegramReplyDispatcher
from client import build_client, read_token
from core.config import DetectorConfig, LayoutConfig, PollingConfig, StateConfig
from core.detector import MismatchDetector
from core.layout import LayoutMap
from core.poller import UpdatePoller, initial_state
from core.processor import MessageProcessor
from core.vocabulary import load_vocabulary

NAME = "LAYOUTFIX"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict, extra: Optional[list[str]] = None) -> list[str]:
    values = [value for value in (extra or []) if value]
    redact_cfg = config.get("redact", {}) if config else {}
    if redact_cfg.get("enabled", False):
        for name in redact_cfg.get("patterns", []):
            value = os.getenv(name)
            if value:
                values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging(secrets: Optional[list[str]] = None) -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    load_dotenv()
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    # Bot API URLs embed the token, so it is redacted even without config.
    formatter = _RedactingFormatter(_collect_redaction_values(config, secrets), fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/layoutfix.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers, force=True)


def _layout_config() -> LayoutConfig:
    return LayoutConfig(source_alphabet=settings.LAYOUT_SOURCE, target_alphabet=settings.LAYOUT_TARGET)


def _detector_config() -> DetectorConfig:
    return DetectorConfig(
        native_chars=settings.NATIVE_CHARS,
        punctuation=settings.PUNCTUATION,
        threshold=settings.THRESHOLD,
    )


def _build_detector(words_path: str) -> tuple[LayoutMap, MismatchDetector]:
    # Any failure here is a startup error and aborts before polling begins.
    layout = LayoutMap.from_config(_layout_config())
    vocabulary = load_vocabulary(words_path)
    return layout, MismatchDetector(vocabulary, layout, _detector_config())


def _install_stop_handlers(stop: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except (NotImplementedError, RuntimeError):
            # Windows event loops do not support signal handlers.
            pass


async def _serve(poller: UpdatePoller, storage: Optional[SQLiteStorage], polling: PollingConfig) -> None:
    stop = asyncio.Event()
    _install_stop_handlers(stop)
    state = initial_state(polling, storage)
    await poller.run(state, stop)


def _run(words_path: Optional[str], token_path: Optional[str]) -> None:
    _print_banner()
    words_path = words_path or settings.WORDS_PATH
    if not words_path:
        raise RuntimeError("Word list is required: pass --words or set inputs.words_path")

    token = read_token(token_path or settings.TOKEN_PATH)
    _configure_logging([token])
    logger = logging.getLogger(__name__)

    logger.info("Starting layoutfix")

    layout, detector = _build_detector(words_path)
    logger.info("Words array built")

    state_config = StateConfig(
        enabled=settings.STATE_ENABLED,
        dedup_replies=settings.DEDUP_REPLIES,
        ttl_days=settings.DEDUP_TTL_DAYS,
    )
    storage: Optional[SQLiteStorage] = None
    if state_config.enabled:
        storage = SQLiteStorage(settings.DB_PATH)
        storage.init_db()
        if state_config.dedup_replies:
            removed = storage.cleanup_replies(state_config.ttl_days)
            logger.info("Reply ledger cleanup removed %s rows", removed)

    polling = PollingConfig(
        interval_seconds=settings.POLL_INTERVAL_SECONDS,
        initial_offset=settings.INITIAL_OFFSET,
        long_poll_timeout=settings.LONG_POLL_TIMEOUT,
    )
    client = build_client(token, request_timeout=settings.REQUEST_TIMEOUT)

    processor = MessageProcessor(
        detector=detector,
        layout=layout,
        dispatcher=TelegramReplyDispatcher(client),
        threshold=settings.THRESHOLD,
        ledger=storage if state_config.dedup_replies else None,
    )
    poller = UpdatePoller(
        feed=TelegramUpdateFeed(client, long_poll_timeout=polling.long_poll_timeout),
        processor=processor,
        config=polling,
        store=storage,
    )

    asyncio.run(_serve(poller, storage, polling))


def _check(words_path: Optional[str], text: str) -> None:
    words_path = words_path or settings.WORDS_PATH
    if not words_path:
        raise RuntimeError("Word list is required: pass --words or set inputs.words_path")

    layout, detector = _build_detector(words_path)
    lowered = text.lower()
    score = detector.score(lowered)
    print(f"score: {score.describe()}")
    if score.exceeds(settings.THRESHOLD):
        print(f"corrected: {layout.remap(lowered)}")
    else:
        print("corrected: (no correction)")


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="layoutfix")
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Start the bot")
    run_parser.add_argument("--words", help="Newline-delimited word list")
    run_parser.add_argument("--token", help="File containing the bot token")

    check_parser = subparsers.add_parser("check", help="Score text offline and print the correction")
    check_parser.add_argument("--words", help="Newline-delimited word list")
    check_parser.add_argument("text", nargs="+", help="Text to score")

    args = parser.parse_args(argv)
    if args.command == "check":
        _check(args.words, " ".join(args.text))
        return
    _run(getattr(args, "words", None), getattr(args, "token", None))


if __name__ == "__main__":
    main()
