"""Project-wide logging setup.

Design goals:
- Write logs to a UTF-8 rotating file so the interactive console stays readable.
- Console logging is off unless enabled (the rich view owns the terminal).
- Be idempotent: calling setup_logging() multiple times won't duplicate handlers.

Usage:
    from logging_config import setup_logging
    setup_logging()

Environment overrides:
    DOMINO_LOG_LEVEL=DEBUG|INFO|WARNING|ERROR
    DOMINO_LOG_FILE=path/to/file.log
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

_FILE_HANDLER_NAME = "domino_file"
_CONSOLE_HANDLER_NAME = "domino_console"
DEFAULT_LOG_PATH = Path("logs") / "domino.log"


def _parse_level(level: str | int) -> int:
    if isinstance(level, int):
        return level

    level_str = (level or "").strip().upper()
    if not level_str:
        return logging.INFO

    return logging._nameToLevel.get(level_str, logging.INFO)


def _resolve_log_path(log_file: str | None) -> Path:
    if not log_file:
        return DEFAULT_LOG_PATH
    log_path = Path(log_file)
    if not log_path.is_absolute():
        log_path = Path.cwd() / log_path
    return log_path


def setup_logging(
    *,
    level: str | int = "INFO",
    log_file: str | None = None,
    enable_file: bool = True,
    enable_console: bool = False,
    console_level: str | int = "WARNING",
    max_bytes: int = 2 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """Configure the root logger.

    Returns the root logger.
    """
    env_level = os.environ.get("DOMINO_LOG_LEVEL")
    if env_level:
        level = env_level

    env_log_file = os.environ.get("DOMINO_LOG_FILE")
    if env_log_file:
        log_file = env_log_file

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)  # let handlers filter

    # Format: timestamp level logger:line | message
    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)-8s %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    existing_by_name = {getattr(h, "name", ""): h for h in root.handlers}
    log_path = _resolve_log_path(log_file)

    if enable_file:
        file_handler = existing_by_name.get(_FILE_HANDLER_NAME)
        if file_handler is None:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                str(log_path),
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            file_handler.name = _FILE_HANDLER_NAME
            root.addHandler(file_handler)

        file_handler.setFormatter(fmt)
        file_handler.setLevel(_parse_level(level))

    if enable_console:
        console_handler = existing_by_name.get(_CONSOLE_HANDLER_NAME)
        if console_handler is None:
            console_handler = logging.StreamHandler()
            console_handler.name = _CONSOLE_HANDLER_NAME
            root.addHandler(console_handler)

        console_handler.setFormatter(fmt)
        console_handler.setLevel(_parse_level(console_level))

    # websockets logs every frame at DEBUG
    logging.getLogger("websockets").setLevel(logging.INFO)

    logging.getLogger(__name__).info(
        "Logging initialized | level=%s file=%s console=%s",
        level,
        str(log_path) if enable_file else "-",
        enable_console,
    )

    return root
