"""Structured JSON event logging for abidesk actions."""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

LOGGER_NAME = "abidesk"
LOG_FILE_ENV = "ABIDESK_LOG_FILE"

logger = logging.getLogger(LOGGER_NAME)


def configure_logging(path: Optional[Path] = None, level: int = logging.INFO) -> logging.Logger:
    """Attach console and optional rotating file handlers to the package logger."""

    if logger.handlers:
        return logger
    formatter = logging.Formatter("%(message)s")

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    target = path or (Path(os.environ[LOG_FILE_ENV]).expanduser() if os.getenv(LOG_FILE_ENV) else None)
    if target is not None:
        target.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(target, maxBytes=1_000_000, backupCount=5, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.setLevel(level)
    return logger


def log_event(action: str, *, ok: bool = True, **payload: Any) -> Dict[str, Any]:
    """Emit one JSON line describing ``action`` and return the logged entry."""

    entry: Dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).replace(microsecond=0).isoformat(),
        "action": action,
        "status": "success" if ok else "failure",
        **payload,
    }
    category = action.split(".", 1)[0].upper()
    line = f"{entry['timestamp']} | [{category}] {json.dumps(entry, sort_keys=True, default=str)}"
    logger.log(logging.INFO if ok else logging.WARNING, line)
    return entry


__all__ = ["configure_logging", "log_event", "logger"]
