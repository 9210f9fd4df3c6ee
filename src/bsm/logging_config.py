from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

# Loggers that also get a file of their own.
CHANNEL_LOGS = {
    "bsm.sales": "sales.log",
    "bsm.http": "http.log",
}


def split_event(message: str) -> tuple[str, dict[str, str]]:
    """``"sale_created sale_id=6 total=42.50"`` -> ``("sale_created", {"sale_id": "6", "total": "42.50"})``."""
    event_parts: list[str] = []
    fields: dict[str, str] = {}
    for token in message.split():
        key, sep, value = token.partition("=")
        if sep and key and key not in fields:
            fields[key] = value
        elif fields:
            # value with spaces, e.g. error=Could not reach API
            last = next(reversed(fields))
            fields[last] = f"{fields[last]} {token}"
        else:
            event_parts.append(token)
    return " ".join(event_parts), fields


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        event, fields = split_event(message)
        payload: dict[str, Any] = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "event": event,
            "message": message,
        }
        if fields:
            payload["fields"] = fields
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _handler(path: Path, level: int) -> RotatingFileHandler:
    fh = RotatingFileHandler(path, maxBytes=2_000_000, backupCount=5, encoding="utf-8")
    fh.setFormatter(JsonFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
    fh.setLevel(level)
    return fh


def setup_logging(logs_dir: Path, level: int = logging.INFO) -> None:
    """app.log and errors.log on the root logger plus one file per channel. Safe to call twice."""
    logs_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level)
    if root.handlers:
        return

    root.addHandler(_handler(logs_dir / "app.log", logging.INFO))
    root.addHandler(_handler(logs_dir / "errors.log", logging.ERROR))

    for name, filename in CHANNEL_LOGS.items():
        channel = logging.getLogger(name)
        channel.addHandler(_handler(logs_dir / filename, level))
        channel.setLevel(level)
