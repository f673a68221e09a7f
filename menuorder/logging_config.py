"""Logging configuration for the menu order service.

``setup_logging`` configures the root logger exactly once with a console
handler. Two formats are supported: ``text`` (timestamp, level, logger name
and message) and ``json`` (one JSON object per line).
"""

import json
import logging


class JsonFormatter(logging.Formatter):
    """Render each record as a single-line JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def setup_logging(level: str = "INFO", fmt: str = "text") -> None:
    """Configure the root logger.

    Args:
        level: Logging level name (case insensitive). Unknown names fall back to INFO.
        fmt: "text" or "json"
    """
    root = logging.getLogger()
    if root.handlers:
        # Already configured (tests, repeated app creation)
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler()
    if fmt.lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    root.addHandler(handler)
