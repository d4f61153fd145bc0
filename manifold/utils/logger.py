"""Logging helpers. The library never configures handlers on import."""

import json
import logging
import sys


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record):
        log_entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Engine-specific context passed through `extra=`
        for key in ("game_id", "rule", "template_id"):
            if hasattr(record, key):
                log_entry[key] = getattr(record, key)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


def setup_logging(log_level: str = "INFO", json_format: bool = False) -> None:
    """Install a console handler on the package logger."""
    package_logger = logging.getLogger("manifold")
    package_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    package_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        ))
    package_logger.addHandler(handler)
    package_logger.debug("Logging system initialized")


def get_logger(name: str) -> logging.Logger:
    """Get logger instance for module"""
    return logging.getLogger(name)


logging.getLogger("manifold").addHandler(logging.NullHandler())
