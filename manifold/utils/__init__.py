"""Shared utilities."""

from .logger import get_logger, setup_logging, JSONFormatter

__all__ = ["get_logger", "setup_logging", "JSONFormatter"]
