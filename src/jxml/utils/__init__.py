"""Shared utilities."""

from ._logging import create_logger, logger_for

__all__ = ["create_logger", "logger_for"]
