"""Shared utilities."""

from .logging import setup_logging, get_contextual_logger

__all__ = ["setup_logging", "get_contextual_logger"]
