"""Utility modules for skillhook."""

from .logging import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
