"""
Core utilities and configuration for BookTalks Buddy.

This package provides logging configuration, monitoring, the application
error taxonomy, form validation and the database layer.
"""

from booktalks_buddy.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
