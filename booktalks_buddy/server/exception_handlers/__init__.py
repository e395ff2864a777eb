"""
Exception handlers for the BookTalks Buddy server.

Service errors (``AppError``) become JSON error bodies with their mapped
status code; anything else is logged with an error id and returned as 500.
"""

from .global_handler import setup_exception_handlers

__all__ = ["setup_exception_handlers"]
