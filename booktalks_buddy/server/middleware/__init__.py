"""
Middleware modules for the BookTalks Buddy server.

Request timing and Logfire request logging.
"""

from .logfire_middleware import LogfireMiddleware

__all__ = ["LogfireMiddleware"]
