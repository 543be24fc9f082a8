"""
Middleware for Launchpad API.
"""

from launchpad.api.middleware.cors import add_cors_middleware
from launchpad.api.middleware.logging import RequestLoggingMiddleware, get_client_ip

__all__ = [
    "add_cors_middleware",
    "RequestLoggingMiddleware",
    "get_client_ip",
]
