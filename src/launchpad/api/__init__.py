"""
Launchpad API Module.

REST API for the application registry, settings and assistant chat.
"""

from launchpad.api.app import create_app

__all__ = ["create_app"]
