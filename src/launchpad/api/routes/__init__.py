"""
API route handlers.
"""

from launchpad.api.routes import apps, chat, health, icons, settings

__all__ = [
    "apps",
    "chat",
    "health",
    "icons",
    "settings",
]
