"""
Launchpad Sync Module.

Client-side snapshot and the HTTP client it reconciles against.
"""

__all__ = [
    "LauncherClient",
    "RequestFailedError",
    "Notice",
    "SessionState",
    "SyncSession",
]

from launchpad.sync.client import LauncherClient, RequestFailedError
from launchpad.sync.session import Notice, SessionState, SyncSession
