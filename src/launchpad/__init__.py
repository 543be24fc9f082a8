"""
Launchpad - Corporate Application Launcher.

An ordered registry of application tiles (links, executables and internal
views) with an admin-editable HTTP API and a client sync protocol.
"""

from launchpad.version import __version__

# API module is available but not exported by default
# Import explicitly: from launchpad.api import create_app

__all__ = ["__version__"]
