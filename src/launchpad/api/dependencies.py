"""
Request-scoped accessors for objects created by the app factory.
"""

from fastapi import Request

from launchpad.config import LauncherConfig
from launchpad.llm.client import ChatClient
from launchpad.registry.service import RegistryService


def get_registry(request: Request) -> RegistryService:
    """Registry service bound to this application."""
    return request.app.state.registry


def get_launcher_config(request: Request) -> LauncherConfig:
    """Configuration the application was created with."""
    return request.app.state.config


def get_chat_client(request: Request) -> ChatClient:
    """Chat client, created on first use."""
    client = getattr(request.app.state, "chat_client", None)
    if client is None:
        client = ChatClient(ChatClient.config_from(request.app.state.config))
        request.app.state.chat_client = client
    return client
