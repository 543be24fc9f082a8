"""
Launchpad LLM Module.

Provides the chat completion client behind the assistant side-panel.
"""

__all__ = ["ChatClient", "ChatMessage", "ChatRequest", "ChatResponse", "LLMProvider"]

from launchpad.llm.client import ChatClient, ChatMessage, ChatRequest, ChatResponse, LLMProvider
