from __future__ import annotations

from .base import ClientRegistry, ProviderUnavailable
from .gemini import GeminiChatClient
from .mock import MockLLMClient


def register_default_clients(
    registry: ClientRegistry,
    api_key: str | None = None,
    default_model: str | None = None,
) -> ClientRegistry:
    """Best-effort registration for all upstream providers."""

    gemini_kwargs = {"default_model": default_model} if default_model else {}
    try:
        registry.register(GeminiChatClient(api_key=api_key, **gemini_kwargs))
    except ProviderUnavailable:
        pass
    registry.register(MockLLMClient())
    return registry


__all__ = ["register_default_clients"]
