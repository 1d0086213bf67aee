from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Literal, MutableMapping, Optional, Protocol, Sequence

from pydantic import BaseModel, Field


class LLMProvider(str, Enum):
    """Supported upstream LLM vendors."""

    GEMINI = "gemini"
    MOCK = "mock"


RoleLiteral = Literal["system", "user", "assistant"]


class LLMMessage(BaseModel):
    """Unified chat message model across providers."""

    role: RoleLiteral
    content: str | List[Dict[str, Any]]
    name: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    ts: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"role": self.role, "content": self.content}
        if self.name:
            payload["name"] = self.name
        if self.metadata:
            payload["metadata"] = self.metadata
        payload["ts"] = self.ts.isoformat()
        return payload


class LLMSessionConfig(BaseModel):
    """Provider-agnostic session knobs."""

    provider: LLMProvider
    model: str
    system_prompt: str = ""
    temperature: float = 0.2
    top_p: float = 0.9
    max_output_tokens: Optional[int] = None
    response_mime_type: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class LLMCompletion(BaseModel):
    text: str
    metadata: Dict[str, Any] = Field(default_factory=dict)


@dataclass(slots=True)
class LLMSession:
    """Represents an active conversation with a provider."""

    id: str
    config: LLMSessionConfig
    history: List[LLMMessage] = field(default_factory=list)
    attributes: Dict[str, Any] = field(default_factory=dict)

    def append(self, message: LLMMessage) -> None:
        self.history.append(message)


class LLMClient(Protocol):
    """Minimal interface every provider client must implement."""

    provider: LLMProvider

    async def create_session(self, config: LLMSessionConfig) -> LLMSession:  # pragma: no cover - interface
        ...

    async def complete_response(
        self,
        session: LLMSession,
        messages: Sequence[LLMMessage],
    ) -> LLMCompletion:  # pragma: no cover - interface
        ...


class ClientRegistry:
    """Registry for dynamically selected provider clients."""

    def __init__(self) -> None:
        self._clients: MutableMapping[LLMProvider, LLMClient] = {}

    def register(self, client: LLMClient) -> None:
        self._clients[client.provider] = client

    def get(self, provider: LLMProvider) -> LLMClient:
        if provider not in self._clients:
            raise KeyError(f"Client for provider {provider.value} is not registered")
        return self._clients[provider]

    def __contains__(self, provider: object) -> bool:
        return provider in self._clients

    def providers(self) -> List[LLMProvider]:
        return list(self._clients.keys())


class ProviderUnavailable(RuntimeError):
    pass


__all__ = [
    "ClientRegistry",
    "LLMClient",
    "LLMCompletion",
    "LLMMessage",
    "LLMProvider",
    "LLMSession",
    "LLMSessionConfig",
    "ProviderUnavailable",
    "RoleLiteral",
]
