from __future__ import annotations

import os
from typing import Any, Dict, Sequence
from uuid import uuid4

from google import genai
from google.genai import types

from .base import (
    LLMClient,
    LLMCompletion,
    LLMMessage,
    LLMProvider,
    LLMSession,
    LLMSessionConfig,
    ProviderUnavailable,
)
from .utils import to_gemini_contents


class GeminiChatClient(LLMClient):
    """Gemini Developer API client built on google-genai."""

    provider = LLMProvider.GEMINI

    def __init__(
        self,
        api_key: str | None = None,
        default_model: str = "gemini-2.5-flash",
    ) -> None:
        self._api_key = api_key or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
        if not self._api_key or not self._api_key.strip():
            raise ProviderUnavailable("GEMINI_API_KEY or GOOGLE_API_KEY is required for GeminiChatClient")
        self._client = genai.Client(api_key=self._api_key.strip())
        self._default_model = default_model

    async def create_session(self, config: LLMSessionConfig) -> LLMSession:
        return LLMSession(id=str(uuid4()), config=config)

    async def complete_response(
        self,
        session: LLMSession,
        messages: Sequence[LLMMessage],
    ) -> LLMCompletion:
        system_instruction, contents = to_gemini_contents(session, messages)
        config_kwargs: Dict[str, Any] = {
            "temperature": session.config.temperature,
            "top_p": session.config.top_p,
        }
        if session.config.max_output_tokens:
            config_kwargs["max_output_tokens"] = session.config.max_output_tokens
        if system_instruction:
            config_kwargs["system_instruction"] = system_instruction
        if session.config.response_mime_type:
            config_kwargs["response_mime_type"] = session.config.response_mime_type
        config = types.GenerateContentConfig(**config_kwargs)
        model_name = session.config.model or self._default_model
        response = await self._client.aio.models.generate_content(
            model=model_name,
            contents=contents,
            config=config,
        )
        text = self._response_text(response)
        for message in messages:
            session.append(message)
        session.append(LLMMessage(role="assistant", content=text))
        return LLMCompletion(text=text, metadata=self._extract_metadata(response, model_name))

    def _response_text(self, response: Any) -> str:
        text = getattr(response, "text", None)
        if isinstance(text, str):
            return text
        # Fall back to candidate parts when the aggregated text is missing.
        candidates = getattr(response, "candidates", None)
        fragments: list[str] = []
        if isinstance(candidates, list):
            for candidate in candidates:
                content = getattr(candidate, "content", None)
                for part in getattr(content, "parts", None) or []:
                    part_text = getattr(part, "text", None)
                    if part_text:
                        fragments.append(str(part_text))
        return "".join(fragments)

    def _extract_metadata(self, response: Any, model_name: str) -> Dict[str, Any]:
        metadata: Dict[str, Any] = {"model": model_name}
        usage = getattr(response, "usage_metadata", None)
        if usage is not None and hasattr(usage, "model_dump"):
            metadata["usage"] = usage.model_dump(exclude_none=True)
        return metadata


__all__ = ["GeminiChatClient"]
