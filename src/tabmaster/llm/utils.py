from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .base import LLMMessage, LLMSession

_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def to_gemini_contents(
    session: LLMSession, new_messages: Sequence[LLMMessage]
) -> Tuple[Optional[str], List[Dict[str, List[dict]]]]:
    """Convert messages into Gemini Developer API payloads."""

    system_instruction = session.config.system_prompt or None
    conversation: List[Dict[str, List[dict]]] = []
    for message in [*session.history, *new_messages]:
        if message.role == "system":
            addition = _ensure_text(message)
            if system_instruction:
                system_instruction = f"{system_instruction}\n{addition}"
            else:
                system_instruction = addition
            continue
        parts = _parts_for_gemini(message)
        if not parts:
            continue
        mapped_role = "model" if message.role == "assistant" else "user"
        conversation.append({"role": mapped_role, "parts": parts})
    return system_instruction, conversation


def _parts_for_gemini(message: LLMMessage) -> List[dict]:
    payload = message.content
    if isinstance(payload, list):
        normalized: List[dict] = []
        for item in payload:
            if isinstance(item, dict):
                normalized.append(item)
            elif item is not None:
                normalized.append({"text": str(item)})
        return normalized
    return [{"text": str(payload)}]


def _ensure_text(message: LLMMessage) -> str:
    if isinstance(message.content, list):
        return json.dumps(message.content)
    return str(message.content)


def extract_json_object(text: str, default: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """Parse a JSON object out of model output.

    Tolerates surrounding markdown code fences. Empty output yields `default`
    (or an empty dict); anything else that is not a JSON object raises
    ValueError.
    """

    stripped = text.strip()
    if not stripped:
        return dict(default or {})
    fenced = _FENCE.match(stripped)
    if fenced:
        stripped = fenced.group(1)
    data = json.loads(stripped)
    if not isinstance(data, dict):
        raise ValueError("Expected a JSON object in model output")
    return data


__all__ = ["extract_json_object", "to_gemini_contents"]
