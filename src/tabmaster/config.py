from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, Field

from .llm.base import LLMProvider
from .providers.base import ProviderKind

DEFAULT_MODEL = "gemini-2.5-flash"


class TabMasterSettings(BaseModel):
    """Startup configuration, usually read from the environment.

    Environment variables:
      - TABMASTER_PROVIDER: 'mock' (default) or 'bridge'
      - TABMASTER_BRIDGE_URL: base URL of the extension bridge
      - TABMASTER_STORE_PATH: JSON file for persisted names in mock mode
      - TABMASTER_LLM_PROVIDER: 'gemini' (default) or 'mock'
      - TABMASTER_LLM_MODEL: model name (default gemini-2.5-flash)
      - TABMASTER_REFRESH_DEBOUNCE_MS: delay before refreshing on change events (default 200)
      - TABMASTER_BRIDGE_POLL_SECONDS: bridge change-polling interval (default 2.0)
      - GEMINI_API_KEY / GOOGLE_API_KEY / API_KEY: fallback API key
    """

    provider: ProviderKind = ProviderKind.MOCK
    bridge_url: Optional[str] = None
    store_path: Optional[Path] = None
    llm_provider: LLMProvider = LLMProvider.GEMINI
    llm_model: str = DEFAULT_MODEL
    api_key: Optional[str] = None
    refresh_debounce_ms: int = Field(default=200, ge=0)
    bridge_poll_seconds: float = Field(default=2.0, gt=0)
    bridge_timeout: float = Field(default=10.0, gt=0)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: object) -> "TabMasterSettings":
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        if env.get("TABMASTER_PROVIDER"):
            values["provider"] = env["TABMASTER_PROVIDER"].strip().lower()
        if env.get("TABMASTER_BRIDGE_URL"):
            values["bridge_url"] = env["TABMASTER_BRIDGE_URL"].strip()
        if env.get("TABMASTER_STORE_PATH"):
            values["store_path"] = Path(env["TABMASTER_STORE_PATH"]).expanduser()
        if env.get("TABMASTER_LLM_PROVIDER"):
            values["llm_provider"] = env["TABMASTER_LLM_PROVIDER"].strip().lower()
        if env.get("TABMASTER_LLM_MODEL"):
            values["llm_model"] = env["TABMASTER_LLM_MODEL"].strip()
        if env.get("TABMASTER_REFRESH_DEBOUNCE_MS"):
            values["refresh_debounce_ms"] = int(env["TABMASTER_REFRESH_DEBOUNCE_MS"])
        if env.get("TABMASTER_BRIDGE_POLL_SECONDS"):
            values["bridge_poll_seconds"] = float(env["TABMASTER_BRIDGE_POLL_SECONDS"])
        api_key = env.get("GEMINI_API_KEY") or env.get("GOOGLE_API_KEY") or env.get("API_KEY")
        if api_key and api_key.strip():
            values["api_key"] = api_key.strip()
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)


__all__ = ["DEFAULT_MODEL", "TabMasterSettings"]
