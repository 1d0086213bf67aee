from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Mapping, Protocol, Sequence


class KeyValueStore(Protocol):
    """Durable key-value data (extension local storage, a JSON file, ...)."""

    async def get(self, keys: Sequence[str]) -> Dict[str, Any]:  # pragma: no cover - Protocol
        ...

    async def set(self, values: Mapping[str, Any]) -> None:  # pragma: no cover - Protocol
        ...


class MemoryStore:
    """Process-local store for demo runs; forgets everything on exit."""

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._data: Dict[str, Any] = json.loads(json.dumps(dict(initial or {})))

    async def get(self, keys: Sequence[str]) -> Dict[str, Any]:
        return {key: json.loads(json.dumps(self._data[key])) for key in keys if key in self._data}

    async def set(self, values: Mapping[str, Any]) -> None:
        # Round-trip through JSON so callers never share mutable state with the store.
        self._data.update(json.loads(json.dumps(dict(values))))


class JsonFileStore:
    """Single JSON object on disk, rewritten atomically on every change."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path).expanduser()

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        raw = self.path.read_text(encoding="utf-8")
        if not raw.strip():
            return {}
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object in {self.path}")
        return data

    async def get(self, keys: Sequence[str]) -> Dict[str, Any]:
        data = self._read()
        return {key: data[key] for key in keys if key in data}

    async def set(self, values: Mapping[str, Any]) -> None:
        data = self._read()
        data.update(values)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


__all__ = ["JsonFileStore", "KeyValueStore", "MemoryStore"]
