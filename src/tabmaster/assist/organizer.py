from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Sequence

from ..llm.base import LLMClient, LLMMessage, LLMSessionConfig
from ..llm.mock import GROUP_TABS_TASK, NAME_WINDOWS_TASK
from ..llm.utils import extract_json_object
from ..windows.models import Tab, TabGroup, WindowData


class AssistError(RuntimeError):
    pass


class MissingApiKey(AssistError):
    """No API key in storage or environment; the host should prompt for one."""


class InvalidApiKey(AssistError):
    pass


class AssistResponseError(AssistError):
    pass


GROUPING_PROMPT = (
    "You are an intelligent tab manager. Group the following browser tabs into logical semantic "
    'categories (e.g., "Development", "Communication", "Entertainment", "Reference", "Shopping").\n\n'
    "Here are the tabs:\n{tabs}\n\n"
    "Return a JSON object containing an array of groups. Each group should have a 'categoryName' and a "
    "list of 'tabIds' belonging to that category. Ensure every tab ID from the input is assigned to "
    "exactly one category."
)

NAMING_PROMPT = (
    "You name browser windows. For each window below, suggest a short, descriptive name (at most four "
    "words) based on the tabs it holds.\n\n"
    "Here are the windows:\n{windows}\n\n"
    "Return a JSON object with a 'names' array. Each entry has a 'windowId' copied from the input and a "
    "'name'. Skip windows you cannot describe."
)


async def _complete_json(
    client: LLMClient,
    config: LLMSessionConfig,
    message: LLMMessage,
    default: Dict[str, Any],
) -> Dict[str, Any]:
    session = await client.create_session(config)
    try:
        completion = await client.complete_response(session, [message])
    except AssistError:
        raise
    except Exception as exc:
        if "API_KEY" in str(exc).upper().replace(" ", "_"):
            raise InvalidApiKey(str(exc)) from exc
        raise
    try:
        return extract_json_object(completion.text, default=default)
    except ValueError as exc:
        raise AssistResponseError(f"Model returned malformed JSON: {completion.text[:200]!r}") from exc


def _session_config(client: LLMClient, model: str, task: str) -> LLMSessionConfig:
    return LLMSessionConfig(
        provider=client.provider,
        model=model,
        response_mime_type="application/json",
        metadata={"task": task},
    )


async def organize_tabs(client: LLMClient, tabs: Sequence[Tab], *, model: str) -> List[TabGroup]:
    """Ask the model to sort tabs into semantic categories.

    Only id, title and url are sent. Unknown tab ids in the answer are
    dropped, as are groups left empty.
    """

    tabs_input = [{"id": tab.id, "title": tab.title, "url": tab.url} for tab in tabs]
    message = LLMMessage(
        role="user",
        content=GROUPING_PROMPT.format(tabs=json.dumps(tabs_input, ensure_ascii=False)),
        metadata={"task": GROUP_TABS_TASK, "payload": tabs_input},
    )
    data = await _complete_json(client, _session_config(client, model, GROUP_TABS_TASK), message, {"groups": []})
    known = {tab.id for tab in tabs}
    groups: List[TabGroup] = []
    for raw in data.get("groups") or []:
        if not isinstance(raw, Mapping):
            continue
        name = str(raw.get("categoryName") or "").strip()
        tab_ids = [str(tab_id) for tab_id in raw.get("tabIds") or [] if str(tab_id) in known]
        if name and tab_ids:
            groups.append(TabGroup(category_name=name, tab_ids=tab_ids))
    return groups


async def suggest_window_names(
    client: LLMClient,
    windows: Sequence[WindowData],
    current_names: Mapping[str, str],
    *,
    model: str,
) -> Dict[str, str]:
    """Ask the model for a display name per window; returns raw suggestions."""

    windows_input = [
        {
            "id": window.id,
            "currentName": current_names.get(window.id, window.name),
            "tabs": [{"title": tab.title, "url": tab.url} for tab in window.tabs],
        }
        for window in windows
    ]
    message = LLMMessage(
        role="user",
        content=NAMING_PROMPT.format(windows=json.dumps(windows_input, ensure_ascii=False)),
        metadata={"task": NAME_WINDOWS_TASK, "payload": windows_input},
    )
    data = await _complete_json(client, _session_config(client, model, NAME_WINDOWS_TASK), message, {"names": []})
    suggestions: Dict[str, str] = {}
    for raw in data.get("names") or []:
        if not isinstance(raw, Mapping):
            continue
        window_id = raw.get("windowId")
        name = raw.get("name")
        if window_id is None or not isinstance(name, str):
            continue
        suggestions[str(window_id)] = name
    return suggestions


__all__ = [
    "AssistError",
    "AssistResponseError",
    "GROUPING_PROMPT",
    "InvalidApiKey",
    "MissingApiKey",
    "NAMING_PROMPT",
    "organize_tabs",
    "suggest_window_names",
]
