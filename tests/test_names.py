from __future__ import annotations

import pytest

from tabmaster.providers.mock import MockTabProvider
from tabmaster.providers.store import MemoryStore
from tabmaster.windows.names import WindowNameBook, clean_window_name
from tabmaster.windows.storage import StorageService

IDS = ["w1", "w2", "w3"]


def test_clean_window_name_trims_and_rejects_blank():
    assert clean_window_name("  Work  ") == "Work"
    assert clean_window_name("   ") is None
    assert clean_window_name(None) is None


def test_load_layers_custom_names_over_defaults():
    book = WindowNameBook()
    names = book.load(IDS, {"w2": " Research ", "w3": "   "})
    assert dict(names) == {"w1": "Able Ant", "w2": "Research", "w3": "Calm Cat"}
    assert len(book.history) == 1


def test_reload_keeps_history():
    book = WindowNameBook()
    book.load(IDS)
    book.rename("w1", "Work")
    book.load(IDS, {"w1": "Work"})
    assert len(book.history) == 2
    assert book.history.can_undo


def test_rename_ignores_blank_unknown_and_unchanged():
    book = WindowNameBook()
    book.load(IDS)
    assert book.rename("w1", "  ") is False
    assert book.rename("ghost", "Work") is False
    assert book.rename("w1", "Able Ant") is False
    assert len(book.history) == 1


def test_rename_then_undo_and_redo():
    book = WindowNameBook()
    book.load(IDS)
    assert book.rename("w1", "Work") is True
    assert book.rename("w2", "Play") is True

    assert dict(book.undo() or {}) == {"w1": "Work", "w2": "Blue Bear", "w3": "Calm Cat"}
    assert dict(book.undo() or {}) == {"w1": "Able Ant", "w2": "Blue Bear", "w3": "Calm Cat"}
    assert book.undo() is None
    assert book.display_name("w1") == "Able Ant"
    assert book.redo() is not None
    assert book.display_name("w1") == "Work"


def test_apply_names_is_one_undo_step():
    book = WindowNameBook()
    book.load(IDS)
    accepted = book.apply_names({"w1": "Docs", "w2": "  ", "ghost": "Nope", "w3": "Calm Cat"})
    assert accepted == {"w1": "Docs"}
    assert len(book.history) == 2
    book.undo()
    assert book.display_name("w1") == "Able Ant"


def test_apply_names_with_nothing_new_does_not_push():
    book = WindowNameBook()
    book.load(IDS)
    assert book.apply_names({"w1": "Able Ant"}) == {}
    assert len(book.history) == 1


def test_undo_gives_new_windows_their_default():
    book = WindowNameBook()
    book.load(["w1"])
    book.rename("w1", "Work")
    book.load(["w1", "w2"], {"w1": "Work"})
    book.undo()
    assert dict(book.names) == {"w1": "Able Ant", "w2": "Blue Bear"}


def test_display_name_for_unknown_window():
    book = WindowNameBook()
    book.load(IDS)
    assert book.display_name("ghost") == "Unknown Window"


def test_custom_names_only_lists_overrides():
    book = WindowNameBook()
    book.load(IDS)
    book.rename("w2", "Play")
    assert book.custom_names() == {"w2": "Play"}


@pytest.mark.anyio("asyncio")
async def test_flush_persists_and_clears_reverted_windows():
    store = MemoryStore({"customWindowNames": {"w1": "Old", "closed": "Keep me"}})
    storage = StorageService(MockTabProvider(store=store))
    book = WindowNameBook(storage=storage)
    book.load(IDS, {"w1": "Old"})
    book.rename("w2", "Play")
    book.undo()
    book.redo()
    book.rename("w1", "Able Ant")

    saved = await book.flush()

    assert saved == {"w2": "Play", "closed": "Keep me"}
    stored = await store.get(["customWindowNames"])
    assert stored == {"customWindowNames": {"w2": "Play", "closed": "Keep me"}}


@pytest.mark.anyio("asyncio")
async def test_flush_without_storage_returns_custom_names():
    book = WindowNameBook()
    book.load(IDS)
    book.rename("w3", "Music")
    assert await book.flush() == {"w3": "Music"}


def test_undo_after_a_window_closes_uses_current_defaults():
    book = WindowNameBook()
    book.load(IDS)
    book.rename("w3", "Music")
    book.load(["w2", "w3"], {"w3": "Music"})
    assert dict(book.names) == {"w2": "Able Ant", "w3": "Music"}

    book.rename("w2", "Docs")
    book.undo()

    assert dict(book.names) == {"w2": "Able Ant", "w3": "Music"}
    assert book.custom_names() == {"w3": "Music"}
    book.redo()
    assert dict(book.names) == {"w2": "Docs", "w3": "Music"}


def test_renaming_back_to_the_default_drops_the_override():
    book = WindowNameBook()
    book.load(IDS, {"w2": "Play"})
    assert book.rename("w2", "Blue Bear") is True
    assert book.custom_names() == {}
    assert book.undo() is not None
    assert book.custom_names() == {"w2": "Play"}


def test_reset_history_on_load_starts_over():
    book = WindowNameBook()
    book.load(IDS)
    book.rename("w1", "Work")
    book.load(IDS, {"w1": "Work"}, reset_history=True)
    assert len(book.history) == 1
    assert not book.history.can_undo
    assert book.display_name("w1") == "Work"


@pytest.mark.anyio("asyncio")
async def test_flush_after_window_closes_stores_only_overrides():
    store = MemoryStore()
    book = WindowNameBook(storage=StorageService(MockTabProvider(store=store)))
    book.load(IDS)
    book.rename("w1", "Work")
    book.rename("w3", "Music")
    # w1 closes; the others shift up one position.
    book.load(["w2", "w3"], {"w1": "Work", "w3": "Music"})
    book.undo()

    assert await book.flush() == {"w1": "Work"}
    assert await store.get(["customWindowNames"]) == {"customWindowNames": {"w1": "Work"}}
    assert dict(book.names) == {"w2": "Able Ant", "w3": "Blue Bear"}
