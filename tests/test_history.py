from __future__ import annotations

import pytest

from tabmaster.windows.history import NameHistory

A = {"w1": "Able Ant"}
B = {"w1": "Work"}
C = {"w1": "Play"}
D = {"w1": "Chores"}


def test_undo_and_redo_walk_the_snapshots():
    history = NameHistory()
    history.push(A)
    history.push(B)
    history.push(C)
    assert history.undo() == B
    assert history.undo() == A
    assert history.redo() == B


def test_push_after_undo_discards_redo_branch():
    history = NameHistory()
    for names in (A, B, C):
        history.push(names)
    history.undo()
    history.undo()
    history.redo()
    history.push(D)
    assert len(history) == 3
    assert history.current == D
    assert history.redo() is None
    assert history.cursor == 2
    assert history.undo() == B


def test_boundaries_are_silent_no_ops():
    history = NameHistory()
    assert history.undo() is None
    assert history.redo() is None
    assert history.cursor == -1

    history.push(A)
    assert not history.can_undo
    assert not history.can_redo
    assert history.undo() is None
    assert history.cursor == 0
    assert history.redo() is None
    assert history.cursor == 0


def test_initialize_only_seeds_an_empty_history():
    history = NameHistory()
    assert history.initialize(A) is True
    assert history.initialize(B) is False
    assert len(history) == 1
    assert history.current == A
    assert not history.can_undo


def test_snapshots_are_isolated_from_caller_mutation():
    history = NameHistory()
    names = dict(A)
    history.push(names)
    names["w1"] = "Changed"
    assert history.current == {"w1": "Able Ant"}
    with pytest.raises(TypeError):
        history.current["w1"] = "Nope"  # type: ignore[index]


def test_reset_clears_everything():
    history = NameHistory()
    history.push(A)
    history.push(B)
    history.reset()
    assert len(history) == 0
    assert history.current is None
    assert not history.can_undo
