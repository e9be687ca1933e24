"""Tests for the shared contextual memory."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from devcrew.memory.context import ContextMemory, EntryKind, MemoryEntry


def test_append_and_all(memory: ContextMemory):
    entry = memory.append("intern", EntryKind.TASK, "write tests")
    assert entry.owner == "intern"
    assert entry.kind == EntryKind.TASK
    assert entry.tags == frozenset()
    assert memory.all() == [entry]
    assert len(memory) == 1


def test_append_accepts_kind_string(memory: ContextMemory):
    entry = memory.append("intern", "thought", "hmm")
    assert entry.kind == EntryKind.THOUGHT


def test_append_rejects_unknown_kind(memory: ContextMemory):
    with pytest.raises(ValueError):
        memory.append("intern", "daydream", "...")
    assert len(memory) == 0


def test_entries_are_immutable_values(memory: ContextMemory):
    entry = memory.append("intern", "task", "x", tags=["a", "a", "b"])
    assert entry.tags == frozenset({"a", "b"})
    assert isinstance(entry.tags, frozenset)


def test_find_helpers(memory: ContextMemory):
    memory.append("intern", "task", "t1")
    memory.append("senior", "action", "a1", tags={"review"})
    memory.append("intern", "result", "r1", tags={"review", "done"})

    assert [e.content for e in memory.find_by_owner("intern")] == ["t1", "r1"]
    assert [e.content for e in memory.find_by_kind("action")] == ["a1"]
    assert [e.content for e in memory.find_by_tag("review")] == ["a1", "r1"]
    assert memory.find_by_tag("missing") == []


def test_clear_by_owner(memory: ContextMemory):
    memory.append("intern", "task", "t1")
    memory.append("senior", "task", "t2")
    memory.append("intern", "task", "t3")

    assert memory.clear("intern") == 2
    assert [e.owner for e in memory.all()] == ["senior"]
    assert memory.clear() == 1
    assert len(memory) == 0


def test_all_returns_copy(memory: ContextMemory):
    memory.append("intern", "task", "t1")
    memory.all().clear()
    assert len(memory) == 1


def test_entry_model_rejects_bad_kind():
    with pytest.raises(ValidationError):
        MemoryEntry(owner="x", kind="nope", content="")
