"""Shared contextual memory log kept per worker."""

from __future__ import annotations

import logging
import secrets
from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, Field

logger = logging.getLogger("devcrew.memory.context")


class EntryKind(StrEnum):
    """Closed set of memory entry kinds."""

    TASK = "task"
    OBSERVATION = "observation"
    THOUGHT = "thought"
    ACTION = "action"
    RESULT = "result"


def _generate_id() -> str:
    return secrets.token_hex(6)


class MemoryEntry(BaseModel):
    """A single entry in the contextual memory log."""

    id: str = Field(default_factory=_generate_id)
    owner: str
    kind: EntryKind
    content: str
    tags: frozenset[str] = frozenset()
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ContextMemory:
    """Append-only, in-memory log of ``MemoryEntry`` items."""

    def __init__(self) -> None:
        self._entries: list[MemoryEntry] = []

    def append(
        self,
        owner: str,
        kind: EntryKind | str,
        content: str,
        tags: set[str] | frozenset[str] | list[str] | None = None,
    ) -> MemoryEntry:
        """Append an entry. ``kind`` must be one of ``EntryKind``."""
        entry = MemoryEntry(
            owner=owner,
            kind=EntryKind(kind),
            content=content,
            tags=frozenset(tags or ()),
        )
        self._entries.append(entry)
        logger.debug("Memory %s [%s] %s", owner, entry.kind.value, content[:80])
        return entry

    def all(self) -> list[MemoryEntry]:
        """Return all entries, oldest first."""
        return list(self._entries)

    def find_by_owner(self, owner: str) -> list[MemoryEntry]:
        return [e for e in self._entries if e.owner == owner]

    def find_by_kind(self, kind: EntryKind | str) -> list[MemoryEntry]:
        kind = EntryKind(kind)
        return [e for e in self._entries if e.kind == kind]

    def find_by_tag(self, tag: str) -> list[MemoryEntry]:
        return [e for e in self._entries if tag in e.tags]

    def clear(self, owner: str | None = None) -> int:
        """Drop entries for one owner, or everything. Returns how many were removed."""
        before = len(self._entries)
        if owner is None:
            self._entries.clear()
        else:
            self._entries = [e for e in self._entries if e.owner != owner]
        return before - len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
