"""Contextual memory subsystem."""

from devcrew.memory.context import ContextMemory, EntryKind, MemoryEntry

__all__ = ["ContextMemory", "EntryKind", "MemoryEntry"]
