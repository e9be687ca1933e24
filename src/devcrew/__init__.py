"""devcrew: dependency-aware task scheduling for a crew of named workers."""

__version__ = "0.1.0"
