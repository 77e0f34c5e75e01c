"""Async-first progress tracking for asyncio tasks: updates, updaters, observers and demos."""

__version__ = "0.1.0"
__all__ = ["update", "updater", "ext", "demo"]