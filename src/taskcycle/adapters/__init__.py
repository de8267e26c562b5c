"""Adapters - I/O implementations of ports."""

from .json_store import JsonTaskStore, MemoryTaskStore

__all__ = [
    "JsonTaskStore",
    "MemoryTaskStore",
]
