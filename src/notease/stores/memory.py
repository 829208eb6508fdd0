"""Provides the :class:`MemoryStore` class."""

from typing import Dict, Optional

from notease.stores.base import KeyValueStore


class MemoryStore(KeyValueStore):
    """Keeps values in a dict. Nothing survives the instance, which makes this mostly useful for tests.

    .. attribute:: data
       :type: Dict[str, str]
    """
    def __init__(self, data: Dict[str, str] = None):
        self.data = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)
