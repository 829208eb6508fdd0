"""Defines the API for the key-value storage backing all of a user's data.

The most important class is :class:`KeyValueStore`.
"""

import json
import logging
from typing import Any, Optional


logger = logging.getLogger(__name__)


class KeyValueStore:
    """Base class for stores, which persist string values under string keys.

    Stores are synchronous and assume a single process is using them; there is no coordination between
    multiple writers.

    Remember to call :meth:`close` when done with the instance, or use the instance as a context manager.
    """
    def get(self, key: str) -> Optional[str]:
        """Returns the value stored under the key, or None if there is none. Does not raise for missing keys."""
        raise NotImplementedError()

    def set(self, key: str, value: str) -> None:
        """Stores the value under the key, replacing any previous value."""
        raise NotImplementedError()

    def remove(self, key: str) -> None:
        """Deletes the key. This is a no-op if the key is not present."""
        raise NotImplementedError()

    def close(self) -> None:
        """Release any resources associated with the store. Should be called when you're done with an instance."""
        pass

    def get_json(self, key: str) -> Any:
        """Returns the value stored under the key, parsed as JSON.

        Returns None if the key is missing or the value is not valid JSON. Malformed values are logged
        but never raised, so that a corrupt value behaves the same as an absent one.
        """
        raw = self.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            logger.warning('Ignoring malformed JSON stored under %r: %s', key, e)
            return None

    def set_json(self, key: str, value: Any) -> None:
        """Serializes the value as JSON and stores it under the key."""
        self.set(key, json.dumps(value))

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
