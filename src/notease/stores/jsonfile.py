"""Provides the :class:`JsonFileStore` class."""

import json
import logging
import os
import os.path
import tempfile
from typing import Dict, Optional

from notease.stores.base import KeyValueStore


logger = logging.getLogger(__name__)


class JsonFileStore(KeyValueStore):
    """Keeps every key and value in a single JSON object in one file.

    The file is read once, when the instance is created, and rewritten in full on every :meth:`set` or
    :meth:`remove`. The new contents go to a temporary file in the same folder, which then replaces the old
    file, so a failed write leaves both the file and this instance unchanged. Parent folders are created when
    needed.

    If the file does not exist, the store starts out empty. If it exists but does not contain a JSON object
    whose values are all strings, the store also starts out empty (a warning is logged), and the file will be
    replaced the next time a value is stored.

    .. attribute:: path
       :type: str
    """
    def __init__(self, path: str):
        if not path:
            raise ValueError('`path` must be set for JsonFileStore.')
        self.path = path
        self._data = self._read()

    def _read(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as file:
                data = json.load(file)
        except (OSError, ValueError) as e:
            logger.warning('Could not read %s, starting with an empty store: %s', self.path, e)
            return {}
        if not (isinstance(data, dict) and all(isinstance(v, str) for v in data.values())):
            logger.warning('Expected a JSON object of strings in %s, starting with an empty store', self.path)
            return {}
        return data

    def _write(self, data: Dict[str, str]) -> None:
        parent = os.path.dirname(self.path) or '.'
        os.makedirs(parent, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(suffix='.json', prefix='.tmp_', dir=parent)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as file:
                json.dump(data, file, indent=2, sort_keys=True)
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        self._data = data

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._write({**self._data, key: value})

    def remove(self, key: str) -> None:
        if key in self._data:
            self._write({k: v for k, v in self._data.items() if k != key})
