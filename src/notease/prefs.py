"""Provides the :class:`PreferenceStore` class, which remembers whether notes are shown as a grid or a list."""

import logging

from notease.models import ViewMode
from notease.stores.base import KeyValueStore


logger = logging.getLogger(__name__)

DEFAULT_VIEW_KEY = 'notease__viewmode'


class PreferenceStore:
    """Persists the :class:`notease.models.ViewMode` as the literal string ``"grid"`` or ``"list"``."""
    def __init__(self, store: KeyValueStore, key: str = DEFAULT_VIEW_KEY):
        self.store = store
        self.key = key

    def load(self) -> ViewMode:
        """Returns the stored view mode, or :attr:`ViewMode.GRID` if nothing valid is stored."""
        raw = self.store.get(self.key)
        if raw is None:
            return ViewMode.GRID
        try:
            return ViewMode(raw)
        except ValueError:
            logger.warning('Ignoring invalid view mode stored under %r: %r', self.key, raw)
            return ViewMode.GRID

    def save(self, mode: ViewMode) -> None:
        self.store.set(self.key, ViewMode(mode).value)

    def toggle(self) -> ViewMode:
        """Switches between grid and list, saves the result, and returns it."""
        mode = self.load().toggled()
        self.save(mode)
        return mode
