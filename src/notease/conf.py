from __future__ import annotations
from dataclasses import dataclass, field, replace
import os
import os.path
from typing import Set

from notease.prefs import DEFAULT_VIEW_KEY
from notease.repo import DEFAULT_NOTES_KEY
from notease.session import DEFAULT_SESSION_KEY


def default_app_name() -> str:
    return os.environ.get('NOTEASE_APP_NAME') or 'NoteEase'


@dataclass
class StoreConf:
    """Base class for store config. Use a subclass such as :class:`JsonFileStoreConf`."""

    def instantiate(self):
        raise NotImplementedError("Please use a subclass like JsonFileStoreConf instead!")

    def standardize(self):
        return self


@dataclass
class MemoryStoreConf(StoreConf):
    """Configures notease to keep data in memory only, via :class:`notease.stores.memory.MemoryStore`.

    Everything is lost when the process exits.
    """
    def instantiate(self):
        from notease.stores.memory import MemoryStore
        return MemoryStore()


@dataclass
class JsonFileStoreConf(StoreConf):
    """Configures notease to keep data in a single JSON file, via :class:`notease.stores.jsonfile.JsonFileStore`."""

    path: str = None
    """Required. Path of the JSON file. It will be created if it does not exist."""

    def standardize(self):
        if not self.path:
            return self
        return replace(self, path=os.path.realpath(os.path.expanduser(self.path)))

    def instantiate(self):
        from notease.stores.jsonfile import JsonFileStore
        return JsonFileStore(self.standardize().path)


@dataclass
class SqliteStoreConf(StoreConf):
    """Configures notease to keep data in a SQLite database, via :class:`notease.stores.sqlite.SqliteStore`."""

    path: str = None
    """Required. Path where the SQLite database file should be stored, or ``:memory:``.

    The file will be created if it does not exist."""

    def standardize(self):
        if not self.path or self.path == ':memory:':
            return self
        return replace(self, path=os.path.realpath(os.path.expanduser(self.path)))

    def instantiate(self):
        from notease.stores.sqlite import SqliteStore
        return SqliteStore(self.standardize().path)


@dataclass
class NoteaseConf:
    store_conf: StoreConf
    """Configures where your notes, session, and view preference are stored."""

    notes_key: str = DEFAULT_NOTES_KEY
    """Store key for the JSON array of notes."""

    session_key: str = DEFAULT_SESSION_KEY
    """Store key for the logged-in identity."""

    view_key: str = DEFAULT_VIEW_KEY
    """Store key for the grid/list view preference."""

    template_globs: Set[str] = field(default_factory=set)
    """A set of path globs such as ``{"~/notease/templates/*.mako"}`` to search for templates.

    This is used for the CLI command ``new --template``, and template-related methods of
    :class:`notease.api.Notease`.
    """

    app_name: str = field(default_factory=default_app_name)
    """Name shown by the CLI. Defaults to the ``NOTEASE_APP_NAME`` environment variable, or "NoteEase"."""

    @classmethod
    def user_config_path(cls) -> str:
        return os.path.expanduser(os.path.join('~', '.notease.conf.py'))

    @classmethod
    def default(cls) -> NoteaseConf:
        """Returns the config used when the user has no config file: data is kept in ``~/.notease.json``."""
        return cls(store_conf=JsonFileStoreConf(path=os.path.join('~', '.notease.json')))

    @classmethod
    def for_user(cls) -> NoteaseConf:
        """Loads the config by executing ``~/.notease.conf.py`` and reading its ``conf`` variable.

        If that file does not exist, :meth:`default` is returned. If it exists but does not assign an instance of
        this class to ``conf``, an :exc:`Exception` is raised.
        """
        path = cls.user_config_path()
        if not os.path.exists(path):
            return cls.default()
        with open(path, 'r') as file:
            conf_script = file.read()
        context = {}
        exec(conf_script, context)
        if 'conf' not in context or not isinstance(context['conf'], cls):
            raise Exception('You need to assign an instance of NoteaseConf to the variable `conf` '
                            f'in your config file: {path}')
        return context['conf']

    def standardize(self):
        return replace(
            self,
            store_conf=self.store_conf.standardize(),
            template_globs={os.path.expanduser(g) for g in self.template_globs}
        )

    def instantiate(self):
        from notease.api import Notease
        return Notease(self.standardize())
