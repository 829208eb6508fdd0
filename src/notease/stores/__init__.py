"""Persistent string-keyed, string-valued storage shared by the note repo, preferences, and session.

:class:`notease.stores.base.KeyValueStore` defines an API.
:class:`notease.stores.memory.MemoryStore` keeps everything in memory,
:class:`notease.stores.jsonfile.JsonFileStore` is the file-backed implementation you usually want to use, and
:class:`notease.stores.sqlite.SqliteStore` keeps the values in a SQLite database.
"""
