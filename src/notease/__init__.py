"""Keeps short text notes, searchable by text and tag, in a local key-value store.

If you installed via ``pip``, run ``notease -h`` to get help.
Or, run ``python3 -m notease -h``.

To use the Python API, look at :class:`notease.api.Notease`
"""
