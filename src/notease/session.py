"""Provides the :class:`SessionStore` class.

The session is only a display identity that the user asserts for themselves. There are no passwords or
credentials, and nothing is checked with a server.
"""

import logging
from typing import Optional

from notease.models import Identity
from notease.stores.base import KeyValueStore


logger = logging.getLogger(__name__)

DEFAULT_SESSION_KEY = 'notease__user'


class SessionStore:
    """Persists at most one :class:`notease.models.Identity` as a JSON object ``{"email": ..., "name": ...}``."""
    def __init__(self, store: KeyValueStore, key: str = DEFAULT_SESSION_KEY):
        self.store = store
        self.key = key

    def load(self) -> Optional[Identity]:
        """Returns the stored identity, or None if there is none or it cannot be parsed."""
        payload = self.store.get_json(self.key)
        if payload is None:
            return None
        try:
            return Identity.from_json(payload)
        except ValueError as e:
            logger.warning('Ignoring invalid session stored under %r: %s', self.key, e)
            return None

    def save(self, identity: Optional[Identity]) -> None:
        """Stores the identity, or removes the stored one if identity is None."""
        if identity:
            self.store.set_json(self.key, identity.as_json())
        else:
            self.store.remove(self.key)

    def clear(self) -> None:
        self.save(None)

    def login(self, email: str, name: Optional[str] = None) -> Identity:
        """Trims the email and name, stores them as the current identity, and returns it.

        A blank name is stored as no name. Raises :exc:`ValueError` if the email is blank, without changing the
        stored identity.
        """
        email = (email or '').strip()
        if not email:
            raise ValueError('An email is required to log in.')
        identity = Identity(email=email, name=(name or '').strip() or None)
        self.save(identity)
        return identity
