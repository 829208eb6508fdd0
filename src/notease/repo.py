"""Provides the :class:`NoteRepo` class, which owns the user's collection of notes."""

from collections import defaultdict
from dataclasses import replace
import logging
from typing import Dict, List, Optional

import shortuuid

from notease.models import Note, NoteInput, NoteQuery, NoteQueryIsh, now_millis, query_notes
from notease.stores.base import KeyValueStore


logger = logging.getLogger(__name__)

DEFAULT_NOTES_KEY = 'notease__notes'


class NoteRepo:
    """Holds the authoritative in-memory list of notes and keeps it in sync with a :class:`KeyValueStore`.

    The whole collection is stored as a JSON array under a single key. It is read once by :meth:`load`, and
    every change (:meth:`create`, :meth:`update`, :meth:`delete`) writes the whole collection back. Nothing
    else touches the store.

    None of the methods raise for bad data: a malformed stored collection loads as empty, a blank title is
    replaced with a default, updating an id that does not exist does nothing, and deleting one
    only saves the collection unchanged.

    .. attribute:: store
       :type: notease.stores.base.KeyValueStore

    .. attribute:: key
       :type: str
    """
    def __init__(self, store: KeyValueStore, key: str = DEFAULT_NOTES_KEY):
        self.store = store
        self.key = key
        self._notes: List[Note] = []

    @property
    def notes(self) -> List[Note]:
        """A copy of the collection, in its stored order (newest created first, unless loaded otherwise)."""
        return [self._detached(n) for n in self._notes]

    def __len__(self):
        return len(self._notes)

    def load(self) -> List[Note]:
        """Replaces the in-memory collection with the one in the store, and returns it.

        If the stored value is missing, is not valid JSON, or is not an array, the collection will be empty.
        Array entries that are not valid notes are skipped, as are entries whose id was already seen.
        """
        payload = self.store.get_json(self.key)
        notes = []
        if payload is not None and not isinstance(payload, list):
            logger.warning('Ignoring notes stored under %r: expected an array but found %s',
                           self.key, type(payload).__name__)
        elif payload:
            seen = set()
            for entry in payload:
                try:
                    note = Note.from_json(entry)
                except ValueError as e:
                    logger.warning('Skipping malformed note: %s', e)
                    continue
                if note.id in seen:
                    logger.warning('Skipping note with duplicate id %s', note.id)
                    continue
                seen.add(note.id)
                notes.append(note)
        self._notes = notes
        logger.debug('Loaded %d notes from %r', len(notes), self.key)
        return self.notes

    def _persist(self) -> None:
        self.store.set_json(self.key, [n.as_json() for n in self._notes])

    def _new_id(self) -> str:
        existing = {n.id for n in self._notes}
        while True:
            candidate = shortuuid.uuid()
            if candidate not in existing:
                return candidate

    def _detached(self, note: Note) -> Note:
        return replace(note, tags=list(note.tags))

    def _index_of(self, note_id: str) -> Optional[int]:
        for i, note in enumerate(self._notes):
            if note.id == note_id:
                return i
        return None

    def get(self, note_id: str) -> Optional[Note]:
        """Returns the note with the given id, or None."""
        index = self._index_of(note_id)
        return None if index is None else self._detached(self._notes[index])

    def create(self, inp: NoteInput) -> Note:
        """Adds a new note to the front of the collection, saves the collection, and returns the note.

        The title and content are trimmed, with an empty title replaced by ``"Untitled"``, and the raw tags are
        split on commas with blank entries dropped.
        """
        now = now_millis()
        note = Note(id=self._new_id(),
                    title=inp.normalized_title(),
                    content=inp.normalized_content(),
                    tags=inp.tags(),
                    created_at=now,
                    updated_at=now)
        self._notes.insert(0, note)
        self._persist()
        logger.info('Created note %s', note.id)
        return self._detached(note)

    def update(self, note_id: str, inp: NoteInput) -> Optional[Note]:
        """Replaces the title, content, and tags of a note, saves the collection, and returns the updated note.

        Input is normalized the same way as in :meth:`create`. The id and creation time stay the same and the
        update time is set to now. If no note has the given id, nothing happens and None is returned.
        """
        index = self._index_of(note_id)
        if index is None:
            logger.debug('No note %s to update', note_id)
            return None
        note = self._notes[index]
        updated = replace(note,
                          title=inp.normalized_title(),
                          content=inp.normalized_content(),
                          tags=inp.tags(),
                          updated_at=max(now_millis(), note.created_at))
        self._notes[index] = updated
        self._persist()
        logger.info('Updated note %s', note_id)
        return self._detached(updated)

    def delete(self, note_id: str) -> None:
        """Removes the note with the given id, if there is one, and saves the collection.

        The collection is saved even when no note has the id, so a malformed stored value is replaced.
        """
        index = self._index_of(note_id)
        if index is None:
            logger.debug('No note %s to delete', note_id)
        else:
            del self._notes[index]
            logger.info('Deleted note %s', note_id)
        self._persist()

    def query(self, search_text: str = '', exact_tag: str = '') -> List[Note]:
        """Returns the notes matching the free search text and the exact tag, most recently updated first.

        See :class:`notease.models.NoteQuery` for the matching rules. This only reads the in-memory collection.
        """
        return [self._detached(n) for n in query_notes(self._notes, search_text, exact_tag)]

    def tag_counts(self, query: NoteQueryIsh = '') -> Dict[str, int]:
        """Returns a map of lower-cased tag names to the number of notes matching the query which have that tag."""
        result = defaultdict(int)
        for note in NoteQuery.parse(query).apply_filtering(self._notes):
            for tag in {t.lower() for t in note.tags}:
                result[tag] += 1
        return dict(result)
