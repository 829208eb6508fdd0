"""Defines classes for representing notes, session identities, view modes, and queries.

The most important classes are :class:`Note`, :class:`NoteInput`, and :class:`NoteQuery`.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Iterable, Iterator, Union
from urllib.parse import unquote_plus


DEFAULT_TITLE = 'Untitled'
"""Stored in place of a title that is empty or only whitespace."""


def now_millis() -> int:
    """Returns the current time as integer milliseconds since the epoch."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def millis_to_datetime(millis: int) -> datetime:
    return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)


def normalize_title(raw: Optional[str]) -> str:
    """Trims the title, substituting :data:`DEFAULT_TITLE` if nothing is left."""
    return (raw or '').strip() or DEFAULT_TITLE


def parse_tags(raw: Optional[str]) -> List[str]:
    """Splits a comma-separated string into tags.

    Each tag is trimmed and empty tags are dropped. Order and duplicates are kept, as is case.

    For example, ``" work, ,Travel,work"`` becomes ``['work', 'Travel', 'work']``.
    """
    return [t.strip() for t in (raw or '').split(',') if t.strip()]


@dataclass
class NoteInput:
    """The user-editable fields of a note, as they are typed into a form.

    Values are normalized by :class:`notease.repo.NoteRepo` when they are written, not here.
    """

    title: str = ''
    content: str = ''

    tags_raw: str = ''
    """Comma-separated tags, e.g. ``"travel, japan"``."""

    def normalized_title(self) -> str:
        return normalize_title(self.title)

    def normalized_content(self) -> str:
        return (self.content or '').strip()

    def tags(self) -> List[str]:
        return parse_tags(self.tags_raw)


@dataclass(frozen=True)
class Note:
    """A persisted text record. Instances are immutable; use :meth:`notease.repo.NoteRepo.update` to change one.

    Instances should only be created by :meth:`notease.repo.NoteRepo.create` (or rehydrated by
    :meth:`notease.repo.NoteRepo.load`), never constructed ad hoc by presentation code.
    """

    id: str
    """Opaque unique identifier. Never changes."""

    title: str
    """Display title. Never empty or only whitespace."""

    content: str = ''

    tags: List[str] = field(default_factory=list)
    """Tags in the order the user entered them. Stored with their original case, but matched case-insensitively."""

    created_at: int = 0
    """Milliseconds since the epoch. Never changes."""

    updated_at: int = 0
    """Milliseconds since the epoch. Refreshed by every update, and never less than :attr:`created_at`."""

    @property
    def created(self) -> datetime:
        return millis_to_datetime(self.created_at)

    @property
    def updated(self) -> datetime:
        return millis_to_datetime(self.updated_at)

    def as_json(self) -> dict:
        """Returns a dict representing the instance, suitable for serializing as json."""
        return {
            'id': self.id,
            'title': self.title,
            'content': self.content,
            'tags': list(self.tags),
            'createdAt': self.created_at,
            'updatedAt': self.updated_at
        }

    @classmethod
    def from_json(cls, data) -> Note:
        """Creates an instance from the structure produced by :meth:`as_json`.

        Raises :exc:`ValueError` if the data does not have that structure. The title and tags are normalized
        the same way they are when a note is written, and an ``updatedAt`` before ``createdAt`` is raised to match it.
        """
        if not isinstance(data, dict):
            raise ValueError(f'Expected an object but found {type(data).__name__}')
        note_id = data.get('id')
        if not (isinstance(note_id, str) and note_id):
            raise ValueError(f'Invalid id: {note_id!r}')
        for key in ('title', 'content'):
            if not isinstance(data.get(key, ''), str):
                raise ValueError(f'Invalid {key} for note {note_id}')
        tags = data.get('tags', [])
        if not (isinstance(tags, list) and all(isinstance(t, str) for t in tags)):
            raise ValueError(f'Invalid tags for note {note_id}')
        for key in ('createdAt', 'updatedAt'):
            val = data.get(key)
            if isinstance(val, bool) or not isinstance(val, int):
                raise ValueError(f'Invalid {key} for note {note_id}: {val!r}')
        return cls(
            id=note_id,
            title=normalize_title(data.get('title')),
            content=data.get('content', ''),
            tags=[t.strip() for t in tags if t.strip()],
            created_at=data['createdAt'],
            updated_at=max(data['createdAt'], data['updatedAt'])
        )


@dataclass
class Identity:
    """A self-asserted display identity. This is not a security boundary; nothing is verified."""

    email: str

    name: Optional[str] = None
    """Optional display name."""

    @property
    def initial(self) -> str:
        """The first character of the email, upper-cased, for use as an avatar."""
        return self.email[:1].upper()

    @property
    def display_name(self) -> str:
        return self.name or self.email

    def as_json(self) -> dict:
        result = {'email': self.email}
        if self.name:
            result['name'] = self.name
        return result

    @classmethod
    def from_json(cls, data) -> Identity:
        """Raises :exc:`ValueError` unless data is an object with a non-empty string ``email``."""
        if not isinstance(data, dict):
            raise ValueError(f'Expected an object but found {type(data).__name__}')
        email = data.get('email')
        if not (isinstance(email, str) and email.strip()):
            raise ValueError(f'Invalid email: {email!r}')
        name = data.get('name')
        if not isinstance(name, str):
            name = None
        return cls(email=email, name=name or None)


class ViewMode(Enum):
    GRID = 'grid'
    LIST = 'list'

    def toggled(self) -> ViewMode:
        return ViewMode.LIST if self == ViewMode.GRID else ViewMode.GRID


@dataclass
class NoteQuery:
    """Represents criteria for searching for notes.

    Both criteria are trimmed and lower-cased when the instance is created. A note must satisfy both of them:

    * :attr:`text` - free search; matches if empty, or if it is a substring of the note's title, content,
      or any one of its tags
    * :attr:`tag` - exact tag filter; matches if empty, or if it equals one of the note's tags

    All comparisons ignore case.
    """

    text: str = ''
    tag: str = ''

    def __post_init__(self):
        self.text = (self.text or '').strip().lower()
        self.tag = (self.tag or '').strip().lower()

    @classmethod
    def parse(cls, strquery: NoteQueryIsh) -> NoteQuery:
        """Converts the parameter to a NoteQuery, if it isn't one already.

        Query strings are split on whitespace. A part of the form ``tag:TAG`` sets the exact tag filter (use ``+``
        or ``%20`` for spaces within the tag; if several are given, the last one wins). All other parts are joined
        with single spaces to form the free search text.

        Examples:

        * ``"tag:work budget"`` - notes tagged "work" that mention "budget"
        * ``"tag:road+trip"`` - notes tagged "road trip"
        """
        if isinstance(strquery, NoteQuery):
            return strquery
        text = []
        tag = ''
        for term in (strquery or '').split():
            if term.lower().startswith('tag:'):
                tag = unquote_plus(term[4:])
            else:
                text.append(term)
        return cls(text=' '.join(text), tag=tag)

    def matches(self, note: Note) -> bool:
        tags = [t.lower() for t in note.tags]
        if self.text and not (self.text in note.title.lower()
                              or self.text in note.content.lower()
                              or any(self.text in t for t in tags)):
            return False
        if self.tag and self.tag not in tags:
            return False
        return True

    def apply_filtering(self, notes: Iterable[Note]) -> Iterator[Note]:
        """Yields the notes from the given iterable which match the criteria of this query."""
        for note in notes:
            if self.matches(note):
                yield note

    def apply_sorting(self, notes: Iterable[Note]) -> List[Note]:
        """Returns the notes sorted by :attr:`Note.updated_at`, most recent first.

        Notes with the same ``updated_at`` stay in the order they had in the given iterable.
        """
        positioned = list(enumerate(notes))
        positioned.sort(key=lambda pair: (-pair[1].updated_at, pair[0]))
        return [note for _, note in positioned]

    def apply(self, notes: Iterable[Note]) -> List[Note]:
        """Filters and then sorts the notes. Does not modify the given collection."""
        return self.apply_sorting(self.apply_filtering(notes))


NoteQueryIsh = Union[str, NoteQuery]


def query_notes(notes: Iterable[Note], search_text: str = '', exact_tag: str = '') -> List[Note]:
    """Returns the notes matching both the free search text and the exact tag, most recently updated first.

    This is a pure function, so presentation code can call it again whenever the collection, the search text,
    or the tag filter changes.
    """
    return NoteQuery(text=search_text, tag=exact_tag).apply(notes)


@dataclass
class TemplateDirectives:
    """Passed by :meth:`notease.api.Notease.new_from_template` when it is rendering one of a user's templates.

    It is used for passing data in and out of the template. Before rendering, the attributes hold what the user
    supplied; the template can change them.
    """

    title: str = ''

    tags_raw: str = ''
    """Comma-separated tags for the new note."""
