"""Provides the main entry point for using the library, :class:`Notease`"""

from __future__ import annotations
from glob import glob
import logging
import os.path
from typing import Dict, Optional

from mako.template import Template

from notease.conf import NoteaseConf
from notease.models import Note, NoteInput, TemplateDirectives
from notease.prefs import PreferenceStore
from notease.repo import NoteRepo
from notease.session import SessionStore


logger = logging.getLogger(__name__)


class Error(Exception):
    pass


class Notease:
    """Main entry point for working programmatically with your notes.

    Generally, you should get an instance using the :meth:`Notease.for_user` method. Call :meth:`close` when you're
    done with it, or else use it as a context manager.

    The instance builds one :class:`notease.stores.base.KeyValueStore` from the config and three objects that
    share it. Pass the instance (or those objects) to whatever presents your notes, rather than creating stores
    elsewhere.

    .. attribute:: conf
       :type: notease.conf.NoteaseConf

       Typically loaded from the variable ``conf`` in the file ``~/.notease.conf.py``

    .. attribute:: repo
       :type: notease.repo.NoteRepo

       Already loaded when the instance is created.

    .. attribute:: prefs
       :type: notease.prefs.PreferenceStore

    .. attribute:: session
       :type: notease.session.SessionStore

    Here's an example of how to use this class. This would print the title of every note tagged "work" that
    mentions "budget".

    .. code-block:: python

       from notease.api import Notease
       with Notease.for_user() as na:
           for note in na.repo.query('budget', 'work'):
               print(note.title)
    """

    @staticmethod
    def for_user() -> Notease:
        """Creates an instance using the user's ``~/.notease.conf.py`` file, or the default config."""
        return NoteaseConf.for_user().instantiate()

    def __init__(self, conf: NoteaseConf):
        self.conf = conf
        self.store = conf.store_conf.instantiate()
        self.repo = NoteRepo(self.store, conf.notes_key)
        self.prefs = PreferenceStore(self.store, conf.view_key)
        self.session = SessionStore(self.store, conf.session_key)
        self.repo.load()

    def new(self, inp: NoteInput) -> Note:
        """Creates a note, provided someone is logged in.

        Raises :exc:`Error` if there is no session. Searching and editing do not require one.
        """
        if not self.session.load():
            raise Error('Login to create notes.')
        return self.repo.create(inp)

    def edit(self, note_id: str, title: Optional[str] = None, content: Optional[str] = None,
             tags_raw: Optional[str] = None) -> Optional[Note]:
        """Updates the given fields of a note; any field left as None keeps its current value.

        Returns the updated note, or None if there is no note with that id.
        """
        note = self.repo.get(note_id)
        if not note:
            return None
        inp = NoteInput(title=note.title if title is None else title,
                        content=note.content if content is None else content,
                        tags_raw=', '.join(note.tags) if tags_raw is None else tags_raw)
        return self.repo.update(note_id, inp)

    def templates_by_name(self) -> Dict[str, str]:
        """Returns paths of note templates that are known based on the config.

        The name is the part of the filename before any `.` character. If multiple templates
        have the same name, the one whose path is lexicographically first will appear in the dict.
        """
        paths = [p for g in self.conf.template_globs for p in glob(g, recursive=True) if os.path.isfile(p)]
        paths.sort(reverse=True)
        return {os.path.split(p)[1].split('.')[0].lower(): p for p in paths}

    def template_for_name(self, name: str) -> Optional[str]:
        """Returns the path to the template for the given name, if one is found.

        If treating the name as a relative or absolute path leads to a file, that file is used.
        Otherwise, the name is looked up from :meth:`Notease.templates_by_name`, case-insensitively.
        Returns None if a matching template cannot be found.
        """
        if os.path.isfile(name):
            return name
        return self.templates_by_name().get(name.lower())

    def new_from_template(self, template_name: str, inp: NoteInput = None) -> Note:
        """Creates a new note whose content is rendered from the specified Mako template.

        The template name will be looked up using :meth:`template_for_name`.

        Raises :exc:`FileNotFoundError` if the template cannot be found, and :exc:`Error` if no one is logged in.

        The following names are defined in the template's namespace:

        * ``na``: this instance of :class:`Notease`
        * ``directives``: an instance of :class:`notease.models.TemplateDirectives`, holding the title and tags
          from ``inp``; the template may change them
        * ``template_path``: the path of the template being rendered

        The content of ``inp`` is ignored. Returns the created note.
        """
        template_path = self.template_for_name(template_name)
        if not (template_path and os.path.isfile(template_path)):
            raise FileNotFoundError(f'Template does not exist: {template_name}')
        inp = inp or NoteInput()
        template = Template(filename=os.path.abspath(template_path))
        td = TemplateDirectives(title=inp.title, tags_raw=inp.tags_raw)
        content = template.render(na=self, directives=td, template_path=template_path)
        logger.debug('Rendered template %s', template_path)
        return self.new(NoteInput(title=td.title, content=content, tags_raw=td.tags_raw))

    def close(self):
        """Closes the associated store and releases any other resources."""
        self.store.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
