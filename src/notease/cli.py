"""Command-line interface for notease."""


import argparse
import json
import logging
import sys
from typing import List

from terminaltables import AsciiTable

from notease.api import Notease, Error
from notease.models import Note, NoteInput, ViewMode


def _format_time(note_time) -> str:
    return note_time.strftime('%Y-%m-%d %H:%M:%S')


def _print_note(note: Note) -> None:
    print(f'id: {note.id}')
    print(f'title: {note.title}')
    print(f'tags: {", ".join(note.tags)}')
    print(f'created: {_format_time(note.created)}')
    print(f'updated: {_format_time(note.updated)}')
    if note.content:
        print('content:')
        for line in note.content.splitlines():
            print(f'\t{line}')


def _print_grid(notes: List[Note]) -> None:
    for note in notes:
        print('--------------------')
        print(note.title)
        if note.tags:
            print(' '.join(f'#{t}' for t in note.tags))
        if note.content:
            print(note.content)
        print(f'Updated: {_format_time(note.updated)}  [{note.id}]')


def _print_list(notes: List[Note]) -> None:
    data = [('ID', 'Title', 'Tags', 'Updated')]
    data.extend((n.id, n.title, '\n'.join(n.tags), _format_time(n.updated)) for n in notes)
    print(AsciiTable(data).table)


def _new(args, na: Notease) -> int:
    inp = NoteInput(title=args.title or '', content=args.content or '', tags_raw=args.tags or '')
    if args.template:
        note = na.new_from_template(args.template, inp)
    else:
        note = na.new(inp)
    if args.json:
        print(json.dumps(note.as_json()))
    else:
        print(f'Created {note.id}')
    return 0


def _edit(args, na: Notease) -> int:
    note = na.edit(args.id, title=args.title, content=args.content, tags_raw=args.tags)
    if not note:
        print(f'No note with id {args.id}', file=sys.stderr)
        return 1
    return 0


def _rm(args, na: Notease) -> int:
    for note_id in args.ids:
        na.repo.delete(note_id)
    return 0


def _info(args, na: Notease) -> int:
    note = na.repo.get(args.id)
    if not note:
        print(f'No note with id {args.id}', file=sys.stderr)
        return 1
    if args.json:
        print(json.dumps(note.as_json()))
    else:
        _print_note(note)
    return 0


def _query(args, na: Notease) -> int:
    notes = na.repo.query(' '.join(args.text), args.tag or '')
    if args.json:
        print(json.dumps([n.as_json() for n in notes]))
    elif not notes:
        print('No notes found.')
    elif args.table or na.prefs.load() == ViewMode.LIST:
        _print_list(notes)
    else:
        _print_grid(notes)
    return 0


def _tags(args, na: Notease) -> int:
    counts = na.repo.tag_counts(' '.join(args.query))
    if args.json:
        print(json.dumps(counts))
    else:
        tags = sorted(counts.keys())
        data = [('Tag', 'Count')] + [(t, str(counts[t])) for t in tags]
        table = AsciiTable(data)
        table.justify_columns[1] = 'right'
        print(table.table)
    return 0


def _view(args, na: Notease) -> int:
    if args.mode == 'toggle':
        mode = na.prefs.toggle()
    elif args.mode:
        mode = ViewMode(args.mode)
        na.prefs.save(mode)
    else:
        mode = na.prefs.load()
    print(mode.value)
    return 0


def _login(args, na: Notease) -> int:
    try:
        identity = na.session.login(args.email, args.name)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1
    print(f'Logged in as {identity.email}')
    return 0


def _logout(args, na: Notease) -> int:
    na.session.clear()
    return 0


def _whoami(args, na: Notease) -> int:
    identity = na.session.load()
    if args.json:
        print(json.dumps(identity.as_json() if identity else None))
    elif identity:
        name = f' ({identity.name})' if identity.name else ''
        print(f'[{identity.initial}] {identity.email}{name}')
    else:
        print(f'Not logged in to {na.conf.app_name}.')
    return 0


def argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser()
    parser.set_defaults(func=None)
    parser.add_argument('-v', '--verbose', action='store_true', help='Log details to stderr.')

    subs = parser.add_subparsers(title='Commands')

    p_new = subs.add_parser('new', help='Create a note and print its id. You must be logged in.')
    p_new.add_argument('-t', '--title', help='Title. Defaults to "Untitled".')
    p_new.add_argument('-c', '--content', help='Body text.')
    p_new.add_argument('-g', '--tags', help='Comma-separated list of tags, e.g. "travel, japan".')
    p_new.add_argument('--template',
                       help='Render the content from a Mako template. You can either specify the path to the '
                            'template, or just give its name without file extensions if it matches '
                            'template_globs in your ~/.notease.conf.py file.')
    p_new.add_argument('-j', '--json', action='store_true', help='Print the created note as JSON.')
    p_new.set_defaults(func=_new)

    p_edit = subs.add_parser('edit', help='Change a note. Fields that are not given keep their current value.')
    p_edit.add_argument('id')
    p_edit.add_argument('-t', '--title', help='New title.')
    p_edit.add_argument('-c', '--content', help='New body text.')
    p_edit.add_argument('-g', '--tags', help='New comma-separated list of tags, replacing the old ones.')
    p_edit.set_defaults(func=_edit)

    p_rm = subs.add_parser('rm', help='Delete notes. Ids that do not exist are ignored.')
    p_rm.add_argument('ids', nargs='+')
    p_rm.set_defaults(func=_rm)

    p_i = subs.add_parser('info', help='Show everything about a note.')
    p_i.add_argument('id')
    p_i.add_argument('-j', '--json', action='store_true', help='Output as JSON.')
    p_i.set_defaults(func=_info)

    p_q = subs.add_parser(
        'query',
        help='Search notes, most recently updated first. Text matches anywhere in the title, content, or tags; '
             '--tag must match one whole tag. Both ignore case. Output uses the saved view mode.')
    p_q.add_argument('text', nargs='*', help='Search text. If omitted, all notes match.')
    p_q.add_argument('--tag', help='Only show notes with exactly this tag.')
    p_q_formats = p_q.add_mutually_exclusive_group()
    p_q_formats.add_argument('-j', '--json', help='Output as JSON.', action='store_true')
    p_q_formats.add_argument('-t', '--table', help='Format output as a table.', action='store_true')
    p_q.set_defaults(func=_query)

    p_tags = subs.add_parser('tags', help='Show a list of tags and the number of notes that have each tag.')
    p_tags.add_argument('query', nargs='*',
                        help='Query to filter notes by, e.g. "tag:work budget". If omitted, all notes are counted.')
    p_tags.add_argument('-j', '--json', action='store_true',
                        help='Output as JSON. The output is an object whose keys are tags and whose values '
                             'are the number of notes that matched the query and also possess that tag.')
    p_tags.set_defaults(func=_tags)

    p_view = subs.add_parser('view', help='Show or change whether query results are shown as a grid or a list.')
    p_view.add_argument('mode', nargs='?', choices=['grid', 'list', 'toggle'])
    p_view.set_defaults(func=_view)

    p_login = subs.add_parser('login', help='Set the identity notes are created under. No password is involved.')
    p_login.add_argument('email')
    p_login.add_argument('name', nargs='?', help='Optional display name.')
    p_login.set_defaults(func=_login)

    p_logout = subs.add_parser('logout', help='Forget the current identity.')
    p_logout.set_defaults(func=_logout)

    p_whoami = subs.add_parser('whoami', help='Show the current identity.')
    p_whoami.add_argument('-j', '--json', action='store_true', help='Output as JSON.')
    p_whoami.set_defaults(func=_whoami)

    return parser


def main(args=None) -> int:
    """Runs the tool and returns its exit code.

    args may be an array of string command-line arguments; if absent,
    the process's arguments are used.
    """
    parser = argparser()
    args = parser.parse_args(args)
    if not args.func:
        parser.print_help()
        return 1
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')
    with Notease.for_user() as na:
        try:
            return args.func(args, na)
        except (Error, FileNotFoundError) as e:
            print(str(e), file=sys.stderr)
            return 1
