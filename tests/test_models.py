from datetime import datetime, timezone
import pytest
from freezegun import freeze_time

from notease.models import Note, NoteInput, NoteQuery, Identity, ViewMode, normalize_title, parse_tags, \
    query_notes, now_millis


def sample_notes():
    return [
        Note('tokyo', 'Trip to Tokyo', 'Flights and hotels', ['travel', 'japan'], created_at=100, updated_at=100),
        Note('budget', 'Budget', 'Q3 numbers', ['work'], created_at=200, updated_at=200),
    ]


def test_normalize_title():
    assert normalize_title('  Hello ') == 'Hello'
    assert normalize_title('   ') == 'Untitled'
    assert normalize_title('') == 'Untitled'
    assert normalize_title(None) == 'Untitled'


def test_parse_tags():
    assert parse_tags(' work, ,Travel,work,') == ['work', 'Travel', 'work']
    assert parse_tags('') == []
    assert parse_tags(' , ') == []
    assert parse_tags(None) == []


def test_note_input():
    inp = NoteInput(title='  ', content='  body \n', tags_raw='a, b')
    assert inp.normalized_title() == 'Untitled'
    assert inp.normalized_content() == 'body'
    assert inp.tags() == ['a', 'b']


@freeze_time('2012-05-02T03:04:05Z')
def test_now_millis():
    assert now_millis() == int(datetime(2012, 5, 2, 3, 4, 5, tzinfo=timezone.utc).timestamp() * 1000)


def test_note_json():
    note = Note('abc', 'Title', 'Body', ['X', 'y'], created_at=1336000000000, updated_at=1336000001000)
    assert note.as_json() == {
        'id': 'abc',
        'title': 'Title',
        'content': 'Body',
        'tags': ['X', 'y'],
        'createdAt': 1336000000000,
        'updatedAt': 1336000001000
    }
    assert Note.from_json(note.as_json()) == note
    assert note.created == datetime(2012, 5, 2, 23, 6, 40, tzinfo=timezone.utc)


def test_note_from_json_normalizes():
    note = Note.from_json({'id': 'a', 'title': ' ', 'tags': ['ok', ' '], 'createdAt': 5, 'updatedAt': 3})
    assert note == Note('a', 'Untitled', '', ['ok'], created_at=5, updated_at=5)


@pytest.mark.parametrize('data', [
    'not a dict',
    [],
    {'title': 'no id', 'createdAt': 1, 'updatedAt': 1},
    {'id': '', 'title': 'empty id', 'createdAt': 1, 'updatedAt': 1},
    {'id': 'a', 'title': 7, 'createdAt': 1, 'updatedAt': 1},
    {'id': 'a', 'title': 't', 'tags': 'work', 'createdAt': 1, 'updatedAt': 1},
    {'id': 'a', 'title': 't', 'tags': [1], 'createdAt': 1, 'updatedAt': 1},
    {'id': 'a', 'title': 't', 'updatedAt': 1},
    {'id': 'a', 'title': 't', 'createdAt': '1', 'updatedAt': 1},
    {'id': 'a', 'title': 't', 'createdAt': True, 'updatedAt': 1},
])
def test_note_from_json_rejects_malformed(data):
    with pytest.raises(ValueError):
        Note.from_json(data)


def test_identity():
    ident = Identity('jane@example.com', 'Jane')
    assert ident.initial == 'J'
    assert ident.display_name == 'Jane'
    assert ident.as_json() == {'email': 'jane@example.com', 'name': 'Jane'}
    assert Identity.from_json(ident.as_json()) == ident

    ident = Identity('bob@example.com')
    assert ident.display_name == 'bob@example.com'
    assert ident.as_json() == {'email': 'bob@example.com'}
    assert Identity.from_json({'email': 'bob@example.com', 'name': ''}) == ident
    assert Identity.from_json({'email': 'bob@example.com', 'name': 12}) == ident


def test_identity_from_json_requires_email():
    for data in [None, 'x', {}, {'email': ''}, {'email': '  '}, {'email': 3}, {'name': 'Jane'}]:
        with pytest.raises(ValueError):
            Identity.from_json(data)


def test_view_mode_toggled():
    assert ViewMode.GRID.toggled() == ViewMode.LIST
    assert ViewMode.LIST.toggled() == ViewMode.GRID


def test_query_normalizes():
    assert NoteQuery('  ToKyo ', ' WORK') == NoteQuery('tokyo', 'work')
    assert NoteQuery(None, None) == NoteQuery()


def test_parse_query():
    assert NoteQuery.parse('tag:Work budget  report') == NoteQuery(text='budget report', tag='work')
    assert NoteQuery.parse('tag:road+trip') == NoteQuery(tag='road trip')
    assert NoteQuery.parse('tag:a tag:b') == NoteQuery(tag='b')
    assert NoteQuery.parse('') == NoteQuery()
    expected = NoteQuery('x')
    assert NoteQuery.parse(expected) is expected


def test_query_text_matches_title_content_and_tags():
    notes = sample_notes()
    assert query_notes(notes, 'tokyo') == [notes[0]]
    assert query_notes(notes, 'HOTEL') == [notes[0]]
    assert query_notes(notes, 'jap') == [notes[0]]
    assert query_notes(notes, 'q3') == [notes[1]]
    assert query_notes(notes, 'nowhere') == []


def test_query_tag_is_exact():
    notes = sample_notes()
    assert query_notes(notes, '', 'work') == [notes[1]]
    assert query_notes(notes, '', ' WORK ') == [notes[1]]
    assert query_notes(notes, '', 'wor') == []
    assert query_notes(notes, '', 'japan') == [notes[0]]


def test_query_combines_with_and():
    notes = sample_notes()
    assert query_notes(notes, 'budget', 'travel') == []
    assert query_notes(notes, 'trip', 'travel') == [notes[0]]


def test_query_sorts_by_updated_descending():
    notes = sample_notes()
    assert query_notes(notes) == [notes[1], notes[0]]
    assert query_notes(list(reversed(notes))) == [notes[1], notes[0]]


def test_sorting_keeps_collection_order_for_ties():
    data = [
        Note('a', 'A', updated_at=5),
        Note('b', 'B', updated_at=9),
        Note('c', 'C', updated_at=5),
        Note('d', 'D', updated_at=5),
    ]
    assert NoteQuery().apply_sorting(data) == [data[1], data[0], data[2], data[3]]
    reordered = [data[3], data[2], data[1], data[0]]
    assert NoteQuery().apply_sorting(reordered) == [data[1], data[3], data[2], data[0]]


def test_query_does_not_modify_collection():
    notes = sample_notes()
    before = list(notes)
    query_notes(notes, '', '')
    assert notes == before
