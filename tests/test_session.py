import json
import pytest
from notease.models import Identity
from notease.session import SessionStore, DEFAULT_SESSION_KEY
from notease.stores.memory import MemoryStore


def test_load_absent():
    assert SessionStore(MemoryStore()).load() is None


@pytest.mark.parametrize('raw', ['not json', '[]', '{"name": "Jane"}', '{"email": ""}', 'null'])
def test_load_malformed(raw):
    store = MemoryStore({DEFAULT_SESSION_KEY: raw})
    assert SessionStore(store).load() is None


def test_save_and_load():
    store = MemoryStore()
    session = SessionStore(store)
    session.save(Identity('jane@example.com', 'Jane'))
    assert json.loads(store.get(DEFAULT_SESSION_KEY)) == {'email': 'jane@example.com', 'name': 'Jane'}
    assert session.load() == Identity('jane@example.com', 'Jane')

    session.save(Identity('bob@example.com'))
    assert json.loads(store.get(DEFAULT_SESSION_KEY)) == {'email': 'bob@example.com'}
    assert session.load() == Identity('bob@example.com')


def test_save_none_removes():
    store = MemoryStore()
    session = SessionStore(store)
    session.save(Identity('jane@example.com'))
    session.save(None)
    assert store.get(DEFAULT_SESSION_KEY) is None
    assert session.load() is None


def test_clear():
    store = MemoryStore()
    session = SessionStore(store)
    session.save(Identity('jane@example.com'))
    session.clear()
    assert store.get(DEFAULT_SESSION_KEY) is None
    session.clear()


def test_login():
    session = SessionStore(MemoryStore())
    assert session.login('  jane@example.com ', '  Jane ') == Identity('jane@example.com', 'Jane')
    assert session.load() == Identity('jane@example.com', 'Jane')
    assert session.login('bob@example.com', '  ') == Identity('bob@example.com')
    assert session.load() == Identity('bob@example.com')


def test_login_requires_email():
    session = SessionStore(MemoryStore())
    session.login('jane@example.com')
    with pytest.raises(ValueError, match='email is required'):
        session.login('   ', 'Nobody')
    assert session.load() == Identity('jane@example.com')
