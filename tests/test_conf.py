import os.path
from pathlib import Path
import pytest
from notease.conf import NoteaseConf, JsonFileStoreConf, SqliteStoreConf, MemoryStoreConf, StoreConf
from notease.stores.jsonfile import JsonFileStore
from notease.stores.memory import MemoryStore


def test_for_user_no_file(fs):
    conf = NoteaseConf.for_user()
    assert conf == NoteaseConf.default()
    assert conf.standardize().store_conf == JsonFileStoreConf(path=os.path.expanduser('~/.notease.json'))


def test_for_user(fs):
    confpy = """from notease.conf import *
conf = NoteaseConf(store_conf=JsonFileStoreConf(path='/notes/data.json'), app_name='My Notes')"""
    fs.create_file(os.path.expanduser('~/.notease.conf.py'), contents=confpy)
    conf = NoteaseConf.for_user()
    assert conf == NoteaseConf(store_conf=JsonFileStoreConf(path='/notes/data.json'), app_name='My Notes')


def test_for_user_without_conf(fs):
    fs.create_file(os.path.expanduser('~/.notease.conf.py'), contents='x = 1')
    with pytest.raises(Exception, match=r'You need to assign an instance of NoteaseConf .*\.notease\.conf\.py'):
        NoteaseConf.for_user()


def test_app_name(monkeypatch):
    monkeypatch.delenv('NOTEASE_APP_NAME', raising=False)
    assert NoteaseConf(MemoryStoreConf()).app_name == 'NoteEase'
    monkeypatch.setenv('NOTEASE_APP_NAME', 'Jotter')
    assert NoteaseConf(MemoryStoreConf()).app_name == 'Jotter'


def test_standardize(fs):
    fs.create_dir('/notes')
    os.chdir('/notes')
    conf = NoteaseConf(store_conf=JsonFileStoreConf(path='data.json'), template_globs={'~/templates/*.mako'})
    conf = conf.standardize()
    assert conf.store_conf.path == '/notes/data.json'
    assert conf.template_globs == {os.path.expanduser('~/templates/*.mako')}
    assert SqliteStoreConf(path=':memory:').standardize().path == ':memory:'
    assert SqliteStoreConf(path='db.sqlite3').standardize().path == '/notes/db.sqlite3'


def test_instantiate_stores(fs):
    assert isinstance(MemoryStoreConf().instantiate(), MemoryStore)
    store = JsonFileStoreConf(path='/notes/data.json').instantiate()
    assert isinstance(store, JsonFileStore)
    store.set('k', 'v')
    assert Path('/notes/data.json').exists()
    with pytest.raises(NotImplementedError):
        StoreConf().instantiate()
