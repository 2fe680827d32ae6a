import pytest

from flexlang.storage import ProgramStore, StorageError


def test_save_and_find(tmp_path):
    store = ProgramStore(tmp_path / 'store')
    record = store.save('hello', 'etb3("hi");')
    assert store.find('hello') == record
    assert store.get(record.identifier).source == 'etb3("hi");'
    assert store.find('missing') is None
    # A second store on the same directory sees the saved record
    assert ProgramStore(tmp_path / 'store').find('hello').identifier == record.identifier


def test_saving_same_name_replaces_source(tmp_path):
    store = ProgramStore(tmp_path)
    first = store.save('demo', 'etb3(1);')
    second = store.save('demo', 'etb3(2);')
    assert first.identifier == second.identifier
    assert [r.source for r in store.list()] == ['etb3(2);']


def test_list_is_newest_first(tmp_path):
    store = ProgramStore(tmp_path)
    store.save('a', '')
    store.save('b', '')
    store.save('a', 'etb3("again");')
    assert [r.name for r in store.list()] == ['a', 'b']


def test_rename(tmp_path):
    store = ProgramStore(tmp_path)
    a = store.save('a', '')
    store.save('b', '')
    assert store.rename(a.identifier, 'c').name == 'c'
    assert store.find('a') is None
    assert store.rename(a.identifier, 'c').name == 'c'
    with pytest.raises(StorageError):
        store.rename(a.identifier, 'b')
    with pytest.raises(StorageError):
        store.rename('nope', 'x')


def test_delete(tmp_path):
    store = ProgramStore(tmp_path)
    record = store.save('gone', '')
    assert store.delete(record.identifier) == 'gone'
    assert store.delete(record.identifier) is None
    assert store.list() == []


def test_empty_name_is_refused(tmp_path):
    with pytest.raises(StorageError):
        ProgramStore(tmp_path).save('  ', 'etb3(1);')


def test_corrupt_store_file(tmp_path):
    (tmp_path / 'programs.json').write_text('{not json')
    with pytest.raises(StorageError):
        ProgramStore(tmp_path).list()
