import json
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from storage import keys
from storage.store import Store


def test_clear_store_removes_all_keys():
    store = Store()
    store.set(keys.SHOPS, '[]')
    store.set(keys.CURRENT_SALESMAN, '{}')

    call_command('clear_store', stdout=StringIO())

    assert store.keys() == []


def test_clear_store_single_key():
    store = Store()
    store.set(keys.SHOPS, '[]')
    store.set(keys.SALES, '[]')

    call_command('clear_store', '--key', keys.SALES, stdout=StringIO())

    assert store.keys() == [keys.SHOPS]


def test_import_store_skips_unknown_keys(tmp_path):
    dump = tmp_path / 'dump.json'
    dump.write_text(json.dumps({
        'shops': '[{"id": "shop-1", "name": "A"}]',
        'salesmen': [],
        'somethingElse': 'x',
    }), encoding='utf-8')

    call_command('import_store', str(dump), stdout=StringIO())

    store = Store()
    assert store.get_json(keys.SHOPS) == [{'id': 'shop-1', 'name': 'A'}]
    assert store.get(keys.SALESMEN) == '[]'
    assert store.get('somethingElse') is None


def test_import_store_rejects_invalid_json(tmp_path):
    dump = tmp_path / 'dump.json'
    dump.write_text('{oops', encoding='utf-8')

    with pytest.raises(CommandError):
        call_command('import_store', str(dump), stdout=StringIO())
