from io import StringIO

from django.core.management import call_command

from storage import keys
from storage.store import Store
from users.auth import is_hashed, verify_password


def test_hash_salesman_passwords_upgrades_plaintext():
    store = Store()
    store.set_json(keys.SALESMEN, [
        {'id': 'salesman-1', 'shopId': 'shop-1', 'name': 'Raj', 'mobile': '9123456789',
         'username': 'raj', 'password': 'abc123', 'commissionRate': 10, 'isActive': True},
    ])

    out = StringIO()
    call_command('hash_salesman_passwords', stdout=out)

    stored = store.get_json(keys.SALESMEN)[0]['password']
    assert is_hashed(stored)
    assert verify_password('abc123', stored)
    assert 'Hashed 1 password(s)' in out.getvalue()

    out = StringIO()
    call_command('hash_salesman_passwords', stdout=out)
    assert 'already hashed' in out.getvalue()
