from datetime import timedelta
from decimal import Decimal

from django.test import TestCase, override_settings

from storage import keys
from storage.results import AUTH, NOT_FOUND, VALIDATION
from storage.store import Store
from users.auth import (
    INVALID_PASSWORD, MISSING_CREDENTIALS, NO_SALESMEN, NOT_FOUND_OR_INACTIVE,
    SessionManager, authenticate_salesman, generate_password, generate_username,
    hash_password, is_hashed,
)
from users.entities import Salesman
from users.repositories import SalesmanRepository


def make_salesman(username='raj', password='abc123', is_active=True, hashed=True):
    return Salesman.create(
        shop_id='shop-1',
        name='Raj Kumar',
        mobile='9123456789',
        username=username,
        password=hash_password(password) if hashed else password,
        commission_rate=Decimal('10'),
        is_active=is_active,
    )


class AuthenticateSalesmanTests(TestCase):
    def test_username_match_is_case_insensitive(self):
        raj = make_salesman()
        result = authenticate_salesman('RAJ', 'abc123', [raj])

        self.assertTrue(result.ok)
        self.assertEqual(result.value, raj)

    def test_inactive_salesman_cannot_log_in(self):
        raj = make_salesman(is_active=False)
        for password in ('abc123', 'wrong'):
            with self.subTest(password=password):
                result = authenticate_salesman('raj', password, [raj])
                self.assertFalse(result.ok)
                self.assertEqual(result.code, NOT_FOUND)
                self.assertEqual(result.error, NOT_FOUND_OR_INACTIVE)

    def test_wrong_password(self):
        result = authenticate_salesman('raj', 'nope', [make_salesman()])
        self.assertEqual(result.code, AUTH)
        self.assertEqual(result.error, INVALID_PASSWORD)

    def test_missing_credentials(self):
        for username, password in (('', 'abc123'), ('raj', ''), ('  ', '  ')):
            result = authenticate_salesman(username, password, [make_salesman()])
            self.assertEqual(result.code, VALIDATION)
            self.assertEqual(result.error, MISSING_CREDENTIALS)

    def test_no_salesmen(self):
        result = authenticate_salesman('raj', 'abc123', [])
        self.assertEqual(result.error, NO_SALESMEN)

    def test_legacy_plaintext_password(self):
        raj = make_salesman(hashed=False)
        self.assertFalse(is_hashed(raj.password))
        self.assertTrue(authenticate_salesman('raj', 'abc123', [raj]).ok)
        self.assertFalse(authenticate_salesman('raj', 'abc12', [raj]).ok)


class SessionManagerTests(TestCase):
    def setUp(self):
        self.store = Store()
        self.salesmen = SalesmanRepository(self.store)
        self.raj = make_salesman()
        self.salesmen.add(self.raj)

    def test_login_persists_session(self):
        result = SessionManager(self.store).login('Raj', 'abc123')

        self.assertTrue(result.ok)
        session = result.value
        self.assertEqual(session.salesman_id, self.raj.id)
        self.assertEqual(session.shop_id, 'shop-1')

        stored = self.store.get_json(keys.CURRENT_SALESMAN)
        self.assertEqual(stored['id'], self.raj.id)
        self.assertNotIn('password', stored)
        self.assertEqual(stored['session']['token'], session.token)

        manager = SessionManager(self.store)
        self.assertEqual(manager.current(), session)
        self.assertEqual(manager.current_salesman().id, self.raj.id)

    @override_settings(VENDORPRO={'SALESMAN_SESSION_TTL': 60})
    def test_expired_session_is_not_returned(self):
        session = SessionManager(self.store).login('raj', 'abc123').value
        self.assertEqual(session.expires_at - session.issued_at, timedelta(seconds=60))

        manager = SessionManager(self.store)
        self.assertIsNone(manager.current(now=session.expires_at))
        self.assertIsNone(manager.current(now=session.expires_at + timedelta(hours=1)))
        self.assertEqual(manager.current(now=session.issued_at + timedelta(seconds=30)), session)

    def test_deactivated_salesman_loses_session(self):
        SessionManager(self.store).login('raj', 'abc123')
        self.salesmen.update(self.raj.changed(is_active=False))

        self.assertIsNone(SessionManager(self.store).current())

    def test_resolve_checks_token(self):
        session = SessionManager(self.store).login('raj', 'abc123').value
        manager = SessionManager(self.store)

        self.assertEqual(manager.resolve(session.token), session)
        self.assertIsNone(manager.resolve('not-the-token'))
        self.assertIsNone(manager.resolve(''))

    def test_failed_login_writes_nothing(self):
        result = SessionManager(self.store).login('raj', 'bad')

        self.assertFalse(result.ok)
        self.assertIsNone(self.store.get(keys.CURRENT_SALESMAN))

    def test_logout_removes_session_and_legacy_flag(self):
        SessionManager(self.store).login('raj', 'abc123')
        self.store.set(keys.LEGACY_SALESMAN_AUTHENTICATED, 'true')

        self.assertTrue(SessionManager(self.store).logout().ok)

        self.assertIsNone(self.store.get(keys.CURRENT_SALESMAN))
        self.assertIsNone(self.store.get(keys.LEGACY_SALESMAN_AUTHENTICATED))
        self.assertIsNone(SessionManager(self.store).current())

    def test_concurrent_sessions_resolve_independently(self):
        vik = make_salesman(username='vik', password='pass99')
        vik.mobile = '9000000002'
        self.salesmen.add(vik)

        raj_session = SessionManager(self.store).login('raj', 'abc123').value
        vik_session = SessionManager(self.store).login('vik', 'pass99').value

        manager = SessionManager(self.store)
        self.assertEqual(manager.resolve(raj_session.token), raj_session)
        self.assertEqual(manager.resolve(vik_session.token), vik_session)
        self.assertEqual(manager.current(), vik_session)

        self.assertTrue(manager.logout(raj_session.token).ok)

        self.assertIsNone(manager.resolve(raj_session.token))
        self.assertEqual(manager.resolve(vik_session.token), vik_session)
        self.assertEqual(manager.current(), vik_session)

    def test_expired_sessions_are_dropped_on_next_login(self):
        stale = SessionManager(self.store).login('raj', 'abc123').value
        stored = self.store.get_json(keys.SALESMAN_SESSIONS)
        stored[stale.token]['expiresAt'] = (stale.issued_at - timedelta(seconds=1)).isoformat()
        self.store.set_json(keys.SALESMAN_SESSIONS, stored)

        fresh = SessionManager(self.store).login('raj', 'abc123').value

        self.assertEqual(list(self.store.get_json(keys.SALESMAN_SESSIONS)), [fresh.token])

    def test_plaintext_password_is_upgraded_on_login(self):
        legacy = make_salesman(username='meena', password='secret', hashed=False)
        legacy.mobile = '9000000001'
        self.salesmen.add(legacy)

        self.assertTrue(SessionManager(self.store).login('meena', 'secret').ok)

        reloaded = SalesmanRepository(self.store)
        reloaded.load()
        stored = reloaded.get(legacy.id).password
        self.assertNotEqual(stored, 'secret')
        self.assertTrue(is_hashed(stored))
        self.assertTrue(SessionManager(self.store).login('meena', 'secret').ok)


class CredentialGeneratorTests(TestCase):
    def test_generate_username(self):
        username = generate_username('Raj Kumar')
        self.assertTrue(username.startswith('rajk'))
        self.assertTrue(username[4:].isdigit())
        self.assertEqual(generate_username('  '), '')

    def test_generate_username_avoids_taken_names(self):
        taken = {f'raj{n}' for n in range(100) if n != 42}
        username = generate_username('Raj', taken=taken.__contains__)
        self.assertTrue(username.startswith('raj'))
        self.assertNotIn(username, taken)

    def test_generate_password(self):
        self.assertEqual(len(generate_password()), 8)
        self.assertEqual(len(generate_password(12)), 12)
