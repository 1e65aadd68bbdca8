"""
Salesman login and sessions.

Credentials are checked against the stored salesmen list: the username
match is case-insensitive and limited to active salesmen, the password is
verified against a salted Django password hash. A successful login creates
a SalesmanSession, which is what the rest of the application is handed
instead of reading flags back from storage.
"""

import hmac
import logging
import secrets
from datetime import timedelta

from django.contrib.auth.hashers import check_password, identify_hasher, make_password
from django.utils import timezone

from storage import keys
from storage.conf import vendorpro_setting
from storage.results import AUTH, NOT_FOUND, OperationResult
from storage.store import Store, StoreError

from .entities import SalesmanSession
from .repositories import SalesmanRepository

logger = logging.getLogger(__name__)

MISSING_CREDENTIALS = 'Please enter both username and password'
NO_SALESMEN = 'No salesmen found. Please contact your shop owner.'
NOT_FOUND_OR_INACTIVE = 'Salesman not found or account is inactive'
INVALID_PASSWORD = 'Invalid password'
LOGIN_FAILED = 'An error occurred during login. Please try again.'


def hash_password(raw_password):
    return make_password(raw_password)


def is_hashed(stored_password):
    if not stored_password:
        return False
    try:
        identify_hasher(stored_password)
    except ValueError:
        return False
    return True


def verify_password(raw_password, stored_password):
    if is_hashed(stored_password):
        return check_password(raw_password, stored_password)
    # plaintext written by older app builds
    return bool(stored_password) and hmac.compare_digest(
        raw_password.encode('utf-8'), stored_password.encode('utf-8')
    )


def authenticate_salesman(username, password, salesmen):
    """
    Check a username/password pair against ``salesmen``.

    Returns the matching active Salesman on success. The two user-facing
    failures are kept apart: no active salesman with that username, and a
    wrong password.
    """
    username = (username or '').strip()
    password = password or ''
    if not username or not password.strip():
        return OperationResult.invalid(MISSING_CREDENTIALS)

    if not salesmen:
        return OperationResult.failure(NO_SALESMEN, code=NOT_FOUND)

    wanted = username.lower()
    salesman = next(
        (s for s in salesmen if s.is_active and s.username.lower() == wanted),
        None,
    )
    if salesman is None:
        return OperationResult.failure(NOT_FOUND_OR_INACTIVE, code=NOT_FOUND)

    if not verify_password(password, salesman.password):
        return OperationResult.failure(INVALID_PASSWORD, code=AUTH, field='password')

    return OperationResult.success(salesman)


class SessionManager:
    """
    Creates, restores and ends salesman sessions.

    Every live session is kept under ``salesmanSessions``, keyed by token,
    so several salesmen can be logged in at once. ``currentSalesman`` holds
    the most recent login on this device.
    """

    def __init__(self, store=None, salesmen=None):
        self.store = store or Store()
        self.salesmen = salesmen if salesmen is not None else SalesmanRepository(self.store)

    def login(self, username, password):
        loaded = self.salesmen.load()
        if not loaded:
            return OperationResult.store_failure(LOGIN_FAILED)

        result = authenticate_salesman(username, password, self.salesmen.all())
        if not result:
            logger.info(f"[LOGIN FAILED] Username: {username!r} | Reason: {result.error}")
            return result

        salesman = result.value
        if not is_hashed(salesman.password):
            salesman = self._upgrade_password(salesman, password)

        session = self._issue(salesman)
        try:
            with self.store.atomic():
                sessions = self._live_sessions()
                sessions[session.token] = session.to_dict()
                self.store.set_json(keys.SALESMAN_SESSIONS, sessions)
                self.store.set_json(keys.CURRENT_SALESMAN, self._session_payload(salesman, session))
        except StoreError:
            logger.exception(f"[LOGIN ERROR] Could not persist session for {salesman.id}")
            return OperationResult.store_failure(LOGIN_FAILED)

        logger.info(f"[LOGIN] Salesman: {salesman.id} ({salesman.username}) | Expires: {session.expires_at.isoformat()}")
        return OperationResult.success(session)

    def current(self, now=None):
        """This device's session, or None when absent, expired or revoked."""
        try:
            data = self.store.get_json(keys.CURRENT_SALESMAN)
        except StoreError:
            logger.exception("[SESSION ERROR] Could not read current salesman")
            return None
        return self.resolve(self._token_of(data), now)

    def resolve(self, token, now=None):
        """The live session for ``token``, or None."""
        if not token:
            return None
        try:
            sessions = self.store.get_json(keys.SALESMAN_SESSIONS)
        except StoreError:
            logger.exception("[SESSION ERROR] Could not read salesman sessions")
            return None
        if not isinstance(sessions, dict) or not isinstance(sessions.get(token), dict):
            return None

        session = SalesmanSession.from_dict(sessions[token])
        if session is None or session.token != token or not session.is_valid(now):
            return None

        if not self.salesmen.ensure_loaded():
            return None
        salesman = self.salesmen.get(session.salesman_id)
        if salesman is None or not salesman.is_active:
            logger.info(f"[SESSION REVOKED] Salesman {session.salesman_id} missing or inactive")
            return None
        return session

    def current_salesman(self, now=None):
        session = self.current(now)
        if session is None:
            return None
        return self.salesmen.get(session.salesman_id)

    def logout(self, token=None):
        """
        End the session for ``token``; without one, end this device's
        current session. Other salesmen stay logged in.
        """
        try:
            with self.store.atomic():
                current_token = self._token_of(self.store.get_json(keys.CURRENT_SALESMAN))
                if token is None:
                    token = current_token

                sessions = self.store.get_json(keys.SALESMAN_SESSIONS)
                if isinstance(sessions, dict) and token in sessions:
                    del sessions[token]
                    self.store.set_json(keys.SALESMAN_SESSIONS, sessions)

                if token is None or token == current_token:
                    self.store.remove(keys.CURRENT_SALESMAN)
                self.store.remove(keys.LEGACY_SALESMAN_AUTHENTICATED)
        except StoreError:
            logger.exception("[LOGOUT ERROR] Could not clear salesman session")
            return OperationResult.store_failure()
        logger.info("[LOGOUT] Salesman session cleared")
        return OperationResult.success()

    # ============================================
    # INTERNALS
    # ============================================

    def _live_sessions(self, now=None):
        # expired entries are dropped whenever the map is rewritten
        sessions = self.store.get_json(keys.SALESMAN_SESSIONS)
        if not isinstance(sessions, dict):
            return {}
        live = {}
        for token, data in sessions.items():
            session = SalesmanSession.from_dict(data) if isinstance(data, dict) else None
            if session is not None and session.is_valid(now):
                live[token] = data
        return live

    @staticmethod
    def _token_of(data):
        if not isinstance(data, dict) or not isinstance(data.get('session'), dict):
            return None
        return data['session'].get('token')

    def _issue(self, salesman):
        issued_at = timezone.now()
        ttl = int(vendorpro_setting('SALESMAN_SESSION_TTL'))
        return SalesmanSession(
            token=secrets.token_urlsafe(32),
            salesman_id=salesman.id,
            shop_id=salesman.shop_id,
            issued_at=issued_at,
            expires_at=issued_at + timedelta(seconds=ttl),
        )

    def _session_payload(self, salesman, session):
        payload = salesman.public_dict()
        payload['session'] = session.to_dict()
        return payload

    def _upgrade_password(self, salesman, raw_password):
        upgraded = salesman.changed(password=hash_password(raw_password))
        result = self.salesmen.update(upgraded)
        if result:
            logger.info(f"[PASSWORD UPGRADED] Salesman {salesman.id} moved from plaintext to hash")
            return upgraded
        logger.warning(f"[PASSWORD UPGRADE FAILED] Salesman {salesman.id}: {result.error}")
        return salesman


def generate_password(length=None):
    length = length or vendorpro_setting('GENERATED_PASSWORD_LENGTH')
    alphabet = 'ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnpqrstuvwxyz23456789'
    return ''.join(secrets.choice(alphabet) for _ in range(length))


def generate_username(name, taken=None):
    """
    First name, plus the initial of the last name, plus a number under 100.

    ``taken`` is an optional predicate used to retry on collisions.
    """
    parts = (name or '').strip().lower().split()
    if not parts:
        return ''
    base = parts[0] + (parts[-1][0] if len(parts) > 1 else '')

    for _ in range(20):
        candidate = f"{base}{secrets.randbelow(100)}"
        if taken is None or not taken(candidate):
            return candidate
    return f"{base}{secrets.token_hex(3)}"
