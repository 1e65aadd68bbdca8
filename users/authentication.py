import logging

from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication, get_authorization_header
from rest_framework.permissions import BasePermission

from .auth import SessionManager

logger = logging.getLogger(__name__)


class SalesmanPrincipal:
    """``request.user`` for a request carrying a valid salesman session."""

    is_authenticated = True
    is_anonymous = False

    def __init__(self, salesman, session):
        self.salesman = salesman
        self.session = session

    @property
    def username(self):
        return self.salesman.username

    def __str__(self):
        return self.salesman.username


class SalesmanSessionAuthentication(BaseAuthentication):
    """
    Salesman authentication from an ``Authorization`` header:

        Authorization: Session 9f1c0d...

    The token is the one handed out by the login endpoint. It is only
    accepted while the stored session is valid and the salesman is active.
    """

    keyword = 'Session'

    def authenticate(self, request):
        auth = get_authorization_header(request).split()
        if not auth or auth[0].lower() != self.keyword.lower().encode():
            return None

        if len(auth) != 2:
            raise exceptions.AuthenticationFailed('Invalid session header.')
        try:
            token = auth[1].decode()
        except UnicodeError:
            raise exceptions.AuthenticationFailed('Invalid session header.')

        manager = SessionManager()
        session = manager.resolve(token)
        if session is None:
            logger.info("[AUTH] Rejected expired or unknown session token")
            raise exceptions.AuthenticationFailed('Session expired. Please log in again.')

        salesman = manager.salesmen.get(session.salesman_id)
        return SalesmanPrincipal(salesman, session), session

    def authenticate_header(self, request):
        return self.keyword


class IsSalesman(BasePermission):
    message = 'Please log in as a salesman.'

    def has_permission(self, request, view):
        return isinstance(request.user, SalesmanPrincipal)
