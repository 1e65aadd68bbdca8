import json
import logging
from contextlib import contextmanager

from django.core.serializers.json import DjangoJSONEncoder
from django.db import DatabaseError, transaction

from .models import StoredValue

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """A read or write against the local store failed."""

    def __init__(self, message, key=None, operation=None):
        super().__init__(message)
        self.key = key
        self.operation = operation


class Store:
    """
    Key-value store holding one JSON string per key.

    Calls against different keys are independent writes. Use
    ``atomic()`` when several keys must change together.
    """

    def get(self, key):
        try:
            row = StoredValue.objects.filter(key=key).only('value').first()
        except DatabaseError as e:
            logger.exception(f"[STORE ERROR] get failed | Key: {key}")
            raise StoreError(f"Could not read '{key}'", key=key, operation='get') from e
        return row.value if row is not None else None

    def set(self, key, value):
        if not isinstance(value, str):
            raise TypeError(f"Store values must be strings, got {type(value).__name__}")
        try:
            StoredValue.objects.update_or_create(key=key, defaults={'value': value})
        except DatabaseError as e:
            logger.exception(f"[STORE ERROR] set failed | Key: {key}")
            raise StoreError(f"Could not write '{key}'", key=key, operation='set') from e
        logger.debug(f"[STORE] set {key} ({len(value)} chars)")

    def remove(self, key):
        try:
            StoredValue.objects.filter(key=key).delete()
        except DatabaseError as e:
            logger.exception(f"[STORE ERROR] remove failed | Key: {key}")
            raise StoreError(f"Could not remove '{key}'", key=key, operation='remove') from e
        logger.debug(f"[STORE] removed {key}")

    def keys(self):
        try:
            return list(StoredValue.objects.values_list('key', flat=True))
        except DatabaseError as e:
            raise StoreError("Could not list keys", operation='keys') from e

    # ============================================
    # JSON HELPERS
    # ============================================

    def get_json(self, key, default=None):
        raw = self.get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError as e:
            logger.error(f"[STORE ERROR] corrupt JSON under '{key}': {e}")
            raise StoreError(f"Corrupt data under '{key}'", key=key, operation='get') from e

    def set_json(self, key, data):
        self.set(key, json.dumps(data, cls=DjangoJSONEncoder))

    @contextmanager
    def atomic(self):
        """All store writes inside the block commit together or not at all."""
        with transaction.atomic():
            yield self
