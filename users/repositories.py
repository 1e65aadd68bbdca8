import logging

from storage import keys
from storage.repository import JsonRepository
from storage.results import OperationResult
from storage.store import Store, StoreError

from .entities import OwnerProfile, Salesman

logger = logging.getLogger(__name__)


class SalesmanRepository(JsonRepository):
    key = keys.SALESMEN
    entity_class = Salesman
    label = 'salesman'

    def for_shop(self, shop_id):
        return [salesman for salesman in self._items if salesman.shop_id == shop_id]

    def active(self):
        return [salesman for salesman in self._items if salesman.is_active]

    def username_taken(self, username, exclude_id=None):
        username = (username or '').strip().lower()
        return any(
            salesman.is_active
            and salesman.username.lower() == username
            and salesman.id != exclude_id
            for salesman in self._items
        )

    def mobile_taken(self, mobile, exclude_id=None):
        return any(
            salesman.mobile == mobile and salesman.id != exclude_id
            for salesman in self._items
        )


class OwnerProfileRepository:
    """The shop owner's profile, a single object under the ``user`` key."""

    def __init__(self, store=None):
        self.store = store or Store()

    def profile(self):
        try:
            data = self.store.get_json(keys.OWNER_PROFILE)
        except StoreError:
            logger.exception("[LOAD ERROR] Could not read owner profile")
            return OperationResult.store_failure("Failed to load profile")
        return OperationResult.success(OwnerProfile.from_dict(data) if isinstance(data, dict) else None)

    def save(self, profile):
        try:
            self.store.set_json(keys.OWNER_PROFILE, profile.to_dict())
        except StoreError:
            logger.exception("[SAVE ERROR] Could not write owner profile")
            return OperationResult.store_failure('Failed to update profile')
        return OperationResult.success(profile)

    def clear(self):
        try:
            self.store.remove(keys.OWNER_PROFILE)
        except StoreError:
            logger.exception("[SAVE ERROR] Could not remove owner profile")
            return OperationResult.store_failure()
        return OperationResult.success()
