import logging

from sales.repositories import SaleRepository
from storage.results import OperationResult
from storage.store import Store

from .auth import hash_password
from .entities import OwnerProfile, Salesman
from .repositories import OwnerProfileRepository, SalesmanRepository
from .validators import validate_owner_profile, validate_salesman

logger = logging.getLogger(__name__)

SALESMAN_HAS_SALES = (
    'This salesman has sales associated with them. '
    'Remove the sales first or assign them to another salesman.'
)


class SalesmanService:
    """Owner actions on the salesmen of a shop."""

    def __init__(self, store=None, salesmen=None, sales=None):
        self.store = store or Store()
        self.salesmen = salesmen if salesmen is not None else SalesmanRepository(self.store)
        self.sales = sales if sales is not None else SaleRepository(self.store)

    def load(self):
        return self.salesmen.load()

    def add_salesman(self, shop_id, data):
        if not shop_id:
            return OperationResult.invalid('Please select a shop', field='shopId')

        loaded = self.salesmen.ensure_loaded()
        if not loaded:
            return loaded

        cleaned = validate_salesman(data, self.salesmen)
        if not cleaned:
            return cleaned

        fields = dict(cleaned.value)
        fields['password'] = hash_password(fields['password'])
        salesman = Salesman.create(shop_id=shop_id, **fields)

        result = self.salesmen.add(salesman)
        if result:
            logger.info(
                f"[SALESMAN CREATED] {salesman.id} | Shop: {shop_id} | "
                f"Username: {salesman.username} | Rate: {salesman.commission_rate}%"
            )
        return result

    def update_salesman(self, salesman_id, data):
        loaded = self.salesmen.ensure_loaded()
        if not loaded:
            return loaded

        existing = self.salesmen.get(salesman_id)
        if existing is None:
            return OperationResult.not_found('Salesman not found')

        cleaned = validate_salesman(data, self.salesmen, existing=existing)
        if not cleaned:
            return cleaned

        fields = dict(cleaned.value)
        password = fields.pop('password')
        if password.strip():
            fields['password'] = hash_password(password)

        # sales keep the commission they were created with
        return self.salesmen.update(existing.changed(**fields))

    def delete_salesman(self, salesman_id):
        loaded = self.salesmen.ensure_loaded()
        if not loaded:
            return loaded
        if self.salesmen.get(salesman_id) is None:
            return OperationResult.not_found('Salesman not found')

        sales_loaded = self.sales.ensure_loaded()
        if not sales_loaded:
            return sales_loaded
        if self.sales.for_salesman(salesman_id):
            logger.warning(f"[SALESMAN DELETE REFUSED] {salesman_id} has recorded sales")
            return OperationResult.conflict(SALESMAN_HAS_SALES)

        return self.salesmen.delete(salesman_id)


class OwnerService:
    """Registration and profile of the shop owner using this device."""

    def __init__(self, store=None, profiles=None):
        self.store = store or Store()
        self.profiles = profiles if profiles is not None else OwnerProfileRepository(self.store)

    def register(self, data):
        existing = self.profiles.profile()
        if not existing:
            return existing
        if existing.value is not None:
            return OperationResult.conflict('An owner is already registered on this device')

        cleaned = validate_owner_profile(data)
        if not cleaned:
            return cleaned

        result = self.profiles.save(OwnerProfile(**cleaned.value))
        if result:
            logger.info(f"[OWNER REGISTERED] {result.value.mobile}")
        return result

    def profile(self):
        return self.profiles.profile()

    def update_profile(self, data):
        existing = self.profiles.profile()
        if not existing:
            return existing
        if existing.value is None:
            return OperationResult.not_found('No owner is registered')

        merged = existing.value.to_dict()
        merged.update({k: v for k, v in data.items() if v is not None})
        cleaned = validate_owner_profile(merged)
        if not cleaned:
            return cleaned
        return self.profiles.save(OwnerProfile(**cleaned.value))

    def logout(self):
        result = self.profiles.clear()
        if result:
            logger.info("[OWNER LOGOUT] Profile removed")
        return result
