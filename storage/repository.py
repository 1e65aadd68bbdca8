import logging

from .results import OperationResult
from .store import Store, StoreError

logger = logging.getLogger(__name__)


class JsonRepository:
    """
    One entity collection stored as a JSON array under a single key.

    The repository keeps an in-memory copy of the array. A write goes to the
    store first and only replaces the in-memory copy once it succeeded, so a
    failed write leaves the last good state in place.
    """

    key = None
    entity_class = None
    label = 'item'

    def __init__(self, store=None):
        self.store = store or Store()
        self._items = []
        self._loaded = False

    def __len__(self):
        return len(self._items)

    @property
    def loaded(self):
        return self._loaded

    # ============================================
    # LOAD / SAVE
    # ============================================

    def load(self):
        try:
            data = self.store.get_json(self.key)
            if data is None:
                self.store.set_json(self.key, [])
                data = []
            if not isinstance(data, list):
                raise StoreError(f"Expected a list under '{self.key}'", key=self.key, operation='get')
            items = [self.entity_class.from_dict(row) for row in data if isinstance(row, dict)]
        except StoreError:
            logger.exception(f"[LOAD ERROR] Could not load {self.key}")
            return OperationResult.store_failure(f"Failed to load {self.key}")

        self._items = items
        self._loaded = True
        logger.debug(f"[LOAD] {self.key}: {len(items)} {self.label}(s)")
        return OperationResult.success(list(items))

    def ensure_loaded(self):
        if self._loaded:
            return OperationResult.success(list(self._items))
        return self.load()

    def persist(self, items):
        """Write ``items`` and adopt them; raises StoreError on failure."""
        items = list(items)
        self.store.set_json(self.key, [item.to_dict() for item in items])
        self._items = items
        self._loaded = True
        return items

    def save(self, items):
        try:
            items = self.persist(items)
        except StoreError:
            logger.exception(f"[SAVE ERROR] Could not save {self.key}")
            return OperationResult.store_failure()
        return OperationResult.success(items)

    def snapshot(self):
        return list(self._items)

    def restore(self, items):
        self._items = list(items)

    # ============================================
    # CRUD
    # ============================================

    def add(self, entity):
        loaded = self.ensure_loaded()
        if not loaded:
            return loaded

        result = self.save(self._items + [entity])
        if not result:
            return result
        logger.info(f"[{self.label.upper()} ADDED] {entity.id}")
        return OperationResult.success(entity)

    def update(self, entity):
        loaded = self.ensure_loaded()
        if not loaded:
            return loaded

        if self.get(entity.id) is None:
            return OperationResult.not_found(f"{self.label.capitalize()} not found")

        updated = [entity if item.id == entity.id else item for item in self._items]
        result = self.save(updated)
        if not result:
            return result
        logger.info(f"[{self.label.upper()} UPDATED] {entity.id}")
        return OperationResult.success(entity)

    def delete(self, entity_id):
        loaded = self.ensure_loaded()
        if not loaded:
            return loaded

        existing = self.get(entity_id)
        if existing is None:
            return OperationResult.not_found(f"{self.label.capitalize()} not found")

        result = self.save([item for item in self._items if item.id != entity_id])
        if not result:
            return result
        logger.info(f"[{self.label.upper()} DELETED] {entity_id}")
        return OperationResult.success(existing)

    # ============================================
    # READS (in-memory)
    # ============================================

    def all(self):
        return list(self._items)

    def get(self, entity_id):
        for item in self._items:
            if item.id == entity_id:
                return item
        return None

    def filter(self, **criteria):
        return [
            item for item in self._items
            if all(getattr(item, name, None) == value for name, value in criteria.items())
        ]
