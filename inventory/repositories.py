import logging

from storage import keys
from storage.conf import vendorpro_setting
from storage.repository import JsonRepository
from storage.results import OperationResult
from storage.store import StoreError

from .entities import Product, Shop

logger = logging.getLogger(__name__)


class ShopRepository(JsonRepository):
    key = keys.SHOPS
    entity_class = Shop
    label = 'shop'

    def active(self):
        return [shop for shop in self._items if shop.is_active]

    # ============================================
    # CURRENT SHOP (currentShop key)
    # ============================================

    def current(self):
        try:
            data = self.store.get_json(keys.CURRENT_SHOP)
        except StoreError:
            logger.exception("[LOAD ERROR] Could not read current shop")
            return OperationResult.store_failure("Failed to load current shop")
        return OperationResult.success(Shop.from_dict(data) if isinstance(data, dict) else None)

    def set_current(self, shop):
        try:
            if shop is None:
                self.store.remove(keys.CURRENT_SHOP)
            else:
                self.store.set_json(keys.CURRENT_SHOP, shop.to_dict())
        except StoreError:
            logger.exception("[SAVE ERROR] Could not write current shop")
            return OperationResult.store_failure()
        return OperationResult.success(shop)


class ProductRepository(JsonRepository):
    key = keys.PRODUCTS
    entity_class = Product
    label = 'product'

    def for_shop(self, shop_id):
        return [product for product in self._items if product.shop_id == shop_id]

    def low_stock(self, shop_id=None, threshold=None):
        if threshold is None:
            threshold = vendorpro_setting('LOW_STOCK_THRESHOLD')
        products = self.for_shop(shop_id) if shop_id else self.all()
        return sorted(
            (product for product in products if product.quantity <= threshold),
            key=lambda product: product.quantity,
        )

    def search(self, query, shop_id=None):
        products = self.for_shop(shop_id) if shop_id else self.all()
        query = (query or '').strip().lower()
        if not query:
            return products
        return [
            product for product in products
            if query in product.name.lower() or query in (product.category or '').lower()
        ]
