import logging

from storage.fields import to_bool
from storage.results import OperationResult
from storage.store import Store

from .entities import Product, Shop
from .repositories import ProductRepository, ShopRepository
from .validators import parse_int, validate_product, validate_shop

logger = logging.getLogger(__name__)


class ShopService:
    """Owner actions on shops and the currently selected shop."""

    def __init__(self, store=None, shops=None):
        self.store = store or Store()
        self.shops = shops if shops is not None else ShopRepository(self.store)

    def load(self):
        return self.shops.load()

    def add_shop(self, data, owner_id=None):
        cleaned = validate_shop(data)
        if not cleaned:
            return cleaned

        shop = Shop.create(owner_id=owner_id, **cleaned.value)
        result = self.shops.add(shop)
        if result:
            logger.info(f"[SHOP CREATED] {shop.id} | Name: {shop.name}")
        return result

    def update_shop(self, shop_id, data):
        loaded = self.shops.ensure_loaded()
        if not loaded:
            return loaded

        existing = self.shops.get(shop_id)
        if existing is None:
            return OperationResult.not_found('Shop not found')

        cleaned = validate_shop(data)
        if not cleaned:
            return cleaned

        updated = existing.changed(
            is_active=to_bool(data.get('isActive'), default=existing.is_active),
            **cleaned.value,
        )
        result = self.shops.update(updated)
        if not result:
            return result

        # keep the selected shop in step with the edit
        current = self.shops.current()
        if current and current.value is not None and current.value.id == shop_id:
            self.shops.set_current(updated)
        return result

    def delete_shop(self, shop_id):
        """
        Remove a shop from the shops array.

        Products, sales and salesmen that point at the shop are left alone;
        readers treat the missing shop as unknown.
        """
        result = self.shops.delete(shop_id)
        if not result:
            return result

        current = self.shops.current()
        if current and current.value is not None and current.value.id == shop_id:
            self.shops.set_current(None)
        logger.info(f"[SHOP DELETED] {shop_id} | dependent records kept")
        return result

    def set_current_shop(self, shop_id):
        loaded = self.shops.ensure_loaded()
        if not loaded:
            return loaded

        if shop_id is None:
            return self.shops.set_current(None)

        shop = self.shops.get(shop_id)
        if shop is None:
            return OperationResult.not_found('Shop not found')
        return self.shops.set_current(shop)

    def current_shop(self):
        return self.shops.current()


class ProductService:
    """Inventory actions on a shop's products."""

    def __init__(self, store=None, products=None):
        self.store = store or Store()
        self.products = products if products is not None else ProductRepository(self.store)

    def load(self):
        return self.products.load()

    def add_product(self, shop_id, data):
        if not shop_id:
            return OperationResult.invalid('Please select a shop', field='shopId')

        cleaned = validate_product(data)
        if not cleaned:
            return cleaned

        product = Product.create(shop_id=shop_id, **cleaned.value)
        result = self.products.add(product)
        if result:
            logger.info(
                f"[PRODUCT CREATED] {product.id} | Shop: {shop_id} | "
                f"Name: {product.name} | Qty: {product.quantity}"
            )
        return result

    def update_product(self, product_id, data):
        loaded = self.products.ensure_loaded()
        if not loaded:
            return loaded

        existing = self.products.get(product_id)
        if existing is None:
            return OperationResult.not_found('Product not found')

        cleaned = validate_product(data)
        if not cleaned:
            return cleaned

        return self.products.update(existing.changed(**cleaned.value))

    def delete_product(self, product_id):
        return self.products.delete(product_id)

    def restock(self, product_id, quantity):
        loaded = self.products.ensure_loaded()
        if not loaded:
            return loaded

        product = self.products.get(product_id)
        if product is None:
            return OperationResult.not_found('Product not found')

        added = parse_int(quantity)
        if added is None or added <= 0:
            return OperationResult.invalid('Quantity must be greater than 0', field='quantity')

        old_quantity = product.quantity
        result = self.products.update(product.changed(quantity=old_quantity + added))
        if result:
            logger.info(
                f"[RESTOCK] {product.id} | Quantity: {old_quantity} → {result.value.quantity}"
            )
        return result
