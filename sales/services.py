import logging

from inventory.repositories import ProductRepository
from inventory.validators import parse_int
from storage.conf import vendorpro_setting
from storage.fields import round2
from storage.results import OperationResult
from storage.store import Store, StoreError

from . import signals
from .entities import Sale, SaleStatus
from .repositories import SaleRepository

logger = logging.getLogger(__name__)


def compute_sale_amounts(quantity, selling_price, commission_rate):
    """``(totalAmount, commission)`` for a sale, both rounded to two places."""
    total_amount = round2(quantity * selling_price)
    commission = round2(total_amount * commission_rate / 100)
    return total_amount, commission


class SaleService:
    """
    Records sales for a salesman and moves them through their statuses.

    Stock is only adjusted when ``VENDORPRO['ADJUST_STOCK_ON_SALE']`` is on.
    The sales and products keys are then written in one transaction and both
    in-memory copies are rolled back if either write fails.
    Only a sale that took stock (``stock_adjusted``) gives it back, when
    it is rejected or deleted while still pending.
    """

    def __init__(self, store=None, sales=None, products=None):
        self.store = store or Store()
        self.sales = sales if sales is not None else SaleRepository(self.store)
        self.products = products if products is not None else ProductRepository(self.store)

    @property
    def adjusts_stock(self):
        return bool(vendorpro_setting('ADJUST_STOCK_ON_SALE'))

    def load(self):
        return self.sales.load()

    # ============================================
    # RECORD
    # ============================================

    def record_sale(self, salesman, product_id, quantity, customer_name):
        for repository in (self.sales, self.products):
            loaded = repository.ensure_loaded()
            if not loaded:
                return loaded

        product = self.products.get(product_id) if product_id else None
        if product is None or product.shop_id != salesman.shop_id:
            return OperationResult.invalid('Please select a product', field='productId')

        customer_name = (customer_name or '').strip()
        if not customer_name:
            return OperationResult.invalid('Customer name is required', field='customerName')

        quantity = parse_int(quantity)
        if quantity is None or quantity <= 0:
            return OperationResult.invalid('Quantity must be greater than 0', field='quantity')

        if quantity > product.quantity:
            return OperationResult.invalid(
                f"Only {product.quantity} units available in stock", field='quantity'
            )

        if product.selling_price <= 0:
            return OperationResult.invalid('Selling price must be greater than 0', field='sellingPrice')

        total_amount, commission = compute_sale_amounts(
            quantity, product.selling_price, salesman.commission_rate
        )
        sale = Sale.create(
            shop_id=salesman.shop_id,
            product_id=product.id,
            salesman_id=salesman.id,
            customer_name=customer_name,
            quantity=quantity,
            total_amount=total_amount,
            commission=commission,
            stock_adjusted=self.adjusts_stock,
        )

        if sale.stock_adjusted:
            result = self._write_with_stock(
                self.sales.all() + [sale], product.id, -quantity
            )
        else:
            result = self.sales.save(self.sales.all() + [sale])
        if not result:
            return result

        logger.info(
            f"[SALE RECORDED] {sale.id} | Shop: {sale.shop_id} | Product: {product.id} | "
            f"Qty: {quantity} | Total: {total_amount} | Commission: {commission}"
        )
        signals.sale_recorded.send(sender=self.__class__, sale=sale, salesman=salesman, product=product)
        return OperationResult.success(sale)

    # ============================================
    # STATUS
    # ============================================

    def approve_sale(self, sale_id):
        return self._transition(sale_id, SaleStatus.COMPLETED)

    def reject_sale(self, sale_id, reason=None):
        reason = (reason or '').strip() or vendorpro_setting('DEFAULT_REJECTION_REASON')
        return self._transition(sale_id, SaleStatus.REJECTED, rejection_reason=reason)

    def delete_sale(self, sale_id):
        """
        Remove a sale. A pending sale that took stock gives it back.
        """
        loaded = self.sales.ensure_loaded()
        if not loaded:
            return loaded

        sale = self.sales.get(sale_id)
        if sale is None or not (sale.is_pending and sale.stock_adjusted):
            return self.sales.delete(sale_id)

        products_loaded = self.products.ensure_loaded()
        if not products_loaded:
            return products_loaded

        remaining = [item for item in self.sales.all() if item.id != sale_id]
        result = self._write_with_stock(remaining, sale.product_id, sale.quantity)
        if not result:
            return result
        logger.info(f"[SALE DELETED] {sale_id} | Stock returned: {sale.quantity}")
        return OperationResult.success(sale)

    def _transition(self, sale_id, new_status, **changes):
        loaded = self.sales.ensure_loaded()
        if not loaded:
            return loaded

        sale = self.sales.get(sale_id)
        if sale is None:
            return OperationResult.not_found('Sale not found')
        if not sale.is_pending:
            return OperationResult.conflict(f"Sale is already {sale.status}")

        # only a sale that took stock gives it back
        restock = new_status == SaleStatus.REJECTED and sale.stock_adjusted
        if restock:
            changes['stock_adjusted'] = False

        updated = sale.changed(status=new_status, **changes)
        items = [updated if item.id == sale_id else item for item in self.sales.all()]

        if restock:
            products_loaded = self.products.ensure_loaded()
            if not products_loaded:
                return products_loaded
            result = self._write_with_stock(items, sale.product_id, sale.quantity)
        else:
            result = self.sales.save(items)
        if not result:
            return result

        signals.sale_status_changed.send(sender=self.__class__, sale=updated, old_status=sale.status)
        return OperationResult.success(updated)

    # ============================================
    # STOCK
    # ============================================

    def _write_with_stock(self, sales, product_id, delta):
        """
        Write ``sales`` and move the product's quantity by ``delta`` together.

        A product that no longer exists is skipped; the sale still goes
        through.
        """
        sales_before = self.sales.snapshot()
        products_before = self.products.snapshot()

        products = []
        for product in self.products.all():
            if product.id == product_id:
                product = product.changed(quantity=max(product.quantity + delta, 0))
            products.append(product)

        try:
            with self.store.atomic():
                self.sales.persist(sales)
                self.products.persist(products)
        except StoreError:
            logger.exception(f"[STOCK ERROR] Sale and stock write rolled back | Product: {product_id}")
            self.sales.restore(sales_before)
            self.products.restore(products_before)
            return OperationResult.store_failure()

        logger.info(f"[STOCK ADJUSTED] Product: {product_id} | Change: {delta:+d}")
        return OperationResult.success(sales)
