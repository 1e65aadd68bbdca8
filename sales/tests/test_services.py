from decimal import Decimal
from unittest import mock

from django.test import TestCase, override_settings

from inventory.repositories import ProductRepository
from inventory.services import ProductService
from sales.entities import SaleStatus
from sales.repositories import SaleRepository
from sales.services import SaleService, compute_sale_amounts
from sales.signals import sale_recorded, sale_status_changed
from storage import keys
from storage.results import CONFLICT, NOT_FOUND, STORE, VALIDATION
from storage.store import StoreError, Store
from users.services import SalesmanService


class SaleServiceTestMixin:
    def setUp(self):
        self.store = Store()
        self.product = ProductService(self.store).add_product('shop-1', {
            'name': 'Basmati Rice',
            'basePrice': 80,
            'sellingPrice': 100,
            'quantity': 5,
        }).value
        self.salesman = SalesmanService(self.store).add_salesman('shop-1', {
            'name': 'Raj Kumar',
            'mobile': '9123456789',
            'username': 'raj',
            'password': 'abc123',
            'commissionRate': 10,
        }).value
        self.service = SaleService(self.store)

    def stored_sales(self):
        return self.store.get_json(keys.SALES) or []

    def stored_quantity(self):
        products = ProductRepository(self.store)
        products.load()
        return products.get(self.product.id).quantity


class RecordSaleTests(SaleServiceTestMixin, TestCase):
    def test_totals_and_commission(self):
        result = self.service.record_sale(self.salesman, self.product.id, 3, 'Anita')

        self.assertTrue(result.ok)
        sale = result.value
        self.assertEqual(sale.status, SaleStatus.PENDING)
        self.assertEqual(sale.total_amount, Decimal('300.00'))
        self.assertEqual(sale.commission, Decimal('30.00'))
        self.assertEqual(sale.shop_id, 'shop-1')
        self.assertEqual(sale.salesman_id, self.salesman.id)
        self.assertEqual(self.stored_sales()[0]['totalAmount'], 300)

    def test_commission_rounds_half_up(self):
        total, commission = compute_sale_amounts(3, Decimal('33.33'), Decimal('12.5'))

        self.assertEqual(total, Decimal('99.99'))
        self.assertEqual(commission, Decimal('12.50'))

    def test_quantity_above_stock_is_rejected(self):
        result = self.service.record_sale(self.salesman, self.product.id, 6, 'Anita')

        self.assertFalse(result.ok)
        self.assertEqual(result.error, 'Only 5 units available in stock')
        self.assertEqual(self.stored_sales(), [])

    def test_validation_order(self):
        cases = [
            ((None, 3, 'Anita'), 'Please select a product'),
            (('product-missing', 3, 'Anita'), 'Please select a product'),
            ((self.product.id, 3, '  '), 'Customer name is required'),
            ((self.product.id, 0, 'Anita'), 'Quantity must be greater than 0'),
            ((self.product.id, 'two', 'Anita'), 'Quantity must be greater than 0'),
            ((self.product.id, 9, ''), 'Customer name is required'),
        ]
        for args, message in cases:
            with self.subTest(message=message, args=args):
                result = self.service.record_sale(self.salesman, *args)
                self.assertEqual(result.code, VALIDATION)
                self.assertEqual(result.error, message)
        self.assertEqual(self.stored_sales(), [])

    def test_free_product_cannot_be_sold(self):
        free = ProductService(self.store).add_product('shop-1', {
            'name': 'Sample', 'basePrice': 0, 'sellingPrice': 0, 'quantity': 10,
        }).value

        result = SaleService(self.store).record_sale(self.salesman, free.id, 1, 'Anita')

        self.assertEqual(result.error, 'Selling price must be greater than 0')

    def test_product_from_another_shop_is_not_selectable(self):
        other = ProductService(self.store).add_product('shop-2', {
            'name': 'Oil', 'basePrice': 100, 'sellingPrice': 120, 'quantity': 10,
        }).value

        result = SaleService(self.store).record_sale(self.salesman, other.id, 1, 'Anita')

        self.assertEqual(result.error, 'Please select a product')

    def test_commission_is_a_snapshot(self):
        sale = self.service.record_sale(self.salesman, self.product.id, 3, 'Anita').value

        SalesmanService(self.store).update_salesman(self.salesman.id, {
            'name': 'Raj Kumar',
            'mobile': '9123456789',
            'username': 'raj',
            'commissionRate': 50,
        })

        sales = SaleRepository(self.store)
        sales.load()
        self.assertEqual(sales.get(sale.id).commission, Decimal('30.00'))

    def test_stock_is_left_alone_by_default(self):
        self.service.record_sale(self.salesman, self.product.id, 3, 'Anita')

        self.assertEqual(self.stored_quantity(), 5)

    def test_sale_recorded_signal(self):
        received = []

        def receiver(sender, sale, **kwargs):
            received.append(sale.id)

        sale_recorded.connect(receiver)
        try:
            sale = self.service.record_sale(self.salesman, self.product.id, 1, 'Anita').value
        finally:
            sale_recorded.disconnect(receiver)

        self.assertEqual(received, [sale.id])

    def test_store_failure_is_reported(self):
        self.service.load()
        self.service.products.load()

        with mock.patch.object(Store, 'set', side_effect=StoreError('disk full', operation='set')):
            result = self.service.record_sale(self.salesman, self.product.id, 1, 'Anita')

        self.assertEqual(result.code, STORE)
        self.assertEqual(self.service.sales.all(), [])


@override_settings(VENDORPRO={'ADJUST_STOCK_ON_SALE': True})
class StockAdjustmentTests(SaleServiceTestMixin, TestCase):
    def test_sale_decrements_stock(self):
        self.service.record_sale(self.salesman, self.product.id, 3, 'Anita')

        self.assertEqual(self.stored_quantity(), 2)
        self.assertEqual(self.service.products.get(self.product.id).quantity, 2)

        result = self.service.record_sale(self.salesman, self.product.id, 3, 'Vikram')
        self.assertEqual(result.error, 'Only 2 units available in stock')

    def test_failed_product_write_rolls_back_both_keys(self):
        self.service.load()
        self.service.products.load()

        with mock.patch.object(
            self.service.products, 'persist', side_effect=StoreError('disk full', key='products', operation='set')
        ):
            result = self.service.record_sale(self.salesman, self.product.id, 3, 'Anita')

        self.assertEqual(result.code, STORE)
        self.assertEqual(self.stored_sales(), [])
        self.assertEqual(self.stored_quantity(), 5)
        self.assertEqual(self.service.sales.all(), [])
        self.assertEqual(self.service.products.get(self.product.id).quantity, 5)

    def test_rejecting_restores_stock(self):
        sale = self.service.record_sale(self.salesman, self.product.id, 3, 'Anita').value

        self.assertTrue(self.service.reject_sale(sale.id).ok)

        self.assertEqual(self.stored_quantity(), 5)

    def test_approving_keeps_stock_taken(self):
        sale = self.service.record_sale(self.salesman, self.product.id, 3, 'Anita').value

        self.service.approve_sale(sale.id)

        self.assertEqual(self.stored_quantity(), 2)

    def test_sale_remembers_it_took_stock(self):
        sale = self.service.record_sale(self.salesman, self.product.id, 3, 'Anita').value

        self.assertTrue(sale.stock_adjusted)
        self.assertTrue(self.stored_sales()[0]['stockAdjusted'])

    def test_rejecting_sale_that_took_no_stock_leaves_stock_alone(self):
        with self.settings(VENDORPRO={'ADJUST_STOCK_ON_SALE': False}):
            sale = SaleService(self.store).record_sale(self.salesman, self.product.id, 3, 'Anita').value
        self.assertNotIn('stockAdjusted', self.stored_sales()[0])

        result = SaleService(self.store).reject_sale(sale.id)

        self.assertTrue(result.ok)
        self.assertEqual(self.stored_quantity(), 5)

    def test_stock_is_returned_only_once(self):
        sale = self.service.record_sale(self.salesman, self.product.id, 3, 'Anita').value

        self.service.reject_sale(sale.id)
        self.assertFalse(self.stored_sales()[0].get('stockAdjusted', False))
        self.service.delete_sale(sale.id)

        self.assertEqual(self.stored_quantity(), 5)

    def test_deleting_pending_sale_restores_stock(self):
        sale = self.service.record_sale(self.salesman, self.product.id, 3, 'Anita').value

        result = self.service.delete_sale(sale.id)

        self.assertTrue(result.ok)
        self.assertEqual(self.stored_sales(), [])
        self.assertEqual(self.stored_quantity(), 5)
        self.assertEqual(self.service.products.get(self.product.id).quantity, 5)

    def test_deleting_completed_sale_keeps_stock_taken(self):
        sale = self.service.record_sale(self.salesman, self.product.id, 3, 'Anita').value
        self.service.approve_sale(sale.id)

        self.service.delete_sale(sale.id)

        self.assertEqual(self.stored_quantity(), 2)

    def test_deleting_unknown_sale(self):
        self.assertEqual(self.service.delete_sale('sale-missing').code, NOT_FOUND)


class SaleStatusTests(SaleServiceTestMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.sale = self.service.record_sale(self.salesman, self.product.id, 2, 'Anita').value

    def test_approve(self):
        result = self.service.approve_sale(self.sale.id)

        self.assertTrue(result.ok)
        self.assertEqual(result.value.status, SaleStatus.COMPLETED)
        self.assertEqual(self.stored_sales()[0]['status'], 'completed')

    def test_reject_with_default_reason(self):
        result = self.service.reject_sale(self.sale.id, '  ')

        self.assertEqual(result.value.status, SaleStatus.REJECTED)
        self.assertEqual(result.value.rejection_reason, 'No reason provided')
        self.assertEqual(self.stored_sales()[0]['rejectionReason'], 'No reason provided')

    def test_reject_with_reason(self):
        result = self.service.reject_sale(self.sale.id, 'Customer returned it')
        self.assertEqual(result.value.rejection_reason, 'Customer returned it')

    def test_only_pending_sales_change_status(self):
        self.service.approve_sale(self.sale.id)

        for action in (self.service.approve_sale, self.service.reject_sale):
            with self.subTest(action=action.__name__):
                result = action(self.sale.id)
                self.assertEqual(result.code, CONFLICT)
        self.assertEqual(self.stored_sales()[0]['status'], 'completed')

    def test_rejected_sale_cannot_be_approved(self):
        self.service.reject_sale(self.sale.id)
        self.assertEqual(self.service.approve_sale(self.sale.id).code, CONFLICT)

    def test_unknown_sale(self):
        self.assertEqual(self.service.approve_sale('sale-missing').code, NOT_FOUND)

    def test_status_signal(self):
        received = []

        def receiver(sender, sale, old_status, **kwargs):
            received.append((old_status, sale.status))

        sale_status_changed.connect(receiver)
        try:
            self.service.approve_sale(self.sale.id)
        finally:
            sale_status_changed.disconnect(receiver)

        self.assertEqual(received, [('pending', 'completed')])

    def test_delete_sale(self):
        self.assertTrue(self.service.delete_sale(self.sale.id).ok)
        self.assertEqual(self.stored_sales(), [])
