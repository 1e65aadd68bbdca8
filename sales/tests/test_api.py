from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from rest_framework.test import APIClient

from inventory.services import ProductService
from storage import keys
from storage.store import Store
from users.services import SalesmanService


class SaleApiTests(TestCase):
    def setUp(self):
        self.store = Store()
        self.product = ProductService(self.store).add_product('shop-1', {
            'name': 'Basmati Rice', 'basePrice': 80, 'sellingPrice': 100, 'quantity': 5,
        }).value
        self.salesman = SalesmanService(self.store).add_salesman('shop-1', {
            'name': 'Raj Kumar',
            'mobile': '9123456789',
            'username': 'raj',
            'password': 'abc123',
            'commissionRate': 10,
        }).value

        self.client = APIClient()
        login = self.client.post(
            '/api/auth/salesman/login/', {'username': 'raj', 'password': 'abc123'}, format='json'
        )
        self.token = login.json()['data']['token']

    def record(self, quantity=3, customer='Anita'):
        self.client.credentials(HTTP_AUTHORIZATION=f'Session {self.token}')
        response = self.client.post('/api/sales/', {
            'productId': self.product.id,
            'quantity': quantity,
            'customerName': customer,
        }, format='json')
        self.client.credentials()
        return response

    def test_earlier_login_survives_a_later_one(self):
        SalesmanService(self.store).add_salesman('shop-1', {
            'name': 'Vikram Singh',
            'mobile': '9000000000',
            'username': 'vik',
            'password': 'pass99',
            'commissionRate': 5,
        })
        self.client.post('/api/auth/salesman/login/', {'username': 'vik', 'password': 'pass99'}, format='json')

        response = self.record()

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['data']['salesmanId'], self.salesman.id)

    def test_recording_requires_salesman_session(self):
        response = self.client.post('/api/sales/', {
            'productId': self.product.id, 'quantity': 1, 'customerName': 'Anita',
        }, format='json')

        self.assertEqual(response.status_code, 401)
        self.assertIsNone(self.store.get(keys.SALES))

    def test_record_sale(self):
        response = self.record()

        self.assertEqual(response.status_code, 201)
        data = response.json()['data']
        self.assertEqual(data['totalAmount'], '300.00')
        self.assertEqual(data['commission'], '30.00')
        self.assertEqual(data['status'], 'pending')
        self.assertEqual(data['productName'], 'Basmati Rice')
        self.assertEqual(data['salesmanName'], 'Raj Kumar')

    def test_stock_exceeded(self):
        response = self.record(quantity=6)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Only 5 units available in stock')
        self.assertEqual(response.json()['field'], 'quantity')

    def test_approve_and_reject(self):
        first = self.record().json()['data']['id']
        second = self.record(quantity=1).json()['data']['id']

        approved = self.client.post(f'/api/sales/{first}/approve/')
        self.assertEqual(approved.json()['data']['status'], 'completed')

        rejected = self.client.post(f'/api/sales/{second}/reject/', {'reason': 'Wrong item'}, format='json')
        self.assertEqual(rejected.json()['data']['rejectionReason'], 'Wrong item')

        again = self.client.post(f'/api/sales/{first}/reject/')
        self.assertEqual(again.status_code, 409)

        self.assertEqual(self.client.post('/api/sales/sale-missing/approve/').status_code, 404)

    def test_list_filters_and_placeholders(self):
        self.record(customer='Anita')
        self.record(quantity=1, customer='Vikram')
        ProductService(self.store).delete_product(self.product.id)

        sales = self.client.get('/api/sales/').json()['data']
        self.assertEqual([s['customerName'] for s in sales][0:2], ['Vikram', 'Anita'])
        self.assertEqual({s['productName'] for s in sales}, {'Unknown Product'})

        by_amount = self.client.get('/api/sales/', {'ordering': '-amount'}).json()['data']
        self.assertEqual(by_amount[0]['customerName'], 'Anita')

        found = self.client.get('/api/sales/', {'search': 'vik'}).json()['data']
        self.assertEqual(len(found), 1)
        self.assertEqual(self.client.get('/api/sales/', {'status': 'completed'}).json()['data'], [])
        self.assertEqual(self.client.get('/api/sales/', {'shop': 'shop-2'}).json()['data'], [])

    def test_metrics(self):
        first = self.record().json()['data']['id']
        self.record(quantity=1)
        self.client.post(f'/api/sales/{first}/approve/')

        metrics = self.client.get('/api/sales/metrics/', {'shop': 'shop-1'}).json()['data']

        self.assertEqual(metrics['totalRevenue'], '300.00')
        self.assertEqual(metrics['totalCommission'], '30.00')
        self.assertEqual(metrics['pendingCount'], 1)
        self.assertEqual(metrics['completedCount'], 1)
        self.assertEqual(metrics['todaysSalesAmount'], '400.00')

        self.assertEqual(self.client.get('/api/sales/metrics/', {'date': 'nope'}).status_code, 400)
        past = self.client.get('/api/sales/metrics/', {'date': '2001-01-01'}).json()['data']
        self.assertEqual(past['todaysSalesAmount'], '0.00')

    def test_salesman_summary(self):
        self.record()

        summary = self.client.get('/api/salesmen/summary/', {'shop': 'shop-1'}).json()['data']

        self.assertEqual(summary[0]['salesmanName'], 'Raj Kumar')
        self.assertEqual(summary[0]['pendingCommission'], '30.00')

    def test_delete_salesman_with_sales_is_conflict(self):
        self.record()

        response = self.client.delete(f'/api/salesmen/{self.salesman.id}/')

        self.assertEqual(response.status_code, 409)

    def test_sales_report_command(self):
        first = self.record().json()['data']['id']
        self.client.post(f'/api/sales/{first}/approve/')

        out = StringIO()
        call_command('sales_report', '--shop', 'shop-1', '--by-salesman', stdout=out)

        self.assertIn('Total revenue:      ₹300.00', out.getvalue())
        self.assertIn('Raj Kumar: 1 sale(s)', out.getvalue())
