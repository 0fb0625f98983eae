"""
Test suite for the orders endpoints
Tests: paginated list, stats summary, CSV and Excel export
"""
import csv
import io

from django.test import TestCase
from openpyxl import load_workbook
from rest_framework import status
from rest_framework.test import APIClient

from broodstock.orders.mock_data import ORDER_STATUSES


class OrderListTests(TestCase):
    """Test order list pagination"""

    def setUp(self):
        self.client = APIClient()

    def test_default_pagination(self):
        response = self.client.get('/api/v1/orders/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()['data']
        self.assertEqual([o['order_number'] for o in data['orders']],
                         ['ORD-2024-001', 'ORD-2024-002', 'ORD-2024-003'])
        self.assertEqual(data['pagination'], {'total': 3, 'limit': 10, 'offset': 0, 'pages': 1})

    def test_slice_length_property(self):
        """Test slice length and pages across limit/offset combinations"""
        total = 3
        for limit in (1, 2, 3, 4):
            for offset in (0, 1, 2, 3, 5):
                with self.subTest(limit=limit, offset=offset):
                    data = self.client.get(f'/api/v1/orders/?limit={limit}&offset={offset}').json()['data']
                    self.assertEqual(len(data['orders']), min(limit, max(0, total - offset)))
                    self.assertEqual(data['pagination']['pages'], -(-total // limit))

    def test_order_fields(self):
        order = self.client.get('/api/v1/orders/?limit=1').json()['data']['orders'][0]
        self.assertEqual(order['customer_id'], 'CUST-001')
        self.assertEqual(order['total_amount'], 7500)
        self.assertIn(order['status'], ORDER_STATUSES)
        self.assertEqual(order['delivery_address']['city'], 'Vancouver')


class OrderStatsTests(TestCase):
    def test_stats_summary(self):
        """Test order stats summary"""
        response = APIClient().get('/api/v1/orders/stats/summary/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()['data']
        self.assertEqual(data['total_orders'], 1247)
        self.assertEqual(
            data['pending_orders'] + data['completed_orders'] + data['cancelled_orders'],
            data['total_orders']
        )
        self.assertEqual(len(data['monthly_trends']), 6)
        self.assertEqual(data['top_species'][0]['species'], 'Penaeus vannamei')


class OrderExportTests(TestCase):
    def test_csv_export(self):
        response = APIClient().get('/api/v1/orders/export/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        rows = list(csv.reader(io.StringIO(response.content.decode('utf-8'))))
        self.assertEqual(rows[0][0], 'Order Number')
        self.assertEqual([row[0] for row in rows[1:]], ['ORD-2024-001', 'ORD-2024-002', 'ORD-2024-003'])
        self.assertEqual(rows[2][-1], 'Bangkok, Thailand')

    def test_xlsx_export(self):
        response = APIClient().get('/api/v1/orders/export/xlsx/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('Orders_Report_', response['Content-Disposition'])

        sheet = load_workbook(io.BytesIO(response.content)).active
        rows = list(sheet.iter_rows(values_only=True))
        self.assertEqual(rows[0][0], 'Order Number')
        self.assertEqual([row[0] for row in rows[1:]], ['ORD-2024-001', 'ORD-2024-002', 'ORD-2024-003'])
        self.assertEqual(rows[2][-1], 'Bangkok, Thailand')
