"""
Test suite for the customers endpoints
Tests: paginated list, stats summary, CSV and Excel export, error envelope
"""
import csv
import io
from unittest import mock

from django.test import TestCase, override_settings
from openpyxl import load_workbook
from rest_framework import status
from rest_framework.test import APIClient

from broodstock.customers.mock_data import CUSTOMERS


class CustomerListTests(TestCase):
    """Test customer list pagination"""

    def setUp(self):
        self.client = APIClient()

    def test_default_pagination(self):
        """Test defaults are limit=10, offset=0"""
        response = self.client.get('/api/v1/customers/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertTrue(body['success'])
        self.assertEqual(len(body['data']['customers']), 3)
        self.assertEqual(body['data']['pagination'], {'total': 3, 'limit': 10, 'offset': 0, 'pages': 1})

    def test_limit_and_offset(self):
        """Test slicing with explicit limit and offset"""
        response = self.client.get('/api/v1/customers/?limit=2&offset=1')
        data = response.json()['data']
        self.assertEqual([c['id'] for c in data['customers']], ['CUST-002', 'CUST-003'])
        self.assertEqual(data['pagination'], {'total': 3, 'limit': 2, 'offset': 1, 'pages': 2})

    def test_offset_past_end(self):
        """Test an offset beyond the list returns an empty page"""
        data = self.client.get('/api/v1/customers/?limit=5&offset=10').json()['data']
        self.assertEqual(data['customers'], [])
        self.assertEqual(data['pagination']['pages'], 1)

    def test_invalid_params_fall_back_to_defaults(self):
        """Test unparseable and negative values"""
        data = self.client.get('/api/v1/customers/?limit=abc&offset=-4').json()['data']
        self.assertEqual(data['pagination']['limit'], 10)
        self.assertEqual(data['pagination']['offset'], 0)

    def test_zero_limit(self):
        data = self.client.get('/api/v1/customers/?limit=0').json()['data']
        self.assertEqual(data['customers'], [])
        self.assertEqual(data['pagination']['pages'], 0)

    @override_settings(MAX_PAGE_SIZE=2)
    def test_limit_capped(self):
        data = self.client.get('/api/v1/customers/?limit=50').json()['data']
        self.assertEqual(data['pagination']['limit'], 2)
        self.assertEqual(len(data['customers']), 2)

    def test_customer_shape(self):
        customer = self.client.get('/api/v1/customers/').json()['data']['customers'][0]
        for field in ('id', 'name', 'email', 'phone', 'address', 'coordinates', 'status',
                      'total_orders', 'total_value', 'last_order_date', 'credential_status'):
            self.assertIn(field, customer)
        self.assertIn(customer['credential_status'], ('valid', 'expiring', 'expired', 'missing'))

    def test_response_does_not_alias_constants(self):
        """Test the fixed records are copied per request"""
        with mock.patch('broodstock.customers.views.paginate', wraps=lambda items, l, o: (items, {})) as paginate:
            self.client.get('/api/v1/customers/')
        items = paginate.call_args.args[0]
        self.assertIsNot(items[0], CUSTOMERS[0])

    def test_handler_error_returns_envelope(self):
        """Test an exception becomes the generic 500 envelope"""
        with mock.patch('broodstock.customers.views.paginate', side_effect=RuntimeError('boom')):
            with self.assertLogs('broodstock.core.responses', level='ERROR'):
                response = self.client.get('/api/v1/customers/')
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.json(), {'success': False, 'error': 'Internal server error'})


class CustomerStatsTests(TestCase):
    def test_stats_summary(self):
        """Test customer stats summary"""
        response = APIClient().get('/api/v1/customers/stats/summary/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()['data']
        self.assertEqual(data['total_customers'], 156)
        self.assertEqual(len(data['top_locations']), 5)
        self.assertEqual(
            set(data['credential_status']),
            {'valid', 'expiring', 'expired', 'missing'}
        )


class CustomerExportTests(TestCase):
    def test_csv_export(self):
        """Test CSV export lists every customer"""
        response = APIClient().get('/api/v1/customers/export/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response['Content-Type'].startswith('text/csv'))
        self.assertIn('attachment; filename="Customer_Report_', response['Content-Disposition'])

        rows = list(csv.reader(io.StringIO(response.content.decode('utf-8'))))
        self.assertEqual(rows[0][0], 'Customer ID')
        self.assertEqual(len(rows), 4)
        self.assertEqual(rows[1][4], 'Vancouver, Canada')

    def test_xlsx_export(self):
        """Test Excel export has a styled header row and one row per customer"""
        response = APIClient().get('/api/v1/customers/export/xlsx/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            response['Content-Type'],
            'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
        )
        self.assertRegex(response['Content-Disposition'], r'filename="Customer_Report_\d{4}-\d{2}-\d{2}\.xlsx"')

        sheet = load_workbook(io.BytesIO(response.content))['Data']
        rows = list(sheet.iter_rows(values_only=True))
        self.assertEqual(rows[0][0], 'Customer ID')
        self.assertEqual(len(rows), len(CUSTOMERS) + 1)
        self.assertEqual(rows[1][4], 'Vancouver, Canada')
        self.assertTrue(sheet['A1'].font.bold)
        self.assertGreaterEqual(sheet.column_dimensions['A'].width, 10)
