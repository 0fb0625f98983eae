"""
Test suite for the dashboard KPI endpoint
"""
from unittest import mock

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient


class DashboardStatsTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_dashboard_stats(self):
        """Test KPI summary sections"""
        response = self.client.get('/api/v1/dashboard/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()['data']
        self.assertEqual(
            set(data),
            {'revenue', 'orders', 'customers', 'batches', 'alerts', 'trends'}
        )
        self.assertEqual(data['revenue']['total'], 2847650)
        self.assertEqual(data['trends']['customer_trend'], 'stable')

    def test_matches_order_and_batch_summaries(self):
        """Test dashboard totals agree with the per-resource summaries"""
        dashboard = self.client.get('/api/v1/dashboard/stats/').json()['data']
        orders = self.client.get('/api/v1/orders/stats/summary/').json()['data']
        batches = self.client.get('/api/v1/batches/stats/summary/').json()['data']
        self.assertEqual(dashboard['orders']['total'], orders['total_orders'])
        self.assertEqual(dashboard['revenue']['total'], orders['total_revenue'])
        self.assertEqual(dashboard['batches']['total'], batches['total_batches'])

    def test_error_envelope(self):
        with mock.patch('broodstock.dashboard.views.success_response', side_effect=RuntimeError('boom')):
            response = self.client.get('/api/v1/dashboard/stats/')
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.json(), {'success': False, 'error': 'Internal server error'})
