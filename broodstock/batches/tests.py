"""
Test suite for the batch stats endpoint
"""
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from broodstock.batches.mock_data import HEALTH_BUCKETS


class BatchStatsTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_stats_summary(self):
        """Test batch stats summary"""
        response = self.client.get('/api/v1/batches/stats/summary/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertTrue(body['success'])
        data = body['data']
        self.assertEqual(data['total_batches'], 187)
        self.assertEqual(data['total_population'], 12750000)
        self.assertEqual(tuple(data['health_status']), HEALTH_BUCKETS)
        self.assertEqual(sum(data['health_status'].values()), data['total_batches'])

    def test_species_population_adds_up(self):
        data = self.client.get('/api/v1/batches/stats/summary/').json()['data']
        self.assertEqual(
            sum(s['population'] for s in data['species_distribution']),
            data['total_population']
        )
        self.assertEqual(sum(s['batches'] for s in data['species_distribution']), data['total_batches'])

    def test_post_not_allowed(self):
        response = self.client.post('/api/v1/batches/stats/summary/')
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        self.assertFalse(response.json()['success'])
