"""
Test suite for the client data layer
Tests: query key registry, QueryClient caching/dedup/retry/invalidation/gc,
ApiClient against the real views, invalidation groups and prefetching
"""
import threading
import time
from unittest import mock

import requests
from django.test import SimpleTestCase

from broodstock.client import (
    ApiClient,
    ApiError,
    QueryClient,
    QueryInvalidator,
    QueryPrefetcher,
    build_api_base_url,
    default_retry,
    get_query_client,
    invalidate_queries,
    matches_key,
    normalize_key,
    query_keys,
    setup_client_layer,
    shutdown_client_layer,
)
from broodstock.core.test_utils import FakeClock, LocalApiSession, TestDataFactory


class CountingFn:
    """Query function that records how often it was called"""

    def __init__(self, result=None, errors=()):
        self.calls = 0
        self.result = result
        self.errors = list(errors)

    def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.result if self.result is not None else {'call': self.calls}


def make_client(**kwargs):
    clock = FakeClock()
    sleep = mock.Mock()
    client = QueryClient(clock=clock, sleep=sleep, **kwargs)
    return client, clock, sleep


class QueryKeyTests(SimpleTestCase):
    def test_keys_are_structural(self):
        self.assertEqual(query_keys.customer('CUST-001'), ('customers', 'CUST-001'))
        self.assertEqual(query_keys.top_species(5, 30), query_keys.top_species(5, 30))
        self.assertNotEqual(query_keys.top_species(5, 30), query_keys.top_species(5, 60))

    def test_order_calculation_key_is_hashable(self):
        key = query_keys.order_calculation({'species': 'Penaeus vannamei', 'lines': [1, 2]})
        same = query_keys.order_calculation({'lines': [1, 2], 'species': 'Penaeus vannamei'})
        self.assertEqual(hash(key), hash(same))
        self.assertEqual(key, same)

    def test_prefix_matching(self):
        self.assertTrue(matches_key(query_keys.customer_stats, query_keys.customers))
        self.assertFalse(matches_key(query_keys.customers, query_keys.customer_stats))
        self.assertFalse(matches_key(query_keys.order_stats, query_keys.customers))
        self.assertTrue(matches_key(query_keys.order_stats, None))

    def test_normalize_key(self):
        self.assertEqual(normalize_key('orders'), ('orders',))
        self.assertEqual(normalize_key(['orders', 'stats']), query_keys.order_stats)


class QueryClientFetchTests(SimpleTestCase):
    """Test caching, staleness and in-flight dedup"""

    def setUp(self):
        self.client, self.clock, self.sleep = make_client()

    def test_defaults(self):
        client = QueryClient()
        self.assertEqual(client.stale_time, 300)
        self.assertEqual(client.gc_time, 600)
        self.assertFalse(client.refetch_on_window_focus)
        self.assertTrue(client.refetch_on_mount)

    def test_fresh_result_is_served_from_cache(self):
        fn = CountingFn()
        first = self.client.fetch_query(query_keys.order_stats, fn)
        self.clock.advance(299)
        second = self.client.fetch_query(query_keys.order_stats, fn)
        self.assertEqual(fn.calls, 1)
        self.assertEqual(first, second)

    def test_stale_result_is_refetched(self):
        fn = CountingFn()
        self.client.fetch_query(query_keys.order_stats, fn)
        self.clock.advance(300)
        self.assertEqual(self.client.fetch_query(query_keys.order_stats, fn), {'call': 2})
        self.assertEqual(fn.calls, 2)

    def test_concurrent_fetches_share_one_call(self):
        """Test a second reader joins the in-flight fetch"""
        started = threading.Event()
        release = threading.Event()
        calls = []

        def slow_fetch():
            calls.append(1)
            started.set()
            release.wait(5)
            return {'orders': len(calls)}

        results = []

        def reader():
            results.append(self.client.fetch_query(query_keys.orders, slow_fetch))

        first = threading.Thread(target=reader)
        first.start()
        self.assertTrue(started.wait(5))
        self.assertEqual(self.client.is_fetching(query_keys.orders), 1)

        second = threading.Thread(target=reader)
        second.start()
        time.sleep(0.05)
        release.set()
        first.join(5)
        second.join(5)

        self.assertEqual(len(calls), 1)
        self.assertEqual(results, [{'orders': 1}, {'orders': 1}])
        self.assertEqual(self.client.is_fetching(), 0)

    def test_concurrent_readers_share_failure(self):
        started = threading.Event()
        release = threading.Event()

        def failing_fetch():
            started.set()
            release.wait(5)
            raise ApiError('Not found', status=404)

        errors = []

        def reader():
            try:
                self.client.fetch_query(query_keys.batch('BTH-1'), failing_fetch)
            except ApiError as e:
                errors.append(e)

        threads = [threading.Thread(target=reader)]
        threads[0].start()
        self.assertTrue(started.wait(5))
        threads.append(threading.Thread(target=reader))
        threads[1].start()
        time.sleep(0.2)
        release.set()
        for thread in threads:
            thread.join(5)

        self.assertEqual(len(errors), 2)
        self.assertIs(errors[0], errors[1])

    def test_query_data_accessors(self):
        self.assertIsNone(self.client.get_query_data(query_keys.current_user))
        self.client.set_query_data(query_keys.current_user, {'id': '1'})
        self.assertEqual(self.client.get_query_data(query_keys.current_user), {'id': '1'})
        self.client.set_query_data(query_keys.current_user, lambda old: {**old, 'role': 'admin'})
        self.assertEqual(self.client.get_query_state(query_keys.current_user).data, {'id': '1', 'role': 'admin'})
        self.assertEqual(self.client.get_query_state(query_keys.current_user).status, 'success')


class QueryClientRetryTests(SimpleTestCase):
    """Test the retry policy"""

    def setUp(self):
        self.client, self.clock, self.sleep = make_client()

    def test_not_found_is_not_retried(self):
        fn = CountingFn(errors=[ApiError('Not found', status=404)])
        with self.assertLogs('broodstock.client.query_client', level='ERROR'):
            with self.assertRaises(ApiError):
                self.client.fetch_query(query_keys.order('99'), fn)
        self.assertEqual(fn.calls, 1)
        self.sleep.assert_not_called()
        self.assertEqual(self.client.get_query_state(query_keys.order('99')).status, 'error')

    def test_network_error_gives_up_after_three_attempts(self):
        errors = [ApiError('Network error: refused') for _ in range(5)]
        fn = CountingFn(errors=errors)
        with self.assertLogs('broodstock.client.query_client', level='ERROR') as logs:
            with self.assertRaises(ApiError):
                self.client.fetch_query(query_keys.dashboard_stats, fn)
        self.assertEqual(fn.calls, 3)
        self.assertEqual([c.args[0] for c in self.sleep.call_args_list], [1.0, 2.0])
        self.assertIn("Query key: ('dashboard', 'stats')", logs.output[-1])

    def test_unauthorized_is_retried(self):
        fn = CountingFn(errors=[ApiError('Invalid token', status=401)] * 3)
        with self.assertLogs('broodstock.client.query_client', level='ERROR'):
            with self.assertRaises(ApiError):
                self.client.fetch_query(query_keys.current_user, fn)
        self.assertEqual(fn.calls, 3)

    def test_server_error_recovers(self):
        fn = CountingFn(result={'ok': True}, errors=[ApiError('Internal server error', status=500)])
        self.assertEqual(self.client.fetch_query(query_keys.batch_stats, fn), {'ok': True})
        self.assertEqual(fn.calls, 2)
        self.assertEqual(self.client.get_query_state(query_keys.batch_stats).failure_count, 1)

    def test_default_retry_predicate(self):
        self.assertFalse(default_retry(1, ApiError('Bad request', status=400)))
        self.assertFalse(default_retry(1, ApiError('Unprocessable', status=422)))
        self.assertTrue(default_retry(1, ApiError('Unauthorized', status=401)))
        self.assertTrue(default_retry(2, ApiError('Bad gateway', status=502)))
        self.assertFalse(default_retry(3, ApiError('Bad gateway', status=502)))
        self.assertTrue(default_retry(1, ValueError('decode')))

    def test_mutations_are_not_retried(self):
        mutation = mock.Mock(side_effect=ApiError('Service unavailable', status=503))
        with self.assertLogs('broodstock.client.query_client', level='ERROR'):
            with self.assertRaises(ApiError):
                self.client.execute_mutation(mutation, {'order_number': 'ORD-2024-004'})
        mutation.assert_called_once_with({'order_number': 'ORD-2024-004'})
        self.sleep.assert_not_called()

    def test_mutation_success_callback(self):
        on_success = mock.Mock()
        result = self.client.execute_mutation(lambda x: x * 2, 21, on_success=on_success)
        self.assertEqual(result, 42)
        on_success.assert_called_once_with(42)


class QueryClientInvalidationTests(SimpleTestCase):
    """Test invalidation groups, observers and garbage collection"""

    def setUp(self):
        self.client, self.clock, self.sleep = make_client()
        self.invalidate = QueryInvalidator(self.client)
        self.fns = {
            query_keys.customers: CountingFn(),
            query_keys.customer_stats: CountingFn(),
            query_keys.order_stats: CountingFn(),
            query_keys.batch_stats: CountingFn(),
            query_keys.dashboard_stats: CountingFn(),
            query_keys.orders: CountingFn(),
        }
        for key, fn in self.fns.items():
            self.client.mount(key, fn)

    def test_mount_fetches_once(self):
        for fn in self.fns.values():
            self.assertEqual(fn.calls, 1)

    def test_stats_group_refetches_each_stats_key_once(self):
        self.invalidate.stats()
        for key in QueryInvalidator.STATS_KEYS:
            self.assertEqual(self.fns[key].calls, 2, key)
        self.assertEqual(self.fns[query_keys.customers].calls, 1)
        self.assertEqual(self.fns[query_keys.orders].calls, 1)
        self.assertFalse(self.client.get_query_state(query_keys.customers).is_invalidated)

    def test_customers_group_covers_customer_keys(self):
        count = self.invalidate.customers()
        self.assertEqual(count, 2)
        self.assertEqual(self.fns[query_keys.customers].calls, 2)
        self.assertEqual(self.fns[query_keys.customer_stats].calls, 2)
        self.assertEqual(self.fns[query_keys.order_stats].calls, 1)

    def test_invalidate_all(self):
        self.assertEqual(self.invalidate.all(), len(self.fns))
        for fn in self.fns.values():
            self.assertEqual(fn.calls, 2)

    def test_inactive_queries_are_marked_not_refetched(self):
        self.client.unmount(query_keys.batch_stats)
        self.invalidate.batches()
        fn = self.fns[query_keys.batch_stats]
        self.assertEqual(fn.calls, 1)
        self.assertTrue(self.client.get_query_state(query_keys.batch_stats).is_invalidated)
        self.client.fetch_query(query_keys.batch_stats, fn)
        self.assertEqual(fn.calls, 2)

    def test_remount_refetches_stale_entry(self):
        fn = self.fns[query_keys.order_stats]
        self.client.unmount(query_keys.order_stats)
        self.client.mount(query_keys.order_stats, fn)
        self.assertEqual(fn.calls, 1)
        self.clock.advance(301)
        self.client.mount(query_keys.order_stats, fn)
        self.assertEqual(fn.calls, 2)

    def test_window_focus_disabled(self):
        self.clock.advance(301)
        self.assertEqual(self.client.on_window_focus(), 0)
        self.assertEqual(self.fns[query_keys.orders].calls, 1)

    def test_garbage_collect_drops_inactive_entries(self):
        self.client.unmount(query_keys.orders)
        self.clock.advance(599)
        self.assertEqual(self.client.garbage_collect(), 0)
        self.clock.advance(1)
        self.assertEqual(self.client.garbage_collect(), 1)
        self.assertIsNone(self.client.get_query_state(query_keys.orders))
        self.assertIsNotNone(self.client.get_query_state(query_keys.customers))

    def test_remove_queries(self):
        self.assertEqual(self.client.remove_queries(query_keys.orders), 2)
        self.assertEqual(len(self.client.find_queries()), 4)

    def test_window_focus_refetches_stale_mounted_queries(self):
        """Test only stale keys that still have observers are refetched on focus"""
        client, clock, _ = make_client(refetch_on_window_focus=True)
        stale_fn, fresh_fn, unmounted_fn = CountingFn(), CountingFn(), CountingFn()
        client.mount(query_keys.order_stats, stale_fn)
        client.mount(query_keys.batch_stats, fresh_fn)
        client.mount(query_keys.orders, unmounted_fn)
        client.unmount(query_keys.orders)

        clock.advance(301)
        client.set_query_data(query_keys.batch_stats, {'total_batches': 188})

        self.assertEqual(client.on_window_focus(), 1)
        self.assertEqual(stale_fn.calls, 2)
        self.assertEqual(fresh_fn.calls, 1)
        self.assertEqual(unmounted_fn.calls, 1)
        self.assertEqual(client.get_query_data(query_keys.batch_stats), {'total_batches': 188})


class QueryClientGarbageCollectionTests(SimpleTestCase):
    """Test inactive entries are dropped without an explicit garbage_collect()"""

    def setUp(self):
        self.client, self.clock, self.sleep = make_client()
        self.nearby = query_keys.nearby_customers(49.28, -123.12, 50)

    def test_fetch_collects_expired_entries(self):
        self.client.mount(self.nearby, CountingFn())
        self.client.unmount(self.nearby)
        self.clock.advance(600)

        self.client.fetch_query(query_keys.order_stats, CountingFn())

        self.assertIsNone(self.client.get_query_state(self.nearby))
        self.assertIsNotNone(self.client.get_query_state(query_keys.order_stats))

    def test_unmount_collects_expired_entries(self):
        self.client.mount(self.nearby, CountingFn())
        self.client.mount(query_keys.customers, CountingFn())
        self.client.unmount(self.nearby)
        self.clock.advance(600)

        self.client.unmount(query_keys.customers)

        self.assertIsNone(self.client.get_query_state(self.nearby))
        self.assertIsNotNone(self.client.get_query_state(query_keys.customers))

    def test_collection_is_throttled(self):
        """Test lazy collection runs at most once per gc_interval"""
        calc = query_keys.order_calculation({'species': 'Penaeus monodon', 'quantity': 500})
        self.client.mount(calc, CountingFn())
        self.client.unmount(calc)

        self.clock.advance(570)
        self.client.fetch_query(query_keys.order_stats, CountingFn())
        self.assertIsNotNone(self.client.get_query_state(calc))

        # Expired, but the last collection ran 30s ago
        self.clock.advance(30)
        self.client.fetch_query(query_keys.order_stats, CountingFn())
        self.assertIsNotNone(self.client.get_query_state(calc))

        self.clock.advance(30)
        self.client.fetch_query(query_keys.order_stats, CountingFn())
        self.assertIsNone(self.client.get_query_state(calc))


class QueryClientSupersededFetchTests(SimpleTestCase):
    """Test invalidation during a running fetch"""

    def test_invalidation_replaces_running_fetch(self):
        """Test data read before a write is not cached once the key is invalidated"""
        client = QueryClient()
        server = {'version': 'old'}
        started = threading.Event()
        release = threading.Event()
        calls = []

        def fetch_stats():
            calls.append(1)
            snapshot = dict(server)
            if len(calls) == 1:
                started.set()
                release.wait(5)
            return snapshot

        observer = threading.Thread(target=client.mount, args=(query_keys.order_stats, fetch_stats))
        observer.start()
        self.assertTrue(started.wait(5))

        server['version'] = 'new'
        QueryInvalidator(client).stats()
        release.set()
        observer.join(5)

        self.assertEqual(len(calls), 2)
        self.assertEqual(client.get_query_data(query_keys.order_stats), {'version': 'new'})
        state = client.get_query_state(query_keys.order_stats)
        self.assertFalse(state.is_invalidated)
        self.assertEqual(state.fetch_count, 1)
        self.assertEqual(client.is_fetching(), 0)

    def test_superseded_fetch_keeps_key_invalidated_without_observers(self):
        """Test an unobserved key stays stale after its superseded fetch finishes"""
        client = QueryClient()
        started = threading.Event()
        release = threading.Event()
        results = []

        def fetch_stats():
            started.set()
            release.wait(5)
            return {'version': 'old'}

        reader = threading.Thread(
            target=lambda: results.append(client.fetch_query(query_keys.batch_stats, fetch_stats))
        )
        reader.start()
        self.assertTrue(started.wait(5))

        self.assertEqual(client.invalidate_queries(query_keys.batches), 1)
        release.set()
        reader.join(5)

        self.assertEqual(results, [{'version': 'old'}])
        state = client.get_query_state(query_keys.batch_stats)
        self.assertTrue(state.is_invalidated)
        self.assertIsNone(client.get_query_data(query_keys.batch_stats))
        self.assertEqual(
            client.fetch_query(query_keys.batch_stats, lambda: {'version': 'new'}),
            {'version': 'new'}
        )


class ApiClientTests(SimpleTestCase):
    """Test the HTTP client against the real views"""

    def setUp(self):
        self.session = LocalApiSession()
        self.api = ApiClient('http://testserver', '/api/v1', session=self.session)

    def test_build_api_base_url(self):
        self.assertEqual(build_api_base_url('http://localhost:3001', '/api/v1'), 'http://localhost:3001/api/v1')
        self.assertEqual(build_api_base_url('http://localhost:3001/', 'api/v1/'), 'http://localhost:3001/api/v1')
        self.assertEqual(build_api_base_url('http://host/api/v1', '/api/v1'), 'http://host/api/v1')
        self.assertEqual(build_api_base_url('https://host/api', '/api/v1'), 'https://host/api')
        self.assertEqual(build_api_base_url('http://host', ''), 'http://host')

    def test_login_me_logout(self):
        data = self.api.login(**TestDataFactory.credentials('manager'))
        self.assertEqual(data['user']['role'], 'manager')
        self.assertEqual(self.session.headers['Authorization'], f"Bearer {data['tokens']['accessToken']}")
        self.assertEqual(self.api.get_current_user()['email'], 'manager@shrimpfarm.com')

        self.api.logout()
        self.assertNotIn('Authorization', self.session.headers)
        with self.assertRaises(ApiError) as ctx:
            self.api.get_current_user()
        self.assertEqual(ctx.exception.status, 401)
        self.assertEqual(ctx.exception.message, 'No authorization token provided')

    def test_bad_login_raises(self):
        with self.assertRaises(ApiError) as ctx:
            self.api.login('admin@shrimpfarm.com', 'nope')
        self.assertEqual(ctx.exception.status, 401)
        self.assertEqual(ctx.exception.message, 'Invalid credentials')
        self.assertIn('demo@shrimpfarm.com', ctx.exception.details['message'])

    def test_resources(self):
        customers = self.api.get_customers(limit=2, offset=0)
        self.assertEqual(len(customers['customers']), 2)
        self.assertEqual(customers['pagination']['pages'], 2)
        self.assertEqual(self.api.get_orders()['pagination']['total'], 3)
        self.assertEqual(self.api.get_order_stats()['total_orders'], 1247)
        self.assertEqual(self.api.get_customer_stats()['total_customers'], 156)
        self.assertEqual(self.api.get_batch_stats()['total_batches'], 187)
        self.assertEqual(self.api.get_dashboard_stats()['alerts']['total_open'], 25)
        self.assertEqual(self.api.health()['status'], 'healthy')

    def test_transport_error_has_no_status(self):
        session = mock.Mock()
        session.request.side_effect = requests.exceptions.ConnectionError('refused')
        api = ApiClient('http://unreachable', session=session)
        with self.assertRaises(ApiError) as ctx:
            api.get_order_stats()
        self.assertIsNone(ctx.exception.status)
        self.assertTrue(default_retry(1, ctx.exception))

    def test_not_found(self):
        with self.assertRaises(ApiError) as ctx:
            self.api.get_data('orders/does-not-exist/')
        self.assertEqual(ctx.exception.status, 404)
        self.assertFalse(default_retry(1, ctx.exception))


class PrefetchTests(SimpleTestCase):
    """Test dashboard prefetching through the real views"""

    def setUp(self):
        self.session = LocalApiSession()
        self.api = ApiClient('http://testserver', session=self.session)
        self.client = QueryClient()

    def test_dashboard_data_warms_three_keys(self):
        QueryPrefetcher(self.client, self.api).dashboard_data()

        self.assertEqual(self.client.get_query_data(query_keys.order_stats)['total_orders'], 1247)
        self.assertEqual(self.client.get_query_data(query_keys.customer_stats)['total_customers'], 156)
        self.assertEqual(self.client.get_query_data(query_keys.batch_stats)['total_batches'], 187)
        self.assertEqual(self.session.calls['/api/v1/orders/stats/summary/'], 1)
        self.assertEqual(self.session.calls['/api/v1/customers/stats/summary/'], 1)
        self.assertEqual(self.session.calls['/api/v1/batches/stats/summary/'], 1)

    def test_second_prefetch_hits_cache(self):
        prefetcher = QueryPrefetcher(self.client, self.api)
        prefetcher.dashboard_data()
        prefetcher.dashboard_data()
        self.assertEqual(sum(self.session.calls.values()), 3)

    def test_prefetch_swallows_errors(self):
        self.api.get_batch_stats = mock.Mock(side_effect=ApiError('Not found', status=404))
        with self.assertLogs('broodstock.client.query_client', level='ERROR'):
            QueryPrefetcher(self.client, self.api).dashboard_data()
        self.assertIsNone(self.client.get_query_data(query_keys.batch_stats))
        self.assertIsNotNone(self.client.get_query_data(query_keys.order_stats))


class ClientLayerLifecycleTests(SimpleTestCase):
    def tearDown(self):
        shutdown_client_layer()

    def test_setup_and_shutdown(self):
        session = LocalApiSession()
        query_client, api = setup_client_layer(
            QueryClient(), ApiClient('http://testserver', session=session)
        )
        self.assertIs(get_query_client(), query_client)

        query_client.mount(query_keys.dashboard_stats, api.get_dashboard_stats)
        invalidate_queries.stats()
        self.assertEqual(session.calls['/api/v1/dashboard/stats/'], 2)

        shutdown_client_layer()
        self.assertTrue(session.closed)
        with self.assertRaises(RuntimeError):
            get_query_client()

    def test_default_api_client_from_settings(self):
        _, api = setup_client_layer()
        self.assertEqual(api.base_url, 'http://localhost:8000/api/v1')
