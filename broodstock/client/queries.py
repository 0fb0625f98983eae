"""
Process-wide client data layer: the shared QueryClient/ApiClient pair plus
the invalidation groups and prefetch helpers used by the dashboard views.

Lifecycle is explicit: call ``setup_client_layer()`` at process start and
``shutdown_client_layer()`` on shutdown. The helpers accept an injected
client for tests and for callers that manage their own instances.
"""
import logging
import threading
from concurrent.futures import ThreadPoolExecutor

from .api import ApiClient
from .query_client import QueryClient
from .query_keys import query_keys

logger = logging.getLogger(__name__)

_layer_lock = threading.Lock()
_query_client = None
_api_client = None


def setup_client_layer(query_client=None, api_client=None):
    """Install the shared clients; returns ``(query_client, api_client)``"""
    global _query_client, _api_client
    with _layer_lock:
        if _query_client is not None:
            logger.warning("Client layer already set up; replacing existing clients")
        _query_client = query_client or QueryClient()
        _api_client = api_client or ApiClient.from_settings()
        logger.info(f"Client layer ready (api={_api_client.base_url})")
        return _query_client, _api_client


def shutdown_client_layer():
    """Drop cached queries and close the HTTP session"""
    global _query_client, _api_client
    with _layer_lock:
        if _query_client is not None:
            _query_client.clear()
        if _api_client is not None:
            _api_client.session.close()
        _query_client = None
        _api_client = None
    logger.info("Client layer shut down")


def get_query_client():
    if _query_client is None:
        raise RuntimeError("Client layer is not set up; call setup_client_layer() first")
    return _query_client


def get_api_client():
    if _api_client is None:
        raise RuntimeError("Client layer is not set up; call setup_client_layer() first")
    return _api_client


class QueryInvalidator:
    """Invalidation groups; a write to one resource refreshes dependent aggregates"""

    STATS_KEYS = (
        query_keys.customer_stats,
        query_keys.order_stats,
        query_keys.batch_stats,
        query_keys.dashboard_stats,
    )

    def __init__(self, client=None):
        self._client = client

    @property
    def client(self):
        return self._client or get_query_client()

    def customers(self):
        return self.client.invalidate_queries(query_keys.customers)

    def orders(self):
        return self.client.invalidate_queries(query_keys.orders)

    def batches(self):
        return self.client.invalidate_queries(query_keys.batches)

    def stats(self):
        return sum(self.client.invalidate_queries(key) for key in self.STATS_KEYS)

    def all(self):
        return self.client.invalidate_queries()


class QueryPrefetcher:
    """Warm cache entries before a view renders"""

    def __init__(self, client=None, api=None):
        self._client = client
        self._api = api

    @property
    def client(self):
        return self._client or get_query_client()

    @property
    def api(self):
        return self._api or get_api_client()

    def prefetch_all(self, entries):
        """Prefetch ``(key, query_fn)`` pairs in parallel and wait for all of them"""
        if not entries:
            return
        client = self.client
        with ThreadPoolExecutor(max_workers=len(entries), thread_name_prefix='prefetch') as pool:
            futures = [pool.submit(client.prefetch_query, key, fn) for key, fn in entries]
            for future in futures:
                future.result()

    def dashboard_data(self):
        api = self.api
        self.prefetch_all([
            (query_keys.order_stats, api.get_order_stats),
            (query_keys.customer_stats, api.get_customer_stats),
            (query_keys.batch_stats, api.get_batch_stats),
        ])


invalidate_queries = QueryInvalidator()
prefetch_queries = QueryPrefetcher()
