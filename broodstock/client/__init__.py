"""
Client data layer: a shared query cache over the dashboard API.

    from broodstock.client import setup_client_layer, query_keys, prefetch_queries

    query_client, api = setup_client_layer()
    prefetch_queries.dashboard_data()
    stats = query_client.fetch_query(query_keys.order_stats, api.get_order_stats)
"""
from .api import ApiClient, ApiError, build_api_base_url
from .queries import (
    QueryInvalidator,
    QueryPrefetcher,
    get_api_client,
    get_query_client,
    invalidate_queries,
    prefetch_queries,
    setup_client_layer,
    shutdown_client_layer,
)
from .query_client import QueryClient, QueryState, default_retry, default_retry_delay
from .query_keys import QueryKeys, matches_key, normalize_key, query_keys

__all__ = [
    'ApiClient',
    'ApiError',
    'QueryClient',
    'QueryInvalidator',
    'QueryKeys',
    'QueryPrefetcher',
    'QueryState',
    'build_api_base_url',
    'default_retry',
    'default_retry_delay',
    'get_api_client',
    'get_query_client',
    'invalidate_queries',
    'matches_key',
    'normalize_key',
    'prefetch_queries',
    'query_keys',
    'setup_client_layer',
    'shutdown_client_layer',
]
