"""
HTTP client for the dashboard API.

Wraps a ``requests.Session``: unwraps the ``{success, data}`` envelope,
keeps the bearer token after login and turns every failure into ApiError.
"""
import logging
import re
from urllib.parse import urlsplit

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10
_API_PATH_RE = re.compile(r'/api(/|$)', re.IGNORECASE)


class ApiError(Exception):
    """
    Failed API call. ``status`` is the HTTP status, or None for transport
    errors (connection refused, timeout...), which the query layer retries.
    """

    def __init__(self, message, status=None, details=None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.details = details

    def __str__(self):
        if self.status is None:
            return self.message
        return f"{self.message} (HTTP {self.status})"


def normalize_path(value):
    if not value:
        return ''
    trimmed = value.strip().strip('/')
    return f"/{trimmed}" if trimmed else ''


def build_api_base_url(base, api_path):
    """
    Join ``base`` and ``api_path`` without doubling the API prefix.

    A base that already ends with ``api_path``, or already points at an
    ``/api`` path, is returned unchanged.
    """
    normalized_base = base.strip().rstrip('/')
    normalized_path = normalize_path(api_path)

    if not normalized_path:
        return normalized_base
    if normalized_base.lower().endswith(normalized_path.lower()):
        return normalized_base

    pathname = urlsplit(normalized_base).path.rstrip('/').lower()
    if pathname.endswith('/api') or '/api/' in pathname:
        return normalized_base
    if not urlsplit(normalized_base).scheme and _API_PATH_RE.search(normalized_base):
        return normalized_base

    return f"{normalized_base}{normalized_path}"


def _error_message(payload, fallback):
    if not isinstance(payload, dict):
        return fallback
    error = payload.get('error')
    if isinstance(error, dict):
        return error.get('message') or fallback
    return error or payload.get('message') or fallback


class ApiClient:
    """Typed accessors for the mock endpoints"""

    def __init__(self, base_url='http://localhost:8000', api_path='/api/v1',
                 session=None, timeout=DEFAULT_TIMEOUT):
        self.base_url = build_api_base_url(base_url, api_path)
        parts = urlsplit(self.base_url)
        self.root_url = f"{parts.scheme}://{parts.netloc}" if parts.netloc else ''
        self.session = session or requests.Session()
        self.timeout = timeout
        self.tokens = None

    @classmethod
    def from_settings(cls, session=None):
        from django.conf import settings
        return cls(settings.API_URL, settings.API_PATH, session=session)

    # ==================== TRANSPORT ====================

    def _send(self, method, url, params=None, json=None):
        try:
            response = self.session.request(method, url, params=params, json=json, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise ApiError(f"Network error: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not response.ok or (isinstance(payload, dict) and payload.get('success') is False):
            message = _error_message(payload, response.reason or 'Request failed')
            logger.debug(f"{method} {url} -> {response.status_code}: {message}")
            raise ApiError(message, status=response.status_code, details=payload)
        if payload is None:
            raise ApiError('Invalid JSON response', status=response.status_code)
        return payload

    def request(self, method, endpoint, params=None, json=None):
        """Call ``endpoint`` under the API base and return the full payload"""
        return self._send(method, f"{self.base_url}/{endpoint.lstrip('/')}", params=params, json=json)

    def get_data(self, endpoint, params=None):
        return self.request('GET', endpoint, params=params).get('data')

    # ==================== AUTH ====================

    def _set_token(self, access_token):
        if access_token:
            self.session.headers['Authorization'] = f"Bearer {access_token}"
        else:
            self.session.headers.pop('Authorization', None)

    def login(self, email, password):
        data = self.request('POST', 'auth/login/', json={'email': email, 'password': password})['data']
        self.tokens = data['tokens']
        self._set_token(self.tokens['accessToken'])
        logger.info(f"Logged in as {data['user']['email']}")
        return data

    def logout(self):
        try:
            return self.request('POST', 'auth/logout/')
        finally:
            self.tokens = None
            self._set_token(None)

    def get_current_user(self):
        return self.get_data('auth/me/')['user']

    # ==================== RESOURCES ====================

    def get_customers(self, limit=10, offset=0):
        return self.get_data('customers/', params={'limit': limit, 'offset': offset})

    def get_customer_stats(self):
        return self.get_data('customers/stats/summary/')

    def get_orders(self, limit=10, offset=0):
        return self.get_data('orders/', params={'limit': limit, 'offset': offset})

    def get_order_stats(self):
        return self.get_data('orders/stats/summary/')

    def get_batch_stats(self):
        return self.get_data('batches/stats/summary/')

    def get_dashboard_stats(self):
        return self.get_data('dashboard/stats/')

    def health(self):
        """Health probe lives outside the versioned API path"""
        return self._send('GET', f"{self.root_url}/api/health/")
