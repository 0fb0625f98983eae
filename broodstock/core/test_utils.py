"""
Test utilities shared by the app test suites
"""
import json
import threading
from collections import Counter
from urllib.parse import urlsplit

import requests
from requests.structures import CaseInsensitiveDict
from rest_framework.test import APIClient

from broodstock.core.demo_accounts import DEMO_CREDENTIALS, issue_demo_tokens, get_demo_user


class TestDataFactory:
    """Demo credentials and tokens"""

    @staticmethod
    def credentials(role):
        """Email/password pair of the demo account with ``role``"""
        for email, password, user_id in DEMO_CREDENTIALS:
            if get_demo_user(user_id)['role'] == role:
                return {'email': email, 'password': password}
        raise ValueError(f"No demo account with role {role!r}")

    @staticmethod
    def access_token(user_id='1'):
        return issue_demo_tokens(get_demo_user(user_id), now_ms=1700000000000)['accessToken']


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user_id='1'):
        """Send a demo bearer token for ``user_id`` on every request"""
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {TestDataFactory.access_token(user_id)}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()


class LocalApiSession:
    """
    Stand-in for ``requests.Session`` that routes calls to the Django test
    client, so ApiClient can be exercised against the real views.

    ``calls`` counts requests per URL path.
    """

    def __init__(self):
        self.headers = CaseInsensitiveDict()
        self.calls = Counter()
        self.closed = False
        self._client = APIClient()
        self._lock = threading.Lock()

    def request(self, method, url, params=None, json=None, timeout=None):
        with self._lock:
            return self._request(method, url, params, json)

    def _request(self, method, url, params, json):
        path = urlsplit(url).path
        self.calls[path] += 1

        extra = {}
        if 'Authorization' in self.headers:
            extra['HTTP_AUTHORIZATION'] = self.headers['Authorization']

        if method.upper() == 'GET':
            django_response = self._client.get(path, data=params or {}, **extra)
        else:
            django_response = self._client.generic(
                method.upper(), path,
                data=_json_body(json),
                content_type='application/json',
                **extra
            )

        response = requests.Response()
        response.status_code = django_response.status_code
        response._content = django_response.content
        response.headers = CaseInsensitiveDict(dict(django_response.items()))
        response.url = url
        response.reason = django_response.reason_phrase
        return response

    def close(self):
        self.closed = True


def _json_body(payload):
    return json.dumps(payload if payload is not None else {})


class FakeClock:
    """Manually advanced monotonic clock"""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds
