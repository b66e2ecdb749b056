import io
import json
import urllib.error
from urllib.parse import parse_qs, urlparse

import pytest

from finance_client.api import ApiClient


class FakeResponse:
    def __init__(self, status, payload):
        self.status = status
        self._raw = b"" if payload is None else json.dumps(payload).encode()

    def read(self):
        return self._raw

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeOpener:
    """Stands in for urllib.request.urlopen; routes on (method, path)."""

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, method, path, payload=None, status=200, error=None):
        self.routes[(method, path)] = (status, payload, error)

    def __call__(self, req, timeout=None):
        parsed = urlparse(req.full_url)
        body = json.loads(req.data.decode()) if req.data else None
        self.requests.append(
            {
                "method": req.get_method(),
                "path": parsed.path,
                "query": {k: v[0] for k, v in parse_qs(parsed.query).items()},
                "body": body,
                "headers": dict(req.header_items()),
            }
        )
        try:
            status, payload, error = self.routes[(req.get_method(), parsed.path)]
        except KeyError:
            raise urllib.error.URLError("connection refused")
        if error is not None:
            raise error
        if status >= 400:
            raise urllib.error.HTTPError(
                req.full_url, status, "error", {}, io.BytesIO(json.dumps(payload or {}).encode())
            )
        return FakeResponse(status, payload)

    def last(self, method, path):
        return [r for r in self.requests if r["method"] == method and r["path"] == path][-1]


@pytest.fixture
def opener():
    return FakeOpener()


@pytest.fixture
def api(opener):
    return ApiClient(base_url="http://api.test", opener=opener)


@pytest.fixture
def patched_urlopen(monkeypatch, opener):
    monkeypatch.setattr("finance_client.api.urllib.request.urlopen", opener)
    return opener


CATEGORIES = [
    {"id": "c-food", "name": "Groceries", "type": "EXPENSE", "color": "#f00", "icon": "cart", "keywords": ["mercado"]},
    {"id": "c-fuel", "name": "Fuel", "type": "EXPENSE", "color": "#0f0", "icon": "car", "keywords": []},
    {"id": "c-salary", "name": "Salary", "type": "INCOME", "color": "#00f", "icon": "cash", "keywords": ["salario"]},
]


def transaction_payload(**overrides):
    data = {
        "id": "t-1",
        "type": "EXPENSE",
        "amount": "42.50",
        "description": "mercado",
        "date": "2025-03-10T00:00:00.000Z",
        "categoryId": "c-food",
        "category": {"id": "c-food", "name": "Groceries", "color": "#f00", "icon": "cart"},
    }
    data.update(overrides)
    return data
