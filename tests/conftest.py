"""Shared pytest configuration and fixtures."""

import json
import sys
from pathlib import Path
from types import SimpleNamespace
from urllib.parse import urlparse

import pytest

# Ensure `import cbioportaldata` works when running from repo root without editable install.
SRC_PATH = Path(__file__).resolve().parents[1] / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

DATA_DIR = Path(__file__).resolve().parent / "data"


class FakeResponse:
    """Minimal stand-in for a ``requests.Response``."""

    def __init__(self, payload=None, status_code=200, content=None):
        if content is None:
            content = b"" if payload is None else json.dumps(payload).encode("utf-8")
        self.status_code = status_code
        self.content = content
        self.headers = {"content-type": "application/json"}

    @property
    def text(self):
        return self.content.decode("utf-8")

    def json(self):
        return json.loads(self.content)


class FakeTransport:
    """Routes requests by (method, URL path) to canned responses and records them."""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []

    def add(self, method, path, response):
        """Register a FakeResponse, a JSON payload, or a callable taking the call."""
        if not isinstance(response, FakeResponse) and not callable(response):
            response = FakeResponse(response)
        self.routes[(method, path)] = response

    def send(self, method, url, headers=None, params=None, json=None, use_cache=False):
        call = SimpleNamespace(
            method=method,
            url=url,
            path=urlparse(url).path,
            headers=headers,
            params=params,
            json=json,
            use_cache=use_cache,
        )
        self.calls.append(call)
        handler = self.routes.get((method, call.path))
        if handler is None:
            return FakeResponse(
                {"message": f"No route for {method} {call.path}"}, status_code=404
            )
        return handler(call) if callable(handler) else handler

    def calls_to(self, path):
        return [c for c in self.calls if c.path == path]


@pytest.fixture
def api_docs_bytes():
    return (DATA_DIR / "api-docs.json").read_bytes()


@pytest.fixture
def registry(api_docs_bytes):
    from cbioportaldata.descriptor import Registry

    return Registry.from_spec_dict(json.loads(api_docs_bytes))


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def api(registry, transport):
    from cbioportaldata.client import CBioPortal

    return CBioPortal(
        hostname="www.cbioportal.org",
        protocol="https",
        api_path="/api/api-docs",
        registry=registry,
        transport=transport,
    )


@pytest.fixture
def cache():
    from cbioportaldata.cache import MemoryCache

    return MemoryCache()
