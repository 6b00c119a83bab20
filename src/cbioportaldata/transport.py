"""HTTP transport shared by all API calls."""

import hashlib
import json
import logging
from typing import Any, Dict, Optional

import requests
import requests.adapters
from bravado.requests_client import RequestsClient

from . import config
from .cache import BlobCache
from .errors import TransportError

logger = logging.getLogger(__name__)


def _format_http_error(response: requests.Response) -> str:
    status = getattr(response, "status_code", "unknown")
    body = (getattr(response, "text", "") or "").strip().replace("\n", " ")
    body = body[:300]
    return f"HTTP {status}" + (f": {body}" if body else "")


def _request_key(
    method: str,
    url: str,
    params: Optional[Dict[str, Any]],
    body: Any,
    headers: Optional[Dict[str, str]] = None,
) -> str:
    # the token itself is never stored, only its digest
    auth = (headers or {}).get("Authorization")
    auth = hashlib.md5(auth.encode("utf-8")).hexdigest() if auth else None
    payload = json.dumps(
        [method, url, params or {}, body, auth], sort_keys=True, default=str
    )
    return hashlib.md5(payload.encode("utf-8")).hexdigest()


def _rebuild_response(entry: Dict[str, Any]) -> requests.Response:
    response = requests.Response()
    response.status_code = entry["status_code"]
    response.headers.update(entry["headers"])
    response.url = entry["url"]
    response.encoding = entry.get("encoding")
    response._content = entry["content"]
    return response


class RequestsTransport:
    """
    Blocking HTTP transport on a pooled ``requests`` session.

    Connection failures and 5xx responses raise :class:`TransportError`.
    4xx responses are returned as-is so that callers can read the error
    payload. Retries happen inside the connection adapter only.
    """

    def __init__(
        self,
        cache: Optional[BlobCache] = None,
        timeout: float = config.TIMEOUT,
        pool_size: int = config.POOL_SIZE,
        max_retries: int = config.MAX_RETRIES,
    ):
        self.http_client = RequestsClient()
        for scheme in ("https://", "http://"):
            self.http_client.session.mount(
                scheme,
                requests.adapters.HTTPAdapter(
                    pool_connections=pool_size,
                    pool_maxsize=pool_size,
                    max_retries=max_retries,
                    pool_block=False,
                ),
            )
        self.cache = cache
        self.timeout = timeout

    @property
    def session(self) -> requests.Session:
        return self.http_client.session

    def send(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        use_cache: bool = False,
    ) -> requests.Response:
        """
        Perform one request.

        Args:
            method: HTTP verb
            url: Fully resolved URL
            headers: Extra request headers (e.g. authorization)
            params: Query string parameters
            json: Request body, serialized as JSON
            use_cache: Consult and fill the response cache

        Returns:
            The unopened response
        """
        method = method.upper()
        key = None
        if use_cache and self.cache is not None:
            key = _request_key(method, url, params, json, headers)
            if self.cache.exists(key):
                logger.debug(f"Transport cache hit: {method} {url}")
                return _rebuild_response(self.cache.read(key))

        try:
            response = self.session.request(
                method,
                url,
                headers=headers,
                params=params,
                json=json,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        if response.status_code >= 500:
            raise TransportError(_format_http_error(response))

        if key is not None and response.status_code == 200:
            self.cache.write(
                key,
                {
                    "status_code": response.status_code,
                    "headers": dict(response.headers),
                    "url": response.url,
                    "encoding": response.encoding,
                    "content": response.content,
                },
            )
        return response


# Singleton transport instance
_transport = None


def get_transport() -> RequestsTransport:
    """Get or create the default transport with its on-disk response cache."""
    global _transport
    if _transport is None:
        _transport = RequestsTransport(cache=BlobCache(config.CACHE_DIR / "http"))
    return _transport
