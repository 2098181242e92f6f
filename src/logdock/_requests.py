"""HTTP transport for LogDock."""
from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.request
from os import getenv
from typing import TYPE_CHECKING, Any, Mapping, Protocol

from ._constants import CA_BUNDLE_ENV_VAR, DEFAULT_TIMEOUT
from ._errors import LogDockTransportError

if TYPE_CHECKING:
    class SupportsSend(Protocol):
        def send(self,
                 url: str,
                 payload: Mapping[str, Any],
                 headers: Mapping[str, str]) -> None:
            ...


def _ssl_context_from_env():
    cafile = getenv(CA_BUNDLE_ENV_VAR) or getenv('SSL_CERT_FILE')
    if cafile:
        ctx = ssl.create_default_context(cafile=cafile)
        return ctx
    return None


def encode_json(payload: Mapping[str, Any]) -> bytes:
    # metadata is passed through as-is; anything JSON can't encode goes as str()
    return json.dumps(payload, ensure_ascii=False, default=str).encode('utf-8')


def post_json(url: str,
              payload: Mapping[str, Any],
              headers: Mapping[str, str],
              *,
              timeout: float = DEFAULT_TIMEOUT) -> bytes:
    """
    POST a JSON payload.

    :param url: endpoint URL
    :param payload: JSON-serializable body
    :param headers: request headers (should include ``Content-Type``)
    :param timeout: socket timeout, in seconds
    :raises LogDockTransportError: if the server returns a non-2xx response
    :raises URLError: if the request fails at the network level
    """
    ctx = _ssl_context_from_env()
    req = urllib.request.Request(
        url,
        method='POST',
        data=encode_json(payload),
        headers=dict(headers),
    )

    try:
        with urllib.request.urlopen(req, timeout=timeout, context=ctx) as resp:
            r = resp.read()
            if resp.status >= 300:
                raise LogDockTransportError(
                    resp.status, r.decode('utf-8', errors='replace'))
            return r
    except urllib.error.HTTPError as e:
        body = e.read().decode('utf-8', errors='replace')
        raise LogDockTransportError(e.code, body) from e


class HttpTransport:
    """Sends one entry per request; no retries, no queueing."""

    __slots__ = ('_timeout',)

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self._timeout = timeout

    def send(self,
             url: str,
             payload: Mapping[str, Any],
             headers: Mapping[str, str]) -> None:
        post_json(url, payload, headers, timeout=self._timeout)
