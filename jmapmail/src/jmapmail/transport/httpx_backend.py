"""Default transport built on ``httpx``."""
from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx

from ..errors import TransportError
from .base import JSON_CONTENT_TYPE, TransportResponse, decode_body, encode_json


class HttpxTransport:
    """Synchronous :class:`~jmapmail.transport.base.Transport` over ``httpx.Client``.

    A caller-supplied ``client`` is used as-is (tests pass one wired to
    ``httpx.MockTransport``); otherwise a client with ``timeout`` is created
    and owned by this instance.
    """

    def __init__(self, client: Optional[httpx.Client] = None, *, timeout: float = 30.0) -> None:
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(timeout=timeout)

    def get(self, url: str, *, headers: Mapping[str, str], raw: bool = False) -> TransportResponse:
        return self._send("GET", url, raw=raw, headers=dict(headers))

    def post(self, url: str, body: Any, *, headers: Mapping[str, str]) -> TransportResponse:
        merged = {"Content-Type": JSON_CONTENT_TYPE, **headers}
        return self._send("POST", url, headers=merged, content=encode_json(body))

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _send(self, method: str, url: str, *, raw: bool = False, **kwargs: Any) -> TransportResponse:
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {url} failed: {exc}", reason=exc) from exc
        if raw:
            return TransportResponse(status=response.status_code, body=response.content)
        body = decode_body(response.content, response.headers.get("content-type"))
        return TransportResponse(status=response.status_code, body=body)
