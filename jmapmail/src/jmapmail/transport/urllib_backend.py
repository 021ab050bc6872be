"""Dependency-free transport built on :mod:`urllib.request`.

HTTP error statuses are surfaced as ordinary :class:`TransportResponse`
values so the dispatcher sees the server's body; only network-level failures
raise :class:`~jmapmail.errors.TransportError`.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional
from urllib import error, request

from ..errors import TransportError
from .base import JSON_CONTENT_TYPE, TransportResponse, decode_body, encode_json


class UrllibTransport:
    def __init__(self, *, timeout: float = 30.0) -> None:
        self._timeout = timeout

    def get(self, url: str, *, headers: Mapping[str, str], raw: bool = False) -> TransportResponse:
        return self._send(url, method="GET", headers=dict(headers), data=None, raw=raw)

    def post(self, url: str, body: Any, *, headers: Mapping[str, str]) -> TransportResponse:
        merged = {"Content-Type": JSON_CONTENT_TYPE, **headers}
        return self._send(url, method="POST", headers=merged, data=encode_json(body))

    def _send(
        self,
        url: str,
        *,
        method: str,
        headers: dict,
        data: Optional[bytes],
        raw: bool = False,
    ) -> TransportResponse:
        req = request.Request(url=url, data=data, method=method, headers=headers)
        try:
            with request.urlopen(req, timeout=self._timeout) as res:
                status = res.status
                content_type = res.headers.get("Content-Type")
                payload = res.read()
        except error.HTTPError as exc:
            status = exc.code
            content_type = exc.headers.get("Content-Type") if exc.headers else None
            payload = exc.read()
        except error.URLError as exc:
            raise TransportError(f"Network error: {exc.reason}", reason=exc) from exc
        except OSError as exc:
            raise TransportError(f"Network error: {exc}", reason=exc) from exc
        if raw:
            return TransportResponse(status=status, body=payload)
        return TransportResponse(status=status, body=decode_body(payload, content_type))
