"""Transport contract consumed by the JMAP client.

What:
  Describe the two synchronous operations every HTTP backend must offer and
  the response envelope they return.

Why:
  The client injects its transport at construction time instead of looking
  one up globally, so tests and alternative HTTP stacks only need to satisfy
  this small protocol.

How:
  :class:`Transport` is a :class:`typing.Protocol`; backends return a
  :class:`TransportResponse` for every HTTP status (including 4xx/5xx) and
  raise :class:`~jmapmail.errors.TransportError` only for connection or
  decoding failures. :func:`decode_body` implements the shared content
  negotiation: JSON payloads are decoded, everything else stays bytes.
  A ``raw`` GET skips negotiation and returns the payload bytes untouched,
  which blob downloads rely on.

Interfaces:
  :class:`Transport`, :class:`TransportResponse`, :func:`decode_body`,
  :func:`encode_json`.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol

from ..errors import TransportError


JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class TransportResponse:
    """HTTP status plus a body that is either decoded JSON or raw bytes."""

    status: int
    body: Any


class Transport(Protocol):
    def get(self, url: str, *, headers: Mapping[str, str], raw: bool = False) -> TransportResponse:
        ...

    def post(self, url: str, body: Any, *, headers: Mapping[str, str]) -> TransportResponse:
        ...


def decode_body(content: bytes, content_type: Optional[str]) -> Any:
    """Decode ``content`` as JSON when ``content_type`` says so.

    Raises:
      TransportError: If a JSON-labelled payload cannot be decoded.
    """

    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    if media_type != JSON_CONTENT_TYPE and not media_type.endswith("+json"):
        return content
    if not content:
        return None
    try:
        return json.loads(content.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise TransportError(f"Invalid JSON response: {exc}", reason=exc) from exc


def encode_json(body: Any) -> bytes:
    return json.dumps(body).encode("utf-8")
