"""Facade for the pluggable HTTP transport layer.

What:
  Surface the :class:`Transport` protocol, both shipped backends, and the
  :func:`build_transport` factory used by settings-driven construction.

Why:
  The JMAP client never imports an HTTP library directly; it receives a
  transport by injection. Keeping backend selection in one factory means the
  settings file, the CLI, and library callers agree on the available names.

Interfaces:
  ``Transport``, ``TransportResponse``, ``HttpxTransport``,
  ``UrllibTransport``, ``build_transport``.
"""

from ..errors import ConfigurationError
from .base import Transport, TransportResponse
from .httpx_backend import HttpxTransport
from .urllib_backend import UrllibTransport


def build_transport(kind: str = "httpx", *, timeout: float = 30.0) -> Transport:
    """Instantiate the backend registered under ``kind``.

    Raises:
      ConfigurationError: If ``kind`` names no known backend.
    """

    if kind == "httpx":
        return HttpxTransport(timeout=timeout)
    if kind == "urllib":
        return UrllibTransport(timeout=timeout)
    raise ConfigurationError(f"Unknown transport: {kind!r}")


__all__ = [
    "HttpxTransport",
    "Transport",
    "TransportResponse",
    "UrllibTransport",
    "build_transport",
]
