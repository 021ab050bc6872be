"""Facade for the JMAP protocol layer.

What:
  Surface the immutable :class:`Client`, its constructors, the query and
  mutation operations, and the blob fetcher.

Why:
  Call sites (the top-level package, the assembly pipeline, the CLI) should
  not depend on how session resolution, dispatch, and decoding are split
  across submodules.

Interfaces:
  ``Client``, ``new_client``, ``client_from_settings``, ``fetch_emails``,
  ``fetch_email``, ``fetch_thread``, ``archive_email``, ``fetch_blob``.

Invariants & Safety:
  - Every request carries the bearer token and goes through the client's
    injected transport.
  - Exactly one method call is sent per request.
"""

from .blobs import fetch_blob
from .client import Client, client_from_settings, new_client
from .operations import archive_email, fetch_email, fetch_emails, fetch_thread

__all__ = [
    "Client",
    "archive_email",
    "client_from_settings",
    "fetch_blob",
    "fetch_email",
    "fetch_emails",
    "fetch_thread",
    "new_client",
]
