"""
Module: jmapmail.__init__

What:
  Aggregate the public API of the jmapmail JMAP email client: client
  construction, inbox queries, the archive mutation, blob download, and full
  email assembly.

Why:
  Most callers need a handful of functions (``new_client``,
  ``get_next_mail``, ``get_email``, ``archive_email``). Exposing them from the
  package root keeps scripts short while the internal split between the
  protocol layer (:mod:`jmapmail.jmap`) and the assembly pipeline
  (:mod:`jmapmail.core`) stays free to evolve.

How:
  Re-export the supported names and enumerate them in ``__all__``.

Interfaces:
  - Client construction: ``new_client``, ``client_from_settings``,
    ``Client``, ``Provider``.
  - Operations: ``fetch_emails``, ``fetch_email``, ``fetch_thread``,
    ``archive_email``, ``fetch_blob``.
  - Assembly: ``get_next_mail``, ``get_email``.
  - Values: ``Email``, ``EmailAddress``, ``EmailBodyPart``, ``Attachment``,
    ``Thread``.
  - Errors: ``JmapError`` and subclasses.

Example:
  >>> client = new_client("fmu1-...", Provider.FASTMAIL)  # doctest: +SKIP
  >>> email = get_next_mail(client)  # doctest: +SKIP
  >>> archive_email(client, email.id)  # doctest: +SKIP
"""

from .config import Provider
from .core import Attachment, Email, EmailAddress, EmailBodyPart, Thread
from .core.assembly import get_email, get_next_mail
from .errors import (
    AccountNotFoundError,
    AuthenticationError,
    BlobDownloadError,
    ConfigurationError,
    EmailNotFoundError,
    InboxEmptyError,
    JmapError,
    MailboxNotFoundError,
    NotFoundError,
    ProtocolError,
    ThreadNotFoundError,
    TransportError,
)
from .jmap import (
    Client,
    archive_email,
    client_from_settings,
    fetch_blob,
    fetch_email,
    fetch_emails,
    fetch_thread,
    new_client,
)

__version__ = "0.1.0"

__all__ = [
    "AccountNotFoundError",
    "Attachment",
    "AuthenticationError",
    "BlobDownloadError",
    "Client",
    "ConfigurationError",
    "Email",
    "EmailAddress",
    "EmailBodyPart",
    "EmailNotFoundError",
    "InboxEmptyError",
    "JmapError",
    "MailboxNotFoundError",
    "NotFoundError",
    "ProtocolError",
    "Provider",
    "Thread",
    "ThreadNotFoundError",
    "TransportError",
    "archive_email",
    "client_from_settings",
    "fetch_blob",
    "fetch_email",
    "fetch_emails",
    "fetch_thread",
    "get_email",
    "get_next_mail",
    "new_client",
]
