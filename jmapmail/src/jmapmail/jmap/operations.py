"""Query and mutation operations built on the dispatcher.

What:
  Implement inbox paging (``Email/query``), metadata lookup (``Email/get``),
  thread lookup (``Thread/get``), and archiving (``Email/set``).

Why:
  These are the only server round-trips callers make after authentication.
  Keeping each one a small function over an immutable :class:`Client` lets
  the assembly pipeline and the CLI compose them without shared state.

How:
  Build the method arguments, send them with
  :func:`~jmapmail.jmap.dispatcher.dispatch`, and decode the result into the
  typed records from :mod:`jmapmail.jmap.wire`. Empty lookups raise the
  matching not-found error.

Interfaces:
  :func:`fetch_emails`, :func:`fetch_email`, :func:`fetch_thread`,
  :func:`archive_email`, :data:`DEFAULT_SORT`, :data:`EMAIL_PROPERTIES`.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

from ..core.email import Thread
from ..errors import EmailNotFoundError, ProtocolError, ThreadNotFoundError
from .dispatcher import dispatch
from .wire import (
    EmailGetResult,
    EmailMetadata,
    EmailQueryResult,
    EmailSetResult,
    ThreadGetResult,
    decode,
)

if TYPE_CHECKING:  # pragma: no cover
    from .client import Client


DEFAULT_LIMIT = 50
DEFAULT_SORT: List[Dict[str, Any]] = [{"isAscending": True, "property": "receivedAt"}]
EMAIL_PROPERTIES = [
    "id",
    "subject",
    "from",
    "to",
    "receivedAt",
    "textBody",
    "htmlBody",
    "attachments",
    "threadId",
]


def fetch_emails(
    client: "Client",
    *,
    limit: int = DEFAULT_LIMIT,
    offset: int = 0,
    sort: Optional[List[Dict[str, Any]]] = None,
) -> EmailQueryResult:
    """Return one page of inbox email ids, oldest first by default.

    Args:
      client: Authenticated client.
      limit: Maximum ids to return.
      offset: Zero-based position of the first id.
      sort: JMAP comparator list; defaults to ascending ``receivedAt``.

    Returns:
      The decoded ``Email/query`` result (``ids``, ``total``, ``position``).
    """

    arguments = {
        "accountId": client.account_id,
        "filter": {"inMailbox": client.inbox_id},
        "sort": sort if sort is not None else DEFAULT_SORT,
        "position": offset,
        "limit": limit,
    }
    result = dispatch(client, "Email/query", arguments)
    return decode(EmailQueryResult, result, what="Email/query")


def fetch_email(client: "Client", email_id: str) -> EmailMetadata:
    """Return metadata for ``email_id`` using the fixed property projection.

    Raises:
      EmailNotFoundError: If the server returns an empty list.
    """

    arguments = {
        "accountId": client.account_id,
        "ids": [email_id],
        "properties": list(EMAIL_PROPERTIES),
    }
    result = decode(EmailGetResult, dispatch(client, "Email/get", arguments), what="Email/get")
    if not result.emails:
        raise EmailNotFoundError(email_id)
    return result.emails[0]


def fetch_thread(client: "Client", thread_id: str) -> Thread:
    """Return the thread ``thread_id`` with its ordered email ids.

    Raises:
      ThreadNotFoundError: If the server returns an empty list.
    """

    arguments = {"accountId": client.account_id, "ids": [thread_id]}
    result = decode(ThreadGetResult, dispatch(client, "Thread/get", arguments), what="Thread/get")
    if not result.threads:
        raise ThreadNotFoundError(thread_id)
    record = result.threads[0]
    return Thread(id=record.id, email_ids=tuple(record.email_ids))


def archive_email(client: "Client", email_id: str) -> EmailSetResult:
    """Set ``email_id``'s mailbox membership to the archive mailbox.

    The patch replaces the whole ``mailboxIds`` property, so inbox membership
    is dropped by the server in the same update.

    Raises:
      ProtocolError: If the server lists ``email_id`` under ``notUpdated``.
    """

    arguments = {
        "accountId": client.account_id,
        "update": {email_id: {"mailboxIds": {client.archive_id: True}}},
    }
    result = decode(EmailSetResult, dispatch(client, "Email/set", arguments), what="Email/set")
    failure = result.not_updated.get(email_id)
    if failure is not None:
        reason = failure.get("description") or failure.get("type") or "unknown"
        raise ProtocolError(f"Archive failed for {email_id}: {reason}", body=failure)
    return result
