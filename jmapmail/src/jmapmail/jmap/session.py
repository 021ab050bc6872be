"""Session resolution: authenticate, pick the mail account, resolve mailbox roles.

What:
  Perform the authenticated GET against the session endpoint, extract the
  primary mail account, list its mailboxes, and locate the ``inbox`` and
  ``archive`` roles.

Why:
  A client is only useful once all five session-derived values are known
  (API URL, account id, inbox id, archive id, download URL template). Doing
  the whole resolution here, and handing back a complete
  :class:`ResolvedSession` or nothing, keeps half-authenticated clients from
  ever existing.

How:
  Decode the session body into :class:`~jmapmail.jmap.wire.SessionDocument`,
  verify the account, call ``Mailbox/get`` through the dispatcher, and scan
  the mailbox list in server order for each role; the first match wins.

Interfaces:
  :class:`ResolvedSession`, :func:`authenticate`, :func:`find_mailbox_id`.

Invariants & Safety:
  - Steps run in order and stop at the first failure.
  - Mailbox role matching is exact (``"inbox"`` / ``"archive"``) and stable
    with respect to server ordering.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from pydantic import ValidationError

from ..errors import (
    AccountNotFoundError,
    AuthenticationError,
    MailboxNotFoundError,
    TransportError,
)
from ..transport import Transport
from ..utils.logging import get_logger
from .dispatcher import auth_headers, call_method
from .wire import MailboxGetResult, MailboxRecord, SessionDocument, decode


INBOX_ROLE = "inbox"
ARCHIVE_ROLE = "archive"

LOGGER = get_logger("jmapmail.session")


@dataclass(frozen=True)
class ResolvedSession:
    """All session-derived values a client needs, populated together."""

    session_url: str
    account_id: str
    inbox_id: str
    archive_id: str
    download_url: str


def find_mailbox_id(mailboxes: Sequence[MailboxRecord], role: str) -> str:
    """Return the id of the first mailbox whose role equals ``role``.

    Raises:
      MailboxNotFoundError: If no mailbox carries ``role``.
    """

    for mailbox in mailboxes:
        if mailbox.role == role:
            return mailbox.id
    raise MailboxNotFoundError(role)


def _fetch_session(transport: Transport, api_url: str, api_token: str) -> SessionDocument:
    try:
        response = transport.get(api_url, headers=auth_headers(api_token))
    except TransportError as exc:
        raise AuthenticationError(f"Authentication request failed: {exc}") from exc
    if response.status != 200:
        raise AuthenticationError(
            f"Authentication failed with status {response.status}: {response.body!r}",
            status=response.status,
            body=response.body,
        )
    if not isinstance(response.body, dict):
        raise AuthenticationError(
            "Session response was not a JSON object", status=response.status, body=response.body
        )
    try:
        return SessionDocument.model_validate(response.body)
    except ValidationError as exc:
        raise AuthenticationError(
            f"Invalid session document: {exc}", status=response.status, body=response.body
        ) from exc


def authenticate(transport: Transport, api_url: str, api_token: str) -> ResolvedSession:
    """Resolve every session-derived value or raise.

    Args:
      transport: Backend used for the session GET and the ``Mailbox/get`` call.
      api_url: Session endpoint URL.
      api_token: Bearer token.

    Returns:
      A fully populated :class:`ResolvedSession`.

    Raises:
      AuthenticationError: Non-200 session response, transport failure during
        the session GET, or a session document without ``apiUrl`` /
        ``downloadUrl``.
      AccountNotFoundError: The primary mail account is missing from the
        session's ``accounts`` map.
      MailboxNotFoundError: No mailbox carries the ``inbox`` or ``archive``
        role.
      ProtocolError / TransportError: Propagated from the mailbox listing.
    """

    session = _fetch_session(transport, api_url, api_token)

    account_id = session.mail_account_id
    if not account_id or account_id not in session.accounts:
        raise AccountNotFoundError("Account not found in session response")
    if not session.api_url:
        raise AuthenticationError("Session response is missing apiUrl")
    if not session.download_url:
        raise AuthenticationError("Session response is missing downloadUrl")

    result = call_method(transport, session.api_url, api_token, "Mailbox/get", {"accountId": account_id})
    mailboxes = decode(MailboxGetResult, result, what="Mailbox/get").mailboxes
    inbox_id = find_mailbox_id(mailboxes, INBOX_ROLE)
    archive_id = find_mailbox_id(mailboxes, ARCHIVE_ROLE)

    LOGGER.debug(
        "session_established",
        account_id=account_id,
        mailbox_count=len(mailboxes),
        inbox_id=inbox_id,
        archive_id=archive_id,
    )
    return ResolvedSession(
        session_url=session.api_url,
        account_id=account_id,
        inbox_id=inbox_id,
        archive_id=archive_id,
        download_url=session.download_url,
    )
