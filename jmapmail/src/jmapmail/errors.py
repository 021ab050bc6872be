"""Exception hierarchy shared by every jmapmail layer.

What:
  Define the typed failures raised by configuration, authentication,
  transport, protocol, and domain lookups.

Why:
  Callers need to tell a bad token apart from a missing email or a dropped
  connection without parsing message strings. A single root type keeps
  ``except JmapError`` available for coarse handlers such as the CLI.

How:
  Each category is a subclass of :class:`JmapError`; subclasses that describe
  HTTP outcomes keep the status code and decoded body as attributes so the
  original server response is never lost.

Interfaces:
  :class:`JmapError` and its subclasses.

Invariants & Safety:
  - Errors are raised to the immediate caller; nothing in the core retries or
    substitutes defaults.
  - Messages never include the API token.
"""
from __future__ import annotations

from typing import Any, Optional


class JmapError(Exception):
    """Root of all jmapmail failures."""


class ConfigurationError(JmapError):
    """Raised when client settings are missing or malformed."""


class AuthenticationError(JmapError):
    """Raised when the session endpoint rejects or confuses the client.

    Attributes:
      status: HTTP status of the session response when one was received.
      body: Decoded session response body when one was received.
    """

    def __init__(self, message: str, *, status: Optional[int] = None, body: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.body = body


class AccountNotFoundError(AuthenticationError):
    """Raised when the session document does not describe the mail account."""


class MailboxNotFoundError(AuthenticationError):
    """Raised when no mailbox carries a required role."""

    def __init__(self, role: str) -> None:
        super().__init__(f"No mailbox found with role: {role}")
        self.role = role


class TransportError(JmapError):
    """Raised by transport backends for connection or decoding failures.

    Attributes:
      reason: The underlying exception or message reported by the backend.
    """

    def __init__(self, message: str, *, reason: Any = None) -> None:
        super().__init__(message)
        self.reason = reason


class ProtocolError(JmapError):
    """Raised when a JMAP exchange does not follow the expected contract.

    Attributes:
      status: HTTP status code, when the failure was status-driven.
      body: Decoded response body for diagnostics.
    """

    def __init__(self, message: str, *, status: Optional[int] = None, body: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.body = body


class BlobDownloadError(ProtocolError):
    """Raised when the download endpoint answers a blob GET with a non-200 status."""


class NotFoundError(JmapError):
    """Base class for lookups that completed but matched nothing."""


class EmailNotFoundError(NotFoundError):
    def __init__(self, email_id: str) -> None:
        super().__init__("Email not found")
        self.email_id = email_id


class ThreadNotFoundError(NotFoundError):
    def __init__(self, thread_id: str) -> None:
        super().__init__("Thread not found")
        self.thread_id = thread_id


class InboxEmptyError(NotFoundError):
    def __init__(self) -> None:
        super().__init__("Inbox empty")


__all__ = [
    "AccountNotFoundError",
    "AuthenticationError",
    "BlobDownloadError",
    "ConfigurationError",
    "EmailNotFoundError",
    "InboxEmptyError",
    "JmapError",
    "MailboxNotFoundError",
    "NotFoundError",
    "ProtocolError",
    "ThreadNotFoundError",
    "TransportError",
]
