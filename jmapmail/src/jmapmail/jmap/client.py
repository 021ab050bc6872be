"""Immutable, authenticated JMAP client value and its constructors.

What:
  Define :class:`Client`, the read-only bundle of credentials, transport, and
  session-derived identifiers, plus :func:`new_client` and
  :func:`client_from_settings` which produce one.

Why:
  Every operation needs the same handful of values. Freezing them after a
  successful authentication means callers can pass a client to any number of
  sequential operations without worrying about hidden mutation, and a client
  object existing at all proves the session was fully resolved.

How:
  Validate the token and provider, resolve the session URL (built-in for
  Fastmail, explicit ``api_url`` otherwise), run
  :func:`~jmapmail.jmap.session.authenticate`, and copy its result into a
  frozen dataclass together with the injected transport and assembly options.

Interfaces:
  :class:`Client`, :func:`new_client`, :func:`client_from_settings`,
  :func:`resolve_api_url`.

Invariants & Safety:
  - ``session_url``, ``account_id``, ``inbox_id``, ``archive_id``, and
    ``download_url`` are non-empty on every constructed client.
  - The API token is excluded from ``repr`` output.
  - :meth:`Client.close` releases only a transport the client created.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Optional

from ..config import JmapSettings, Provider, get_settings
from ..errors import ConfigurationError
from ..transport import HttpxTransport, Transport, build_transport
from .session import authenticate


@dataclass(frozen=True)
class Client:
    """Authenticated JMAP session bound to one mail account."""

    api_token: str = field(repr=False)
    provider: Provider
    api_url: str
    session_url: str
    account_id: str
    inbox_id: str
    archive_id: str
    download_url: str
    transport: Transport = field(repr=False, compare=False)
    inline_images: bool = True
    owns_transport: bool = field(default=False, repr=False, compare=False)

    def close(self) -> None:
        """Release the transport if this client created it.

        Transports passed in by the caller stay open; their lifetime belongs to
        whoever built them.
        """

        if self.owns_transport:
            _close_transport(self.transport)

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def resolve_api_url(provider: Provider, api_url: Optional[str]) -> str:
    """Return the session endpoint for ``provider``.

    Raises:
      ConfigurationError: If ``provider`` has no built-in URL and ``api_url``
        was not supplied.
    """

    if api_url:
        return api_url
    default = provider.default_session_url
    if default is None:
        raise ConfigurationError(f"API URL must be provided for provider: {provider.value}")
    return default


def new_client(
    api_token: Any,
    provider: Any,
    *,
    api_url: Optional[str] = None,
    inline_images: bool = True,
    transport: Optional[Transport] = None,
) -> Client:
    """Authenticate and return a fully populated :class:`Client`.

    Args:
      api_token: JMAP API token (for Fastmail, an app password token).
      provider: A :class:`~jmapmail.config.Provider` member.
      api_url: Session endpoint override; required for non-Fastmail providers.
      inline_images: Whether assembled HTML bodies embed inline attachments
        as ``data:`` URIs.
      transport: HTTP backend; defaults to a new :class:`HttpxTransport`
        that the returned client owns and releases in :meth:`Client.close`.

    Raises:
      ConfigurationError: Missing token, provider of the wrong type, or
        missing ``api_url``.
      AuthenticationError: Propagated from session resolution.
    """

    if not isinstance(provider, Provider):
        raise ConfigurationError(f"Invalid provider: {provider!r}. Expected a Provider.")
    if not isinstance(api_token, str) or not api_token:
        raise ConfigurationError("API token not configured")
    url = resolve_api_url(provider, api_url)
    owned = transport is None
    if transport is None:
        transport = HttpxTransport()
    try:
        resolved = authenticate(transport, url, api_token)
    except Exception:
        if owned:
            _close_transport(transport)
        raise
    return Client(
        api_token=api_token,
        provider=provider,
        api_url=url,
        session_url=resolved.session_url,
        account_id=resolved.account_id,
        inbox_id=resolved.inbox_id,
        archive_id=resolved.archive_id,
        download_url=resolved.download_url,
        transport=transport,
        inline_images=inline_images,
        owns_transport=owned,
    )


def _close_transport(transport: Transport) -> None:
    close = getattr(transport, "close", None)
    if close is not None:
        close()


def client_from_settings(
    settings: Optional[JmapSettings] = None,
    *,
    transport: Optional[Transport] = None,
) -> Client:
    """Build a client from process-wide settings.

    What:
      Read the token, provider, URL, transport, and options from
      :func:`~jmapmail.config.get_settings` (or ``settings`` when given) and
      delegate to :func:`new_client`. A transport built here from the
      ``transport`` setting is owned by the returned client.

    Why:
      Scripts and the CLI want a zero-argument constructor driven by
      ``jmapmail.yaml`` and environment variables.

    Raises:
      ConfigurationError: ``"API token not configured"`` or
        ``"Provider not configured"`` when the settings lack them.
    """

    settings = settings if settings is not None else get_settings()
    if not settings.api_token:
        raise ConfigurationError("API token not configured")
    if settings.provider is None:
        raise ConfigurationError("Provider not configured")
    owned = transport is None
    if transport is None:
        transport = build_transport(settings.transport, timeout=settings.timeout)
    try:
        client = new_client(
            settings.api_token,
            settings.provider,
            api_url=settings.api_url,
            inline_images=settings.opts.inline_images,
            transport=transport,
        )
    except Exception:
        if owned:
            _close_transport(transport)
        raise
    return replace(client, owns_transport=owned)
