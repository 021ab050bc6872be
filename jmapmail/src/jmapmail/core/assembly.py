"""Email assembly: metadata to fully populated :class:`~jmapmail.core.email.Email`.

What:
  Turn ``Email/get`` metadata into an :class:`Email`, download every body
  part, attachment, and the original quote, embed inline images into HTML
  bodies, and expose the two entry points :func:`get_next_mail` and
  :func:`get_email`.

Why:
  Consumers want one call that yields a readable email rather than a list of
  blob ids. The order of downloads and the failure policy are part of the
  contract: text bodies, then HTML bodies, then attachments, then the quote,
  each strictly sequential, and the first failure aborts the whole assembly
  so no partially populated email ever escapes.

How:
  :func:`parse_email` builds the metadata-only value and derives the quote.
  :class:`EmailBuilder` accumulates fetched parts and is converted into a new
  frozen :class:`Email` only after every download succeeded.
  :func:`inline_images` rewrites ``cid:`` references attachment by
  attachment, in attachment order, over the progressively substituted HTML.

Interfaces:
  :func:`parse_email`, :func:`populate_contents`, :func:`inline_images`,
  :func:`get_next_mail`, :func:`get_email`, :class:`EmailBuilder`.

Invariants & Safety:
  - The metadata-only email passed in is never modified; a new value is
    returned.
  - Exceptions from the blob fetcher propagate unchanged and stop all
    remaining downloads.
  - With inlining disabled, HTML contents are returned exactly as downloaded.
"""
from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Union

from ..errors import InboxEmptyError
from ..jmap.blobs import OCTET_STREAM, TEXT_TYPES, fetch_blob
from ..jmap.operations import fetch_email, fetch_emails
from ..jmap.wire import EmailMetadata
from ..utils.logging import get_logger
from .email import Attachment, Email, EmailAddress, EmailBodyPart

if TYPE_CHECKING:  # pragma: no cover
    from ..jmap.client import Client


PLAIN_TEXT = "text/plain"

LOGGER = get_logger("jmapmail.assembly")


def derive_original_quote(text_body: Sequence[EmailBodyPart]) -> Optional[EmailBodyPart]:
    """Return the last ``text/plain`` part when more than one exists."""

    plain = [part for part in text_body if part.type == PLAIN_TEXT]
    if len(plain) > 1:
        return plain[-1]
    return None


def parse_email(metadata: EmailMetadata) -> Email:
    """Build the metadata-only :class:`Email` (all ``contents`` are ``None``)."""

    text_body = tuple(EmailBodyPart.from_record(record) for record in metadata.text_body)
    return Email(
        id=metadata.id,
        subject=metadata.subject,
        sender=tuple(EmailAddress.from_record(record) for record in metadata.sender),
        to=tuple(EmailAddress.from_record(record) for record in metadata.to),
        received_at=metadata.received_at,
        text_body=text_body,
        html_body=tuple(EmailBodyPart.from_record(record) for record in metadata.html_body),
        attachments=tuple(Attachment.from_record(record) for record in metadata.attachments),
        thread_id=metadata.thread_id,
        original_quote=derive_original_quote(text_body),
    )


@dataclass
class EmailBuilder:
    """Staged accumulator for an email whose contents are being downloaded.

    What:
      Hold the metadata-only email plus the parts fetched so far.

    Why:
      Downloads happen one at a time and may fail midway; accumulating into a
      mutable staging object keeps the frozen :class:`Email` untouched until
      the very end, when :meth:`build` produces the finished value.
    """

    source: Email
    text_body: List[EmailBodyPart] = field(default_factory=list)
    html_body: List[EmailBodyPart] = field(default_factory=list)
    attachments: List[Attachment] = field(default_factory=list)
    original_quote: Optional[EmailBodyPart] = None

    def build(self) -> Email:
        return Email(
            id=self.source.id,
            subject=self.source.subject,
            sender=self.source.sender,
            to=self.source.to,
            received_at=self.source.received_at,
            text_body=tuple(self.text_body),
            html_body=tuple(self.html_body),
            attachments=tuple(self.attachments),
            thread_id=self.source.thread_id,
            original_quote=self.original_quote,
        )


def _fetch_body_part(client: "Client", part: EmailBodyPart) -> EmailBodyPart:
    expected_type = part.type if part.type in TEXT_TYPES else OCTET_STREAM
    return part.with_contents(fetch_blob(client, part.blob_id, expected_type, charset=part.charset))


def _fetch_attachment(client: "Client", attachment: Attachment) -> Attachment:
    return attachment.with_contents(fetch_blob(client, attachment.blob_id, OCTET_STREAM))


def _as_bytes(contents: Union[str, bytes, None]) -> bytes:
    if contents is None:
        return b""
    if isinstance(contents, str):
        return contents.encode("utf-8")
    return contents


def inline_images(
    html_body: Sequence[EmailBodyPart],
    attachments: Sequence[Attachment],
) -> List[EmailBodyPart]:
    """Replace ``cid:<cid>`` references with base64 ``data:`` URIs.

    What:
      For every HTML part, walk the inline attachments (disposition
      ``inline`` with a ``cid``) in list order and replace every literal
      ``cid:<cid>`` occurrence with ``data:<type>;base64,<payload>``.

    Why:
      Inline images live in separate blobs; embedding them makes the HTML
      self-contained for renderers that cannot resolve ``cid:`` URLs.

    How:
      Each attachment pass runs over the output of the previous pass, so all
      distinct references resolve. Parts whose contents are not text are
      returned unchanged.

    Returns:
      New body parts; the inputs are not modified.
    """

    inline = [attachment for attachment in attachments if attachment.is_inline]
    if not inline:
        return list(html_body)
    rewritten: List[EmailBodyPart] = []
    for part in html_body:
        content = part.contents
        if not isinstance(content, str):
            rewritten.append(part)
            continue
        for attachment in inline:
            payload = base64.b64encode(_as_bytes(attachment.contents)).decode("ascii")
            content = content.replace(f"cid:{attachment.cid}", f"data:{attachment.type};base64,{payload}")
        rewritten.append(part.with_contents(content))
    return rewritten


def populate_contents(client: "Client", email: Email) -> Email:
    """Download every blob referenced by ``email`` and return a new value.

    Downloads run in this order: text bodies, HTML bodies, attachments, then
    the original quote (a separate download even though the same part is in
    ``text_body``). Inline-image substitution runs after the attachments are
    available, when ``client.inline_images`` is set.

    Raises:
      BlobDownloadError / TransportError: From the first failing download.
    """

    builder = EmailBuilder(source=email)
    for part in email.text_body:
        builder.text_body.append(_fetch_body_part(client, part))
    for part in email.html_body:
        builder.html_body.append(_fetch_body_part(client, part))
    for attachment in email.attachments:
        builder.attachments.append(_fetch_attachment(client, attachment))
    if client.inline_images:
        builder.html_body = inline_images(builder.html_body, builder.attachments)
    if email.original_quote is not None:
        builder.original_quote = _fetch_body_part(client, email.original_quote)

    assembled = builder.build()
    LOGGER.debug(
        "email_assembled",
        email_id=assembled.id,
        text_parts=len(assembled.text_body),
        html_parts=len(assembled.html_body),
        attachments=len(assembled.attachments),
        has_quote=assembled.original_quote is not None,
    )
    return assembled


def get_email(client: "Client", email_id: str) -> Email:
    """Fetch ``email_id`` and return it with all contents populated.

    Raises:
      EmailNotFoundError: If the server does not know ``email_id``.
    """

    return populate_contents(client, parse_email(fetch_email(client, email_id)))


def get_next_mail(
    client: "Client",
    *,
    offset: int = 0,
    sort: Optional[List[Dict[str, Any]]] = None,
) -> Email:
    """Return the next inbox email (oldest first by default), fully populated.

    Raises:
      InboxEmptyError: If the inbox query returns no ids; no ``Email/get`` is
        issued in that case.
    """

    page = fetch_emails(client, limit=1, offset=offset, sort=sort)
    if not page.ids:
        raise InboxEmptyError()
    return get_email(client, page.ids[0])
