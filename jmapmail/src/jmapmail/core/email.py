"""Immutable email values produced by the assembly pipeline.

What:
  Define :class:`EmailAddress`, :class:`EmailBodyPart`, :class:`Attachment`,
  :class:`Email`, and :class:`Thread`.

Why:
  Callers receive email data long after the network exchange finished; frozen
  values guarantee that an email handed out by the pipeline is never altered
  behind their back. Body parts and attachments share a shape but differ in
  how their contents are treated: body text is decoded, attachment bytes are
  left opaque.

How:
  Frozen dataclasses with ``from_record`` constructors that copy the typed
  wire records from :mod:`jmapmail.jmap.wire`. ``contents`` is ``None`` until
  the assembler fetches the blob and builds a new value with
  :meth:`_Part.with_contents`.

Interfaces:
  :class:`EmailAddress`, :class:`EmailBodyPart`, :class:`Attachment`,
  :class:`Email`, :class:`Thread`.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Optional, Tuple, TypeVar, Union

if TYPE_CHECKING:  # pragma: no cover
    from ..jmap.wire import AddressRecord, BodyPartRecord


@dataclass(frozen=True)
class EmailAddress:
    email: str
    name: Optional[str] = None

    @classmethod
    def from_record(cls, record: "AddressRecord") -> "EmailAddress":
        return cls(email=record.email, name=record.name)

    def __str__(self) -> str:
        if self.name:
            return f"{self.name} <{self.email}>"
        return self.email


_PartT = TypeVar("_PartT", bound="_Part")


@dataclass(frozen=True)
class _Part:
    blob_id: str
    type: str
    part_id: Optional[str] = None
    size: Optional[int] = None
    charset: Optional[str] = None
    cid: Optional[str] = None
    disposition: Optional[str] = None
    language: Optional[Tuple[str, ...]] = None
    location: Optional[str] = None
    name: Optional[str] = None

    @classmethod
    def from_record(cls: type[_PartT], record: "BodyPartRecord") -> _PartT:
        return cls(
            blob_id=record.blob_id,
            type=record.type,
            part_id=record.part_id,
            size=record.size,
            charset=record.charset,
            cid=record.cid,
            disposition=record.disposition,
            language=tuple(record.language) if record.language is not None else None,
            location=record.location,
            name=record.name,
        )

    def with_contents(self: _PartT, contents: Union[str, bytes]) -> _PartT:
        return replace(self, contents=contents)


@dataclass(frozen=True)
class EmailBodyPart(_Part):
    """A text or HTML body part; ``contents`` is text once fetched.

    Parts whose MIME type is neither ``text/plain`` nor ``text/html`` (for
    example an image listed in ``textBody``) keep their raw bytes.
    """

    contents: Optional[Union[str, bytes]] = None


@dataclass(frozen=True)
class Attachment(_Part):
    """An attachment; ``contents`` is opaque bytes once fetched."""

    contents: Optional[bytes] = None

    @property
    def is_inline(self) -> bool:
        return self.disposition == "inline" and bool(self.cid)


@dataclass(frozen=True)
class Email:
    """A fully described email.

    ``text_body`` and ``html_body`` keep the server's order. ``original_quote``
    is the last ``text/plain`` part when there are several; that part is also
    still present in ``text_body``.
    """

    id: str
    subject: Optional[str]
    sender: Tuple[EmailAddress, ...]
    to: Tuple[EmailAddress, ...]
    received_at: Optional[str]
    text_body: Tuple[EmailBodyPart, ...]
    html_body: Tuple[EmailBodyPart, ...]
    attachments: Tuple[Attachment, ...]
    thread_id: Optional[str]
    original_quote: Optional[EmailBodyPart] = None

    def same_thread(self, other: "Email") -> bool:
        return self.thread_id == other.thread_id


@dataclass(frozen=True)
class Thread:
    id: str
    email_ids: Tuple[str, ...]
