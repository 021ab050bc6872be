"""Pydantic models for JMAP documents, validated once at the protocol boundary.

Everything past the dispatcher works with these typed records instead of
re-inspecting raw JSON keys. Unknown server fields are ignored; fields the
client depends on are required so malformed responses fail loudly.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import ProtocolError


CORE_CAPABILITY = "urn:ietf:params:jmap:core"
MAIL_CAPABILITY = "urn:ietf:params:jmap:mail"
USING = [CORE_CAPABILITY, MAIL_CAPABILITY]


class _Wire(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class SessionDocument(_Wire):
    """The authenticated session resource returned by the session endpoint."""

    primary_accounts: Dict[str, str] = Field(default_factory=dict, alias="primaryAccounts")
    accounts: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    api_url: Optional[str] = Field(default=None, alias="apiUrl")
    download_url: Optional[str] = Field(default=None, alias="downloadUrl")
    capabilities: Dict[str, Any] = Field(default_factory=dict)
    username: Optional[str] = None
    state: Optional[str] = None

    @property
    def mail_account_id(self) -> Optional[str]:
        return self.primary_accounts.get(MAIL_CAPABILITY)


class MailboxRecord(_Wire):
    id: str
    name: Optional[str] = None
    role: Optional[str] = None
    parent_id: Optional[str] = Field(default=None, alias="parentId")


class MailboxGetResult(_Wire):
    account_id: Optional[str] = Field(default=None, alias="accountId")
    mailboxes: List[MailboxRecord] = Field(alias="list")


class MethodEnvelope(_Wire):
    """Top-level JMAP response: the batched method responses plus session state."""

    method_responses: List[Tuple[str, Dict[str, Any], str]] = Field(alias="methodResponses")
    session_state: Optional[str] = Field(default=None, alias="sessionState")


class EmailQueryResult(_Wire):
    """Result of ``Email/query``: one page of ids plus paging metadata."""

    account_id: Optional[str] = Field(default=None, alias="accountId")
    query_state: Optional[str] = Field(default=None, alias="queryState")
    can_calculate_changes: Optional[bool] = Field(default=None, alias="canCalculateChanges")
    ids: List[str]
    total: Optional[int] = None
    position: int = 0


class AddressRecord(_Wire):
    name: Optional[str] = None
    email: str


class BodyPartRecord(_Wire):
    blob_id: str = Field(alias="blobId")
    part_id: Optional[str] = Field(default=None, alias="partId")
    type: str
    size: Optional[int] = None
    charset: Optional[str] = None
    cid: Optional[str] = None
    disposition: Optional[str] = None
    language: Optional[List[str]] = None
    location: Optional[str] = None
    name: Optional[str] = None

    @field_validator("language", mode="before")
    @classmethod
    def _language_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value


class EmailMetadata(_Wire):
    """The property projection requested by ``Email/get``."""

    id: str
    subject: Optional[str] = None
    sender: List[AddressRecord] = Field(default_factory=list, alias="from")
    to: List[AddressRecord] = Field(default_factory=list)
    received_at: Optional[str] = Field(default=None, alias="receivedAt")
    text_body: List[BodyPartRecord] = Field(default_factory=list, alias="textBody")
    html_body: List[BodyPartRecord] = Field(default_factory=list, alias="htmlBody")
    attachments: List[BodyPartRecord] = Field(default_factory=list)
    thread_id: Optional[str] = Field(default=None, alias="threadId")

    @field_validator("sender", "to", "text_body", "html_body", "attachments", mode="before")
    @classmethod
    def _null_list(cls, value: Any) -> Any:
        return [] if value is None else value


class EmailGetResult(_Wire):
    emails: List[EmailMetadata] = Field(alias="list")
    not_found: List[str] = Field(default_factory=list, alias="notFound")

    @field_validator("not_found", mode="before")
    @classmethod
    def _null_list(cls, value: Any) -> Any:
        return [] if value is None else value


class ThreadRecord(_Wire):
    id: str
    email_ids: List[str] = Field(alias="emailIds")


class ThreadGetResult(_Wire):
    threads: List[ThreadRecord] = Field(alias="list")


class EmailSetResult(_Wire):
    """Result of ``Email/set``.

    ``updated`` is a map of id to server-changed properties per RFC 8621, but
    some servers (and test doubles) answer with a plain id list; both shapes
    support ``"id" in result.updated``.
    """

    account_id: Optional[str] = Field(default=None, alias="accountId")
    new_state: Optional[str] = Field(default=None, alias="newState")
    updated: Optional[Union[Dict[str, Any], List[str]]] = None
    not_updated: Dict[str, Dict[str, Any]] = Field(default_factory=dict, alias="notUpdated")

    @field_validator("not_updated", mode="before")
    @classmethod
    def _null_map(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def updated_ids(self) -> List[str]:
        return list(self.updated or [])


_ModelT = TypeVar("_ModelT", bound=BaseModel)


def decode(model: Type[_ModelT], payload: Any, *, what: str) -> _ModelT:
    """Validate ``payload`` as ``model`` or raise :class:`ProtocolError`."""

    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ProtocolError(f"Malformed {what} response: {exc}", body=payload) from exc
