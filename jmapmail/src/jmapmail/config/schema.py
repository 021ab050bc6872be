"""Pydantic models describing jmapmail configuration documents."""
from __future__ import annotations

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


FASTMAIL_SESSION_URL = "https://api.fastmail.com/jmap/session"


class Provider(str, Enum):
    """JMAP providers known to the client."""

    FASTMAIL = "fastmail"
    GENERIC = "generic"

    @property
    def default_session_url(self) -> Optional[str]:
        if self is Provider.FASTMAIL:
            return FASTMAIL_SESSION_URL
        return None


class ClientOptionsConfig(BaseModel):
    """Behavioural switches applied to email assembly."""

    model_config = ConfigDict(extra="forbid")

    inline_images: bool = True


class JmapSettings(BaseModel):
    """Root configuration loaded from ``jmapmail.yaml``."""

    model_config = ConfigDict(extra="forbid")

    api_token: Optional[str] = None
    provider: Optional[Provider] = None
    api_url: Optional[str] = None
    transport: Literal["httpx", "urllib"] = "httpx"
    timeout: float = Field(default=30.0, gt=0)
    opts: ClientOptionsConfig = Field(default_factory=ClientOptionsConfig)

    @field_validator("api_token", "api_url")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value
