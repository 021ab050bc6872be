"""jmapmail configuration package.

What:
  Provide the import surface for settings discovery, validation, and the
  provider enumeration.

Why:
  Callers should not reach into the loader module for private helpers; the
  explicit ``__all__`` documents which pieces are supported.

Interfaces:
  - load_settings / get_settings / reset_settings: Resolve ``jmapmail.yaml``
    plus environment overrides and expose a cached settings object.
  - JmapSettings / ClientOptionsConfig / Provider: Pydantic models and enum.
"""

from .loader import get_settings, load_settings, reset_settings
from .schema import FASTMAIL_SESSION_URL, ClientOptionsConfig, JmapSettings, Provider

__all__ = [
    "FASTMAIL_SESSION_URL",
    "ClientOptionsConfig",
    "JmapSettings",
    "Provider",
    "get_settings",
    "load_settings",
    "reset_settings",
]
