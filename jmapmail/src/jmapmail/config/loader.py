"""Strict loader for the jmapmail settings document.

What:
  Locate, parse, validate, and cache the process-wide client settings
  (``jmapmail.yaml``), layering environment overrides on top.

Why:
  The zero-argument client constructor and the CLI both read the API token,
  provider, and assembly options from the environment the process runs in.
  Centralising discovery enforces one precedence order and one validation
  path so a malformed file never produces a half-configured client.

How:
  Resolve candidate file locations from an explicit argument, the
  ``JMAPMAIL_CONFIG_PATH`` environment variable, and the defaults. Parse the
  first existing file with PyYAML, merge ``JMAPMAIL_API_TOKEN`` /
  ``JMAPMAIL_PROVIDER`` overrides, and validate through
  :class:`~jmapmail.config.schema.JmapSettings`.

Interfaces:
  :func:`load_settings`, :func:`get_settings`, :func:`reset_settings`.

Invariants:
  - Every payload passes strict Pydantic validation before it is returned.
  - The cache respects explicit reload requests and the candidate precedence.
  - A missing file is not an error: settings may come from the environment
    alone. Missing *values* are reported later, by the client constructor.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

import yaml
from pydantic import ValidationError

from ..errors import ConfigurationError
from .schema import JmapSettings


CONFIG_ENV = "JMAPMAIL_CONFIG_PATH"
TOKEN_ENV = "JMAPMAIL_API_TOKEN"
PROVIDER_ENV = "JMAPMAIL_PROVIDER"
_DEFAULT_LOCATIONS: Tuple[Path, ...] = (
    Path("jmapmail.yaml"),
    Path("~/.config/jmapmail/config.yaml"),
)
_SETTINGS_CACHE: Optional[Tuple[Optional[Path], JmapSettings]] = None


def _candidate_paths(path: Optional[Path]) -> Iterable[Path]:
    """Yield settings file locations in priority order, deduplicated."""

    seen: set[Path] = set()
    explicit = [path] if path is not None else []
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        explicit.append(Path(env_path))
    for candidate in (*explicit, *_DEFAULT_LOCATIONS):
        candidate = candidate.expanduser()
        if candidate not in seen:
            seen.add(candidate)
            yield candidate


def _parse_settings_file(path: Path) -> Dict[str, Any]:
    """Read ``path`` and return its top-level mapping.

    Raises:
      ConfigurationError: If the file cannot be read, is not valid YAML, or
        does not contain a mapping.
    """

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:  # pragma: no cover - filesystem surface
        raise ConfigurationError(f"Unable to read configuration file {path}: {exc}") from exc
    try:
        payload = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigurationError(f"{path} must contain a mapping at the top-level")
    return payload


def _apply_environment(payload: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(payload)
    token = os.environ.get(TOKEN_ENV)
    if token:
        merged["api_token"] = token
    provider = os.environ.get(PROVIDER_ENV)
    if provider:
        merged["provider"] = provider.strip().lower()
    return merged


def load_settings(path: Optional[Path | str] = None, *, reload: bool = False) -> JmapSettings:
    """Resolve, parse, and cache the client settings.

    What:
      Locate the settings file using the precedence chain, merge environment
      overrides, and return a validated :class:`JmapSettings` instance.

    Why:
      Both the CLI and :func:`jmapmail.client_from_settings` need the same
      view of the configuration; caching keeps repeated constructions cheap
      while ``reload`` lets tests and long-running callers refresh it.

    How:
      Consult the cache unless ``reload`` is requested or a different explicit
      path is asked for, then walk the candidates. An explicit ``path`` that
      does not exist is an error; absent defaults are skipped.

    Args:
      path: Optional explicit location of the YAML settings file.
      reload: When ``True`` forces a fresh load bypassing the cache.

    Returns:
      The validated settings.

    Raises:
      ConfigurationError: If an explicit path is missing or any payload fails
        parsing or validation.
    """

    global _SETTINGS_CACHE

    requested = Path(path).expanduser() if isinstance(path, (str, Path)) else None
    if not reload and _SETTINGS_CACHE is not None:
        cached_path, cached = _SETTINGS_CACHE
        if requested is None or cached_path == requested:
            return cached

    if requested is not None and not requested.exists():
        raise ConfigurationError(f"Configuration file missing: {requested}")

    source: Optional[Path] = None
    payload: Dict[str, Any] = {}
    for candidate in _candidate_paths(requested):
        if candidate.exists():
            source = candidate
            payload = _parse_settings_file(candidate)
            break

    try:
        settings = JmapSettings.model_validate(_apply_environment(payload))
    except ValidationError as exc:
        where = source if source is not None else "environment"
        raise ConfigurationError(f"Invalid configuration ({where}): {exc}") from exc
    _SETTINGS_CACHE = (source, settings)
    return settings


def get_settings() -> JmapSettings:
    """Return the cached settings, loading them on demand."""

    return load_settings()


def reset_settings() -> None:
    """Clear the settings cache so the next access reloads from disk."""

    global _SETTINGS_CACHE
    _SETTINGS_CACHE = None
