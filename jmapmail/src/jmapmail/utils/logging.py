"""jmapmail logging helpers with deterministic JSON emission and redaction safeguards.

What:
  Offer a small facade over Python streams so every jmapmail component can
  emit JSON log lines with consistent fields, a severity threshold, and
  automatic removal of message content and credentials.

Why:
  The client handles bearer tokens and full email bodies. A structured layout
  keeps logs greppable while guaranteeing that neither secrets nor message
  content leak when debugging a session or an assembly run. Library code must
  stay silent by default, so loggers share a threshold that callers raise or
  lower in one place.

How:
  Provide a :class:`JsonLogger` dataclass that accepts a target stream and a
  minimum level. ``extra`` dictionaries are scrubbed via a recursive
  redaction helper before being serialised with ``json.dump``. Loggers handed
  out by :func:`get_logger` are cached per component so
  :func:`configure_logging` can retune all of them.

Interfaces:
  :class:`JsonLogger`, :func:`get_logger`, :func:`configure_logging`.

Invariants & Safety:
  - The emitted payload always includes an ISO8601 timestamp, severity, and
    component name.
  - Sensitive keys (``subject``, ``body``, ``contents``, ``preview``,
    ``api_token``) are replaced with ``[redacted]`` even inside nested
    dictionaries.
  - Streams are flushed after every write.
"""
from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


REDACTED = "[redacted]"
SENSITIVE_KEYS = frozenset({"subject", "body", "contents", "preview", "api_token"})
LEVELS: Dict[str, int] = {"DEBUG": 10, "INFO": 20, "WARN": 30, "ERROR": 40}
DEFAULT_LEVEL = "WARN"


@dataclass
class JsonLogger:
    """Structured JSON logger with a severity threshold and automatic redaction.

    What:
      Emit single-line JSON log entries that include timestamps, severity, a
      component tag, and optional supplemental fields, dropping entries below
      ``level``.

    Why:
      Centralising structured logging avoids duplicating the redaction logic
      and guarantees a uniform schema for test assertions and log shipping.

    How:
      Store the destination stream, component label, and threshold, then expose
      :meth:`debug`, :meth:`info`, :meth:`warning`, and :meth:`error` helpers
      that merge a canonical payload with redacted extras.
    """

    stream: Any = field(default_factory=lambda: sys.stderr)
    component: str = "jmapmail"
    level: str = DEFAULT_LEVEL

    def enabled_for(self, level: str) -> bool:
        return LEVELS.get(level.upper(), 0) >= LEVELS.get(self.level.upper(), 0)

    def log(self, level: str, message: str, *, extra: Optional[Dict[str, Any]] = None) -> None:
        """Emit a structured JSON log entry.

        What:
          Serialise ``message`` and ``extra`` metadata to the configured stream
          using the log schema (``ts``, ``lvl``, ``msg``, ``component``).

        How:
          Return early when ``level`` is below the threshold, otherwise build
          the canonical payload, merge a redacted copy of ``extra``, write one
          JSON line, and flush.

        Args:
          level: Severity name (``"debug"``, ``"info"``, ``"warn"``, ``"error"``).
          message: Core log message.
          extra: Optional context dictionary that will be redacted recursively.
        """

        if not self.enabled_for(level):
            return
        payload = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "lvl": level.upper(),
            "msg": message,
            "component": self.component,
        }
        if extra:
            payload.update(self._redact(extra))
        json.dump(payload, self.stream, separators=(",", ":"), default=str)
        self.stream.write("\n")
        self.stream.flush()

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log("DEBUG", message, extra=kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log("INFO", message, extra=kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log("WARN", message, extra=kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log("ERROR", message, extra=kwargs)

    @staticmethod
    def _redact(data: Dict[str, Any]) -> Dict[str, Any]:
        """Return a copy of ``data`` with sensitive values masked.

        Walks the dictionary, applying the sentinel to known keys and recursing
        into nested dictionaries so structure survives for downstream parsing.
        """

        result: Dict[str, Any] = {}
        for key, value in data.items():
            if key in SENSITIVE_KEYS:
                result[key] = REDACTED
            elif isinstance(value, dict):
                result[key] = JsonLogger._redact(value)
            else:
                result[key] = value
        return result


_LOGGERS: Dict[str, JsonLogger] = {}
_SETTINGS: Dict[str, Any] = {"level": DEFAULT_LEVEL, "stream": None}


def get_logger(component: str) -> JsonLogger:
    """Return the shared :class:`JsonLogger` bound to ``component``.

    Loggers are cached so later calls to :func:`configure_logging` affect
    module-level loggers created at import time.
    """

    logger = _LOGGERS.get(component)
    if logger is None:
        logger = JsonLogger(component=component, level=_SETTINGS["level"])
        if _SETTINGS["stream"] is not None:
            logger.stream = _SETTINGS["stream"]
        _LOGGERS[component] = logger
    return logger


def configure_logging(level: str = DEFAULT_LEVEL, stream: Any = None) -> None:
    """Apply ``level`` (and optionally ``stream``) to every jmapmail logger.

    Raises:
      ValueError: If ``level`` is not one of :data:`LEVELS`.
    """

    normalized = level.upper()
    if normalized not in LEVELS:
        raise ValueError(f"Unknown log level: {level}")
    _SETTINGS["level"] = normalized
    _SETTINGS["stream"] = stream
    for logger in _LOGGERS.values():
        logger.level = normalized
        logger.stream = stream if stream is not None else sys.stderr
