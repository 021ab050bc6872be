"""Pytest configuration shared by every jmapmail suite.

What:
  Establish the project import path and isolate each test from process-wide
  settings, environment variables, and logging state.

Why:
  The tests execute the in-repo ``jmapmail`` package. To make imports resolve to
  the source tree rather than an installed wheel, we prepend ``jmapmail/src`` to
  ``sys.path``. Settings discovery reads the working directory, ``$HOME``, and
  ``JMAPMAIL_*`` variables, so a developer's real configuration must never leak
  into a run.

How:
  Compute the project root relative to this file and inject the source
  directory. The autouse :func:`isolated_settings` fixture points ``HOME`` and the
  working directory at ``tmp_path``, clears the ``JMAPMAIL_*`` variables, and
  resets the settings cache and log threshold before and after each test.

Interfaces:
  :func:`isolated_settings` (pytest fixture).

Invariants & Safety:
  - The path injection runs once at import time and only when the source tree is
    present.
  - Every test starts with an empty settings cache and the default ``WARN``
    logging threshold.
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "jmapmail" / "src"
if SRC_DIR.exists():
    sys.path.insert(0, str(SRC_DIR))

import pytest

from jmapmail.config.loader import CONFIG_ENV, PROVIDER_ENV, TOKEN_ENV, reset_settings
from jmapmail.utils.logging import configure_logging


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Run every test against an empty, private configuration environment.

    Args:
      monkeypatch: Pytest helper used for environment and cwd control.
      tmp_path: Per-test directory that stands in for ``$HOME`` and the cwd.
    """

    for name in (CONFIG_ENV, TOKEN_ENV, PROVIDER_ENV):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    reset_settings()
    configure_logging("WARN")
    try:
        yield
    finally:
        reset_settings()
        configure_logging("WARN")
