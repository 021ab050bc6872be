"""Pytest fixtures for unit tests requiring JMAP fakes.

What:
  Prepare the unit test environment by ensuring ``tests/unit`` is importable and
  by exposing ``transport`` and ``client`` fixtures backed by
  :class:`FakeTransport`.

Why:
  Nearly every unit test needs an authenticated client. Providing one built on
  the same in-memory server keeps the tests free of network access and makes
  the recorded request log available for assertions.

How:
  Append the unit directory to ``sys.path`` for local imports, instantiate a
  fresh :class:`FakeTransport`, and authenticate a Fastmail client against it.

Interfaces:
  :func:`transport`, :func:`client` (pytest fixtures).

Invariants & Safety:
  - Each test receives a fresh transport so handler overrides never leak.
  - The request log is cleared after authentication; tests see only the calls
    their own operation made.
"""

import sys
from pathlib import Path

import pytest

from jmapmail import Provider, new_client

UNIT_DIR = Path(__file__).resolve().parent
if str(UNIT_DIR) not in sys.path:
    sys.path.insert(0, str(UNIT_DIR))

from fakes import FakeTransport


@pytest.fixture
def transport() -> FakeTransport:
    """Return a fake server preloaded with the default session and mailboxes."""

    return FakeTransport()


@pytest.fixture
def client(transport: FakeTransport):
    """Yield a Fastmail client authenticated against ``transport``.

    The session GET and ``Mailbox/get`` exchanges are dropped from
    ``transport.calls`` before the client is handed to the test.
    """

    authenticated = new_client("test-token", Provider.FASTMAIL, transport=transport)
    transport.calls.clear()
    yield authenticated
