"""CLI wiring tests ensuring Typer commands integrate with the client helpers.

What:
  Validate the ``list``, ``next``, ``show``, ``thread``, and ``archive``
  commands when wired to monkeypatched operations, covering the record layout,
  the ``ERROR:`` failure path, and the global ``--config`` / ``--verbose``
  options.

Why:
  Shell scripts parse the CLI output line by line; regression tests prevent
  accidental format drift when the rendering or error handling is refactored.

How:
  Use :class:`typer.testing.CliRunner` to invoke the commands with
  ``jmapmail.cli._client`` and the operation functions replaced by stubs that
  return canned values or raise typed errors.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, List

import pytest
from typer.testing import CliRunner

from jmapmail.cli import app
from jmapmail.core.email import Attachment, Email, EmailAddress, EmailBodyPart, Thread
from jmapmail.errors import EmailNotFoundError, InboxEmptyError, ProtocolError
from jmapmail.jmap.wire import EmailQueryResult


runner = CliRunner()


class _StubClient:
    """Context-managed stand-in for :class:`jmapmail.jmap.client.Client`."""

    def __init__(self) -> None:
        self.closed = 0

    def __enter__(self) -> "_StubClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.closed += 1


CLIENT = _StubClient()


@pytest.fixture(autouse=True)
def stub_client(monkeypatch: pytest.MonkeyPatch) -> None:
    """Prevent every command from building a real client."""

    CLIENT.closed = 0
    monkeypatch.setattr("jmapmail.cli._client", lambda: CLIENT)


def _email(**overrides: Any) -> Email:
    values = dict(
        id="email-1",
        subject="Lunch | Friday",
        sender=(EmailAddress(email="alice@example.com", name="Alice"),),
        to=(EmailAddress(email="test@example.com"),),
        received_at="2024-05-01T09:30:00Z",
        text_body=(EmailBodyPart(blob_id="text-1", type="text/plain", contents="See you\r\nthere\x07"),),
        html_body=(EmailBodyPart(blob_id="html-1", type="text/html", contents="<p>See you</p>"),),
        attachments=(
            Attachment(blob_id="att-1", type="application/pdf", name="menu.pdf", contents=b"%PDF"),
        ),
        thread_id="thread-1",
    )
    values.update(overrides)
    return Email(**values)


def test_show_renders_email_record(monkeypatch: pytest.MonkeyPatch) -> None:
    """``jmapmail show`` prints one escaped record per email."""

    calls: List[Any] = []

    def fake_get_email(client: Any, email_id: str) -> Email:
        calls.append((client, email_id))
        return _email()

    monkeypatch.setattr("jmapmail.cli.get_email", fake_get_email)

    result = runner.invoke(app, ["show", "email-1"])

    assert result.exit_code == 0
    assert calls == [(CLIENT, "email-1")]
    assert CLIENT.closed == 1
    assert result.output.splitlines() == [
        "EMAIL_START",
        "ID:email-1",
        "THREAD:thread-1",
        "SUBJECT:Lunch \\| Friday",
        "FROM:Alice <alice@example.com>",
        "DATE:2024-05-01T09:30:00Z",
        "ATTACHMENT:menu.pdf|application/pdf",
        "CONTENT:See you\\nthere",
        "EMAIL_END",
    ]


def test_next_prints_quote_and_falls_back_to_html(monkeypatch: pytest.MonkeyPatch) -> None:
    quote = EmailBodyPart(blob_id="text-2", type="text/plain", contents="> earlier")
    email = _email(text_body=(), attachments=(), original_quote=quote)
    monkeypatch.setattr("jmapmail.cli.get_next_mail", lambda client: email)

    result = runner.invoke(app, ["next"])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert "CONTENT:<p>See you</p>" in lines
    assert "QUOTE:> earlier" in lines
    assert not any(line.startswith("ATTACHMENT:") for line in lines)


def test_next_on_empty_inbox_reports_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def empty(client: Any) -> Email:
        raise InboxEmptyError()

    monkeypatch.setattr("jmapmail.cli.get_next_mail", empty)

    result = runner.invoke(app, ["next"])

    assert result.exit_code == 1
    assert result.output.strip() == "ERROR:Inbox empty"
    assert CLIENT.closed == 1


def test_show_unknown_email_reports_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def missing(client: Any, email_id: str) -> Email:
        raise EmailNotFoundError(email_id)

    monkeypatch.setattr("jmapmail.cli.get_email", missing)

    result = runner.invoke(app, ["show", "nope"])

    assert result.exit_code == 1
    assert result.output.strip() == "ERROR:Email not found"


def test_list_prints_page(monkeypatch: pytest.MonkeyPatch) -> None:
    seen = {}

    def fake_fetch(client: Any, *, limit: int, offset: int, sort: Any) -> EmailQueryResult:
        seen.update(limit=limit, offset=offset, sort=sort)
        return EmailQueryResult.model_validate({"ids": ["email-3", "email-4"], "total": 9, "position": 2})

    monkeypatch.setattr("jmapmail.cli.fetch_emails", fake_fetch)

    result = runner.invoke(app, ["list", "--limit", "2", "--offset", "2", "--newest-first"])

    assert result.exit_code == 0
    assert result.output.splitlines() == ["TOTAL:9", "POSITION:2", "ID:email-3", "ID:email-4"]
    assert seen == {
        "limit": 2,
        "offset": 2,
        "sort": [{"isAscending": False, "property": "receivedAt"}],
    }


def test_thread_prints_member_ids(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "jmapmail.cli.fetch_thread",
        lambda client, thread_id: Thread(id=thread_id, email_ids=("email-1", "email-2")),
    )

    result = runner.invoke(app, ["thread", "thread-1"])

    assert result.exit_code == 0
    assert result.output.splitlines() == ["THREAD:thread-1", "ID:email-1", "ID:email-2"]


def test_archive_success_and_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("jmapmail.cli.archive_email", lambda client, email_id: None)

    ok = runner.invoke(app, ["archive", "email-1"])

    assert ok.exit_code == 0
    assert ok.output.strip() == "SUCCESS:Archived email with ID email-1"

    def refuse(client: Any, email_id: str) -> None:
        raise ProtocolError(f"Archive failed for {email_id}: forbidden")

    monkeypatch.setattr("jmapmail.cli.archive_email", refuse)

    failed = runner.invoke(app, ["archive", "email-1"])

    assert failed.exit_code == 1
    assert failed.output.strip() == "ERROR:Archive failed for email-1: forbidden"


def test_missing_config_file_fails_before_command(tmp_path: Path) -> None:
    result = runner.invoke(app, ["--config", str(tmp_path / "absent.yaml"), "thread", "t"])

    assert result.exit_code == 1
    assert result.output.startswith("ERROR:Configuration file missing")


def test_verbose_enables_debug_logging(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    levels: List[str] = []
    config = tmp_path / "jmapmail.yaml"
    config.write_text("api_token: t\nprovider: fastmail\n", encoding="utf-8")
    monkeypatch.setattr("jmapmail.cli.configure_logging", lambda level: levels.append(level))
    monkeypatch.setattr(
        "jmapmail.cli.fetch_thread",
        lambda client, thread_id: Thread(id=thread_id, email_ids=()),
    )

    result = runner.invoke(app, ["--verbose", "--config", str(config), "thread", "t"])

    assert result.exit_code == 0
    assert levels == ["DEBUG"]
