"""jmapmail command-line interface.

What:
  Provide a Typer-based entry point exposing ``list``, ``next``, ``show``,
  ``thread``, and ``archive`` commands over a settings-driven client.

Why:
  Operators and shell scripts need to peek at the inbox, read one message,
  and archive it without writing Python. Routing every command through
  :func:`jmapmail.client_from_settings` keeps the CLI on the same
  configuration and error model as library callers.

How:
  The app callback loads settings (``--config``) and tunes logging
  (``--verbose``); each command builds a client lazily via :func:`_client`,
  runs one operation inside the client context so its transport is closed,
  and prints line-oriented records. Any
  :class:`~jmapmail.errors.JmapError` is printed as ``ERROR:<message>`` and
  exits with status ``1``.

Interfaces:
  ``app`` (Typer application) and its commands.

Invariants & Safety:
  - Exit codes follow shell expectations (``0`` success, ``1`` failure).
  - Content is passed through :func:`sanitize_printable` and
    :func:`escape_field` so one record always fits on one line.
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterator, NoReturn, Optional

import typer

from .config import load_settings
from .core.assembly import get_email, get_next_mail
from .core.email import Email
from .errors import JmapError
from .jmap import Client, archive_email, client_from_settings, fetch_emails, fetch_thread
from .utils.logging import configure_logging
from .utils.text import escape_field, sanitize_printable


app = typer.Typer(help="Read and archive JMAP email from the command line")


def _client() -> Client:
    return client_from_settings()


def _fail(exc: Exception) -> NoReturn:
    typer.echo(f"ERROR:{exc}")
    raise typer.Exit(code=1)


def _content(email: Email) -> str:
    parts = email.text_body or email.html_body
    chunks = [sanitize_printable(part.contents) for part in parts if part.contents is not None]
    return "\n\n".join(chunk.strip() for chunk in chunks if chunk.strip())


def _render(email: Email) -> Iterator[str]:
    yield "EMAIL_START"
    yield f"ID:{email.id}"
    yield f"THREAD:{email.thread_id or ''}"
    yield f"SUBJECT:{escape_field(email.subject or '')}"
    yield f"FROM:{escape_field('; '.join(str(address) for address in email.sender))}"
    yield f"DATE:{escape_field(email.received_at or '')}"
    for attachment in email.attachments:
        yield f"ATTACHMENT:{escape_field(attachment.name or attachment.blob_id)}|{attachment.type}"
    yield f"CONTENT:{escape_field(_content(email))}"
    if email.original_quote is not None and email.original_quote.contents is not None:
        yield f"QUOTE:{escape_field(sanitize_printable(email.original_quote.contents).strip())}"
    yield "EMAIL_END"


def _echo_email(email: Email) -> None:
    for line in _render(email):
        typer.echo(line)


@app.callback()
def main(
    config: Optional[Path] = typer.Option(None, "--config", help="Path to jmapmail.yaml"),
    verbose: bool = typer.Option(False, "--verbose", help="Emit DEBUG JSON logs on stderr"),
) -> None:
    """Load settings and configure logging before any command runs."""

    configure_logging("DEBUG" if verbose else "WARN")
    try:
        load_settings(config, reload=True)
    except JmapError as exc:
        _fail(exc)


@app.command("list")
def list_inbox(
    limit: int = typer.Option(10, help="Maximum number of ids to list"),
    offset: int = typer.Option(0, help="Zero-based position of the first id"),
    newest_first: bool = typer.Option(False, "--newest-first", help="Sort by receivedAt descending"),
) -> None:
    """Print one page of inbox email ids."""

    sort = [{"isAscending": False, "property": "receivedAt"}] if newest_first else None
    try:
        with _client() as client:
            page = fetch_emails(client, limit=max(1, limit), offset=offset, sort=sort)
    except JmapError as exc:
        _fail(exc)
    typer.echo(f"TOTAL:{page.total if page.total is not None else ''}")
    typer.echo(f"POSITION:{page.position}")
    for email_id in page.ids:
        typer.echo(f"ID:{email_id}")


@app.command("next")
def next_email() -> None:
    """Print the oldest inbox email with its contents."""

    try:
        with _client() as client:
            email = get_next_mail(client)
    except JmapError as exc:
        _fail(exc)
    _echo_email(email)


@app.command("show")
def show(email_id: str = typer.Argument(..., help="JMAP email id")) -> None:
    """Print a single email by id."""

    try:
        with _client() as client:
            email = get_email(client, email_id)
    except JmapError as exc:
        _fail(exc)
    _echo_email(email)


@app.command("thread")
def thread(thread_id: str = typer.Argument(..., help="JMAP thread id")) -> None:
    """Print the email ids belonging to a thread."""

    try:
        with _client() as client:
            record = fetch_thread(client, thread_id)
    except JmapError as exc:
        _fail(exc)
    typer.echo(f"THREAD:{record.id}")
    for email_id in record.email_ids:
        typer.echo(f"ID:{email_id}")


@app.command("archive")
def archive(email_id: str = typer.Argument(..., help="JMAP email id")) -> None:
    """Move an email to the archive mailbox."""

    try:
        with _client() as client:
            archive_email(client, email_id)
    except JmapError as exc:
        _fail(exc)
    typer.echo(f"SUCCESS:Archived email with ID {email_id}")


if __name__ == "__main__":  # pragma: no cover
    app()
