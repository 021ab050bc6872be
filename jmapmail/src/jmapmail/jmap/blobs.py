"""Blob download through the session's ``downloadUrl`` template."""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Union

from ..errors import BlobDownloadError
from .dispatcher import auth_headers

if TYPE_CHECKING:  # pragma: no cover
    from .client import Client


OCTET_STREAM = "application/octet-stream"
TEXT_TYPES = frozenset({"text/plain", "text/html"})
BLOB_NAME = "content"


def download_url_for(client: "Client", blob_id: str, expected_type: str = OCTET_STREAM) -> str:
    """Fill the ``{accountId}``, ``{blobId}``, ``{name}``, ``{type}`` placeholders."""

    return (
        client.download_url.replace("{accountId}", client.account_id)
        .replace("{blobId}", blob_id)
        .replace("{name}", BLOB_NAME)
        .replace("{type}", expected_type)
    )


def fetch_blob(
    client: "Client",
    blob_id: str,
    expected_type: str = OCTET_STREAM,
    *,
    charset: Optional[str] = None,
) -> Union[str, bytes]:
    """Download a blob and return its content.

    ``text/plain`` and ``text/html`` blobs are returned as ``str`` (decoded
    with ``charset``, UTF-8 when unknown, undecodable bytes replaced); every
    other type is returned as raw ``bytes``.

    Raises:
      BlobDownloadError: On any non-200 status.
      TransportError: Propagated from the transport.
    """

    url = download_url_for(client, blob_id, expected_type)
    response = client.transport.get(url, headers=auth_headers(client.api_token), raw=True)
    if response.status != 200:
        raise BlobDownloadError(
            f"Failed to fetch blob with status {response.status}: {response.body!r}",
            status=response.status,
            body=response.body,
        )
    content = bytes(response.body)
    if expected_type in TEXT_TYPES:
        return _decode_text(content, charset)
    return content


def _decode_text(content: bytes, charset: Optional[str]) -> str:
    try:
        return content.decode(charset or "utf-8", errors="replace")
    except LookupError:
        return content.decode("utf-8", errors="replace")
