"""Blob download tests: URL templating, text decoding, and failures."""

import json

import httpx
import pytest

from fakes import ACCOUNT_ID, DEFAULT_MAILBOXES, DEFAULT_SESSION
from jmapmail import BlobDownloadError, Provider, TransportError, fetch_blob, new_client
from jmapmail.config import FASTMAIL_SESSION_URL
from jmapmail.jmap.blobs import download_url_for
from jmapmail.transport import HttpxTransport, TransportResponse


def test_download_url_fills_every_placeholder(client):
    url = download_url_for(client, "blob-7", "text/html")

    assert url == "https://api.fastmail.com/jmap/download/mock-account-id/blob-7/content?type=text/html"


def test_download_url_defaults_to_octet_stream(client):
    assert download_url_for(client, "blob-7").endswith("?type=application/octet-stream")


def test_text_blob_is_decoded_with_charset(client, transport):
    transport.blobs["blob-1"] = "Grüße".encode("iso-8859-1")

    content = fetch_blob(client, "blob-1", "text/plain", charset="iso-8859-1")

    assert content == "Grüße"
    assert transport.calls[0].headers["Authorization"] == "Bearer test-token"


def test_text_blob_defaults_to_utf8_and_replaces_invalid_bytes(client, transport):
    transport.blobs["blob-1"] = b"caf\xc3\xa9 \xff"

    assert fetch_blob(client, "blob-1", "text/html") == "café \ufffd"


def test_unknown_charset_falls_back_to_utf8(client, transport):
    transport.blobs["blob-1"] = "naïve".encode("utf-8")

    assert fetch_blob(client, "blob-1", "text/plain", charset="x-unknown-charset") == "naïve"


def test_binary_blob_is_returned_as_bytes(client, transport):
    transport.blobs["img-1"] = b"\x89PNG\r\n"

    assert fetch_blob(client, "img-1") == b"\x89PNG\r\n"


def test_json_blob_bytes_survive_the_http_backend():
    """
    What:
        A blob served as ``application/json`` comes back byte for byte, and its
        text form is the exact UTF-8 decoding of those bytes.

    Why:
        Attachments are opaque payloads. Decoding and re-serialising JSON would
        change whitespace, key order and escapes of the file the user receives.

    How:
        Authenticate against :class:`httpx.MockTransport` through the real
        :class:`HttpxTransport` and compare both fetch results with the served
        payload.
    """

    served = b'{"name":"caf\xc3\xa9",  "n": 1}\n'

    def handler(request: httpx.Request) -> httpx.Response:
        if str(request.url) == FASTMAIL_SESSION_URL:
            return httpx.Response(200, json=DEFAULT_SESSION)
        if request.method == "POST":
            call_id = json.loads(request.content)["methodCalls"][0][2]
            mailboxes = {"accountId": ACCOUNT_ID, "list": DEFAULT_MAILBOXES, "notFound": []}
            return httpx.Response(200, json={"methodResponses": [["Mailbox/get", mailboxes, call_id]]})
        return httpx.Response(200, content=served, headers={"content-type": "application/json"})

    transport = HttpxTransport(httpx.Client(transport=httpx.MockTransport(handler)))
    client = new_client("test-token", Provider.FASTMAIL, transport=transport)

    assert fetch_blob(client, "att-1", "application/json") == served
    assert fetch_blob(client, "att-1", "text/plain") == served.decode("utf-8")


def test_blob_downloads_request_raw_bytes(client, transport):
    transport.blobs["blob-1"] = b"x"

    fetch_blob(client, "blob-1", "text/plain")

    assert transport.calls[-1].raw is True


def test_non_200_is_a_blob_download_error(client, transport):
    transport.blobs["blob-1"] = TransportResponse(status=403, body=b"forbidden")

    with pytest.raises(BlobDownloadError) as excinfo:
        fetch_blob(client, "blob-1", "text/plain")

    assert excinfo.value.status == 403
    assert "Failed to fetch blob with status 403" in str(excinfo.value)


def test_transport_error_propagates(client, transport):
    transport.blobs["blob-1"] = TransportError("reset by peer")

    with pytest.raises(TransportError, match="reset by peer"):
        fetch_blob(client, "blob-1")
