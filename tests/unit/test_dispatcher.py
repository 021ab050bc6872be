"""Dispatcher tests: envelope construction and every failure path.

What:
  Cover :func:`build_request` and :func:`call_method` against canned transport
  responses.

Why:
  Every operation funnels through the dispatcher; a response it silently
  accepts would surface later as a confusing decoding error or, worse, as
  plausible but wrong data.
"""

import pytest

from fakes import API_URL, FakeTransport, MethodError
from jmapmail.errors import ProtocolError, TransportError
from jmapmail.jmap.dispatcher import build_request, call_method
from jmapmail.transport import TransportResponse


def _call(transport, method="Email/query", arguments=None):
    return call_method(transport, API_URL, "test-token", method, arguments or {"accountId": "x"})


def test_build_request_wraps_a_single_call():
    assert build_request("Email/get", {"ids": ["e1"]}) == {
        "using": ["urn:ietf:params:jmap:core", "urn:ietf:params:jmap:mail"],
        "methodCalls": [["Email/get", {"ids": ["e1"]}, "a"]],
    }


def test_call_method_returns_result_and_sends_auth_headers():
    transport = FakeTransport()

    result = _call(transport)

    assert result["ids"] == ["email-1", "email-2"]
    headers = transport.calls[0].headers
    assert headers["Authorization"] == "Bearer test-token"
    assert headers["Content-Type"] == "application/json"


def test_non_200_status_is_a_protocol_error():
    transport = FakeTransport(post_response=TransportResponse(status=500, body={"detail": "boom"}))

    with pytest.raises(ProtocolError) as excinfo:
        _call(transport)

    assert excinfo.value.status == 500
    assert excinfo.value.body == {"detail": "boom"}


@pytest.mark.parametrize(
    "body",
    [
        {"sessionState": "s"},
        {"methodResponses": "not-a-list"},
        b"<html>gateway</html>",
        None,
    ],
)
def test_malformed_envelope_is_a_protocol_error(body):
    transport = FakeTransport(post_response=TransportResponse(status=200, body=body))

    with pytest.raises(ProtocolError):
        _call(transport)


@pytest.mark.parametrize(
    "responses",
    [
        [],
        [["Email/query", {"ids": []}, "a"], ["Email/query", {"ids": []}, "b"]],
    ],
)
def test_anything_but_one_response_is_a_protocol_error(responses):
    transport = FakeTransport(
        post_response=TransportResponse(status=200, body={"methodResponses": responses})
    )

    with pytest.raises(ProtocolError, match="Expected exactly one method response"):
        _call(transport)


def test_method_level_error_is_raised():
    transport = FakeTransport(handlers={"Email/query": MethodError("unknownMethod", "nope")})

    with pytest.raises(ProtocolError, match="JMAP error for Email/query: unknownMethod nope"):
        _call(transport)


def test_transport_errors_propagate_unchanged():
    failure = TransportError("Network error")
    transport = FakeTransport(post_error=failure)

    with pytest.raises(TransportError) as excinfo:
        _call(transport)

    assert excinfo.value is failure
