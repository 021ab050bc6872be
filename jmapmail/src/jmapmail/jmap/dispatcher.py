"""Single-call JMAP request dispatcher.

What:
  Wrap one ``[method, arguments, call_id]`` triple into the batched request
  envelope, POST it, and unwrap the single method response.

Why:
  Every query and mutation in the client shares the same envelope, headers,
  and failure handling. Centralising it guarantees that non-200 statuses,
  transport errors, and malformed bodies surface as errors rather than being
  defaulted away.

How:
  :func:`call_method` works from a bare URL and token so the session resolver
  can list mailboxes before a :class:`~jmapmail.jmap.client.Client` exists;
  :func:`dispatch` is the client-bound convenience used by operations.

Interfaces:
  :func:`build_request`, :func:`call_method`, :func:`dispatch`.

Invariants & Safety:
  - Exactly one method call is sent and exactly one response is accepted.
  - Transport errors propagate unchanged; HTTP and shape problems become
    :class:`~jmapmail.errors.ProtocolError` carrying status and body.
  - JMAP method-level ``error`` responses are raised, never returned.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict

from ..errors import ProtocolError
from ..transport import Transport
from .wire import USING, MethodEnvelope, decode

if TYPE_CHECKING:  # pragma: no cover
    from .client import Client


DEFAULT_CALL_ID = "a"


def auth_headers(api_token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {api_token}"}


def build_request(method: str, arguments: Dict[str, Any], call_id: str = DEFAULT_CALL_ID) -> Dict[str, Any]:
    return {"using": list(USING), "methodCalls": [[method, arguments, call_id]]}


def call_method(
    transport: Transport,
    url: str,
    api_token: str,
    method: str,
    arguments: Dict[str, Any],
    *,
    call_id: str = DEFAULT_CALL_ID,
) -> Dict[str, Any]:
    """POST a single method call and return its result object.

    Args:
      transport: Backend performing the HTTP exchange.
      url: The session's ``apiUrl``.
      api_token: Bearer token.
      method: JMAP method name, e.g. ``"Email/get"``.
      arguments: Method arguments.
      call_id: Client-chosen call identifier.

    Returns:
      The ``result`` element of the single ``[name, result, call_id]`` triple.

    Raises:
      TransportError: Propagated from ``transport``.
      ProtocolError: On non-200 status, malformed envelopes, anything other
        than one response, or a method-level ``error`` response.
    """

    headers = {**auth_headers(api_token), "Content-Type": "application/json"}
    response = transport.post(url, build_request(method, arguments, call_id), headers=headers)
    if response.status != 200:
        raise ProtocolError(
            f"Request failed with status {response.status}: {response.body!r}",
            status=response.status,
            body=response.body,
        )
    envelope = decode(MethodEnvelope, response.body, what=method)
    if len(envelope.method_responses) != 1:
        raise ProtocolError(
            f"Expected exactly one method response for {method}, "
            f"got {len(envelope.method_responses)}",
            status=response.status,
            body=response.body,
        )
    name, result, _ = envelope.method_responses[0]
    if name == "error":
        err_type = result.get("type", "unknown")
        description = result.get("description", "")
        raise ProtocolError(
            f"JMAP error for {method}: {err_type} {description}".strip(),
            status=response.status,
            body=response.body,
        )
    return result


def dispatch(client: "Client", method: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
    """Send ``method`` through ``client``'s transport to its session URL."""

    return call_method(client.transport, client.session_url, client.api_token, method, arguments)
