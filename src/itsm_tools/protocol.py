"""Wire format for the line protocol.

One JSON object per line in each direction. Three inbound shapes are accepted,
discriminated by ``type``:

====================  ======================  ============================  ==================
type                  name                    parameters                    correlation id
====================  ======================  ============================  ==================
``tool_call``         ``data.name``           ``data.parameters``           ``id``
``function``          ``name``                ``arguments`` (str or obj)    ``id`` or default
``function_call``     ``function_call.name``  ``function_call.arguments``   ``id`` or default
====================  ======================  ============================  ==================

Anything else is dropped without a reply. Outbound lines are either
``{"type": "tool_response", "id": ..., "data": ...}`` or
``{"type": "error", "error": ...}``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Literal

TOOL_CALL = "tool_call"
FUNCTION = "function"
FUNCTION_CALL = "function_call"

# Correlation id echoed for legacy messages that did not send one.
DEFAULT_CORRELATION_ID = "function-call"

MessageShape = Literal["tool_call", "function", "function_call"]


class ProtocolParseError(ValueError):
    """The line could not be turned into an invocation."""


@dataclass(frozen=True)
class Invocation:
    """Shape-independent tool request."""

    name: str
    parameters: dict[str, Any] = field(default_factory=dict)
    correlation_id: Any = None
    shape: MessageShape = TOOL_CALL
    # False only for a tool_call that sent no "id" key; an explicit null is echoed.
    echo_id: bool = True


# ---------------------------------------------------------------------------
# Inbound
# ---------------------------------------------------------------------------


def _reject_constant(name: str) -> Any:
    msg = f"Invalid JSON constant: {name}"
    raise ProtocolParseError(msg)


def _loads(text: str) -> Any:
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ProtocolParseError:
        raise
    except (ValueError, RecursionError) as e:
        raise ProtocolParseError(str(e)) from e


def _section(message: dict[str, Any], key: str) -> dict[str, Any]:
    section = message.get(key)
    if not isinstance(section, dict):
        msg = f"{message['type']} message requires a '{key}' object"
        raise ProtocolParseError(msg)
    return section


def _parameters(raw: Any, *, decode_strings: bool) -> dict[str, Any]:
    if raw is None:
        return {}
    if decode_strings and isinstance(raw, str):
        raw = _loads(raw)
    if not isinstance(raw, dict):
        msg = f"Tool parameters must be a JSON object, got {type(raw).__name__}"
        raise ProtocolParseError(msg)
    return raw


def _name(raw: Any) -> str:
    if not isinstance(raw, str) or not raw:
        msg = "Tool name must be a non-empty string"
        raise ProtocolParseError(msg)
    return raw


def normalize(line: str) -> Invocation | None:
    """Parse one inbound line.

    Returns ``None`` for an unrecognized shape, which gets no reply at all.
    Raises :class:`ProtocolParseError` when the line is not valid JSON or a
    recognized shape is missing its payload.
    """
    message = _loads(line)
    if not isinstance(message, dict):
        return None

    kind = message.get("type")
    if kind == TOOL_CALL:
        data = _section(message, "data")
        return Invocation(
            name=_name(data.get("name")),
            parameters=_parameters(data.get("parameters"), decode_strings=False),
            correlation_id=message.get("id"),
            shape=TOOL_CALL,
            echo_id="id" in message,
        )
    if kind == FUNCTION:
        return Invocation(
            name=_name(message.get("name")),
            parameters=_parameters(message.get("arguments"), decode_strings=True),
            correlation_id=message.get("id") or DEFAULT_CORRELATION_ID,
            shape=FUNCTION,
        )
    if kind == FUNCTION_CALL:
        call = _section(message, "function_call")
        return Invocation(
            name=_name(call.get("name")),
            parameters=_parameters(call.get("arguments"), decode_strings=True),
            correlation_id=message.get("id") or DEFAULT_CORRELATION_ID,
            shape=FUNCTION_CALL,
        )
    return None


# ---------------------------------------------------------------------------
# Outbound
# ---------------------------------------------------------------------------


def _dumps(payload: dict[str, Any]) -> str:
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, allow_nan=False, default=str)


def encode_response(invocation: Invocation, result: Any) -> str:
    """Serialize a handler result. A tool_call sent without ``id`` gets no ``id`` key back."""
    payload: dict[str, Any] = {"type": "tool_response"}
    if invocation.echo_id:
        payload["id"] = invocation.correlation_id
    payload["data"] = result
    return _dumps(payload)


def encode_error(message: str, *, correlation_id: Any = None) -> str:
    payload: dict[str, Any] = {"type": "error"}
    if correlation_id is not None:
        payload["id"] = correlation_id
    payload["error"] = message
    return _dumps(payload)
