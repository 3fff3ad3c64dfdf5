"""Raw bytes in, validated requests out, and back again."""

from __future__ import annotations

import json
import math
from typing import Any

from pydantic import ValidationError

from review_mcp.protocol.errors import InvalidRequestError, ParseError
from review_mcp.protocol.models import JsonRpcRequest, JsonRpcResponse

_REQUIRED_FIELDS = ("jsonrpc", "id", "method")


def parse_request(raw: bytes | str) -> JsonRpcRequest:
    """Decode and validate a JSON-RPC request envelope.

    Raises:
        ParseError: The body is not JSON (``NaN`` and ``Infinity`` included),
            or a required envelope field is missing or malformed, a null id
            included. ``request_id`` is set when the id itself could still be
            recovered.
        InvalidRequestError: The body is JSON but not an object.
    """
    try:
        data: Any = json.loads(raw, parse_constant=_reject_constant, parse_float=_finite_float)
    except ValueError as exc:
        raise ParseError(str(exc)) from exc

    if not isinstance(data, dict):
        raise InvalidRequestError(f"Invalid Request: expected an object, got {type(data).__name__}")

    request_id = _recover_id(data)
    missing = [name for name in _REQUIRED_FIELDS if name not in data]
    if missing:
        raise ParseError(f"missing field(s): {', '.join(missing)}", request_id=request_id)

    try:
        return JsonRpcRequest.model_validate(data)
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
        raise ParseError(f"invalid field(s): {', '.join(fields)}", request_id=request_id) from exc


def encode_response(response: JsonRpcResponse) -> bytes:
    """Serialize a response envelope to compact UTF-8 JSON."""
    return json.dumps(response.to_wire(), separators=(",", ":"), default=str).encode("utf-8")


def _reject_constant(name: str) -> Any:
    msg = f"{name} is not valid JSON"
    raise ValueError(msg)


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        msg = f"number {text} is out of range"
        raise ValueError(msg)
    return value


def _recover_id(data: dict[str, Any]) -> Any:
    """Return the request id if it is a usable scalar, else ``None``."""
    value = data.get("id")
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return None
    return value
