"""Error taxonomy for the JSON-RPC protocol layer.

Every :class:`ProtocolError` carries the JSON-RPC error code it maps to, so
the dispatcher can turn any of them into an error envelope without a lookup
table.
"""

from __future__ import annotations

from typing import Any

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class ProtocolError(Exception):
    """Base error for all failures surfaced as a JSON-RPC error object."""

    code: int = INTERNAL_ERROR

    def __init__(self, message: str, data: Any = None) -> None:
        self.message = message
        self.data = data
        super().__init__(message)


class ParseError(ProtocolError):
    """The request body is not valid JSON or lacks required envelope fields."""

    code = PARSE_ERROR

    def __init__(self, detail: str = "", request_id: Any = None) -> None:
        self.request_id = request_id
        super().__init__("Parse error" + (f": {detail}" if detail else ""))


class InvalidRequestError(ProtocolError):
    """The body is valid JSON but not a request object."""

    code = INVALID_REQUEST


class MethodNotFoundError(ProtocolError):
    """The top-level method is not one this server implements."""

    code = METHOD_NOT_FOUND

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Method '{method}' not found")


class InvalidParamsError(ProtocolError):
    """Method params or tool arguments are missing or malformed."""

    code = INVALID_PARAMS


class ToolNotFoundError(InvalidParamsError):
    """Requested tool does not exist in the registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool '{name}' not found", data={"tool": name})


class InternalError(ProtocolError):
    """Unexpected failure while handling a request."""

    code = INTERNAL_ERROR


class ToolExecutionError(InternalError):
    """A local tool failed while computing its result."""

    def __init__(self, name: str, detail: str = "") -> None:
        self.name = name
        self.detail = detail
        super().__init__(
            f"Tool execution failed: {name}" + (f" - {detail}" if detail else ""),
            data={"tool": name},
        )


class ExternalServiceError(Exception):
    """A remote dependency (the LLM endpoint) failed or returned garbage.

    Never surfaced to callers: the fallback executor absorbs it.
    """

    def __init__(self, service: str, detail: str = "") -> None:
        self.service = service
        self.detail = detail
        super().__init__(f"{service} call failed" + (f": {detail}" if detail else ""))


class ConfigError(Exception):
    """Startup configuration could not be read or validated."""
