"""MCP models — JSON-RPC 2.0 envelopes, tool descriptors and tool payloads.

Implements the message format used by the Model Context Protocol for
``initialize``, ``ping``, tool discovery (``tools/list``) and execution
(``tools/call``).
"""

from __future__ import annotations

import json
from typing import Any, Literal, Union

from pydantic import BaseModel, Field, StrictFloat, StrictInt, StrictStr, model_validator

JSONRPC_VERSION = "2.0"

# Booleans are JSON scalars but not valid JSON-RPC ids; strict types keep
# ``"1"`` and ``1`` distinct when echoed back. Requests always carry a
# non-null id; only error responses to unidentifiable requests use null.
RequestId = Union[StrictInt, StrictFloat, StrictStr]

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request message."""

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: RequestId
    method: str
    params: dict[str, Any] | list[Any] | None = None


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response message.

    Exactly one of ``result`` and ``error`` is set.
    """

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: RequestId | None = None
    result: dict[str, Any] | None = None
    error: JsonRpcError | None = None

    @model_validator(mode="after")
    def _exactly_one_outcome(self) -> JsonRpcResponse:
        if (self.result is None) == (self.error is None):
            msg = "a response carries exactly one of 'result' or 'error'"
            raise ValueError(msg)
        return self

    @classmethod
    def success(cls, request_id: Any, result: dict[str, Any]) -> JsonRpcResponse:
        return cls(id=request_id, result=result)

    @classmethod
    def failure(
        cls, request_id: Any, code: int, message: str, data: Any = None
    ) -> JsonRpcResponse:
        return cls(id=request_id, error=JsonRpcError(code=code, message=message, data=data))

    def to_wire(self) -> dict[str, Any]:
        """Return the wire shape: ``id`` always present, absent outcome omitted."""
        wire: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            wire["error"] = self.error.model_dump(exclude_none=True)
        else:
            wire["result"] = self.result
        return wire


# ---------------------------------------------------------------------------
# MCP-specific payloads
# ---------------------------------------------------------------------------

ParameterType = Literal["string", "boolean", "number", "integer", "object", "array"]


class ToolParameter(BaseModel):
    """A single declared tool argument."""

    model_config = {"frozen": True}

    type: ParameterType = "string"
    description: str = ""
    required: bool = False
    enum: tuple[Any, ...] | None = None
    default: Any = None

    def to_schema(self) -> dict[str, Any]:
        """JSON Schema fragment for ``inputSchema.properties``."""
        schema: dict[str, Any] = {"type": self.type, "description": self.description}
        if self.enum is not None:
            schema["enum"] = list(self.enum)
        if self.default is not None:
            schema["default"] = self.default
        return schema


class ToolDescriptor(BaseModel):
    """Name, description and argument schema of a registered tool."""

    model_config = {"frozen": True}

    name: str
    description: str = ""
    parameters: dict[str, ToolParameter] = Field(default_factory=dict)

    def to_wire(self) -> dict[str, Any]:
        """Shape returned by ``tools/list``."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": {
                "type": "object",
                "properties": {
                    name: param.to_schema() for name, param in self.parameters.items()
                },
                "required": [name for name, param in self.parameters.items() if param.required],
            },
        }


class TextContent(BaseModel):
    """Plain text content block."""

    type: Literal["text"] = "text"
    text: str


class ToolOutcome(BaseModel):
    """Successful result of a tool invocation."""

    content: list[TextContent] = []

    @classmethod
    def from_json(cls, payload: Any) -> ToolOutcome:
        """Encode *payload* once as pretty JSON into a single text block."""
        return cls(content=[TextContent(text=json.dumps(payload, indent=2))])

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump()
