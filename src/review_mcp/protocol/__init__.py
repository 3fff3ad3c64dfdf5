"""Protocol layer — JSON-RPC envelopes, error taxonomy and method dispatch."""

from review_mcp.protocol.codec import encode_response, parse_request
from review_mcp.protocol.errors import (
    ExternalServiceError,
    InternalError,
    InvalidParamsError,
    InvalidRequestError,
    MethodNotFoundError,
    ParseError,
    ProtocolError,
    ToolExecutionError,
    ToolNotFoundError,
)
from review_mcp.protocol.models import (
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    TextContent,
    ToolDescriptor,
    ToolOutcome,
    ToolParameter,
)

__all__ = [
    "ExternalServiceError",
    "InternalError",
    "InvalidParamsError",
    "InvalidRequestError",
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "MethodNotFoundError",
    "ParseError",
    "ProtocolError",
    "TextContent",
    "ToolDescriptor",
    "ToolExecutionError",
    "ToolNotFoundError",
    "ToolOutcome",
    "ToolParameter",
    "encode_response",
    "parse_request",
]
