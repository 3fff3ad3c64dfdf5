"""Tests for JSON-RPC envelopes and MCP payload models."""

import json

import pytest
from pydantic import ValidationError

from review_mcp.protocol.models import (
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    ToolDescriptor,
    ToolOutcome,
    ToolParameter,
)


class TestJsonRpcRequest:
    def test_params_default_to_none(self) -> None:
        req = JsonRpcRequest(id=1, method="ping")
        assert req.jsonrpc == "2.0"
        assert req.params is None

    def test_id_keeps_its_type(self) -> None:
        assert JsonRpcRequest(id="1", method="ping").id == "1"
        assert JsonRpcRequest(id=1, method="ping").id == 1
        assert JsonRpcRequest(id=1.5, method="ping").id == 1.5

    def test_null_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            JsonRpcRequest(id=None, method="ping")

    def test_id_required(self) -> None:
        with pytest.raises(ValidationError):
            JsonRpcRequest.model_validate({"jsonrpc": "2.0", "method": "ping"})

    def test_boolean_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            JsonRpcRequest(id=True, method="ping")

    def test_wrong_version_rejected(self) -> None:
        with pytest.raises(ValidationError):
            JsonRpcRequest.model_validate({"jsonrpc": "1.0", "id": 1, "method": "ping"})


class TestJsonRpcResponse:
    def test_success_wire_shape(self) -> None:
        wire = JsonRpcResponse.success(7, {"ok": True}).to_wire()
        assert wire == {"jsonrpc": "2.0", "id": 7, "result": {"ok": True}}

    def test_failure_wire_shape_omits_empty_data(self) -> None:
        wire = JsonRpcResponse.failure("abc", -32601, "Method 'x' not found").to_wire()
        assert wire == {
            "jsonrpc": "2.0",
            "id": "abc",
            "error": {"code": -32601, "message": "Method 'x' not found"},
        }

    def test_failure_keeps_data(self) -> None:
        wire = JsonRpcResponse.failure(1, -32602, "bad", {"tool": "t"}).to_wire()
        assert wire["error"]["data"] == {"tool": "t"}

    def test_null_id_is_emitted(self) -> None:
        wire = JsonRpcResponse.failure(None, -32700, "Parse error").to_wire()
        assert "id" in wire
        assert wire["id"] is None

    def test_requires_exactly_one_outcome(self) -> None:
        with pytest.raises(ValidationError):
            JsonRpcResponse(id=1)
        with pytest.raises(ValidationError):
            JsonRpcResponse(
                id=1, result={}, error=JsonRpcError(code=-32603, message="x")
            )


class TestToolDescriptor:
    def test_wire_shape(self) -> None:
        descriptor = ToolDescriptor(
            name="search",
            description="Search things",
            parameters={
                "query": ToolParameter(type="string", description="Query", required=True),
                "mode": ToolParameter(
                    type="string", description="Mode", enum=["a", "b"], default="a"
                ),
            },
        )
        wire = descriptor.to_wire()
        assert wire["name"] == "search"
        schema = wire["inputSchema"]
        assert schema["type"] == "object"
        assert schema["required"] == ["query"]
        assert schema["properties"]["mode"] == {
            "type": "string",
            "description": "Mode",
            "enum": ["a", "b"],
            "default": "a",
        }

    def test_frozen(self) -> None:
        descriptor = ToolDescriptor(name="x")
        with pytest.raises(ValidationError):
            descriptor.name = "y"  # type: ignore[misc]

    def test_parameter_frozen(self) -> None:
        param = ToolParameter(type="string", enum=["a", "b"])
        assert param.enum == ("a", "b")
        with pytest.raises(ValidationError):
            param.required = True  # type: ignore[misc]


class TestToolOutcome:
    def test_from_json_encodes_once(self) -> None:
        outcome = ToolOutcome.from_json({"status": "ok", "items": [1, 2]})
        assert len(outcome.content) == 1
        block = outcome.content[0]
        assert block.type == "text"
        assert json.loads(block.text) == {"status": "ok", "items": [1, 2]}

    def test_wire_shape(self) -> None:
        wire = ToolOutcome.from_json({"a": 1}).to_wire()
        assert wire["content"][0]["type"] == "text"
