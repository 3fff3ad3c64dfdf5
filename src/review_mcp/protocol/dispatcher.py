"""ProtocolDispatcher — routes a parsed request to its method handler.

Supported methods are fixed: ``initialize``, ``ping``, ``tools/list`` and
``tools/call``. Every outcome, including unexpected exceptions, becomes a
well-formed :class:`JsonRpcResponse` echoing the request id.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from review_mcp.protocol.errors import (
    InternalError,
    InvalidParamsError,
    MethodNotFoundError,
    ProtocolError,
    ToolExecutionError,
    ToolNotFoundError,
)
from review_mcp.protocol.models import JsonRpcRequest, JsonRpcResponse
from review_mcp.tools.base import ExternalServiceTool, validate_arguments
from review_mcp.utils.telemetry import (
    ATTR_ERROR_CODE,
    ATTR_METHOD,
    ATTR_REQUEST_ID,
    ATTR_TOOL_NAME,
    get_tracer,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from review_mcp.config import ServerConfig
    from review_mcp.protocol.models import ToolOutcome
    from review_mcp.tools.fallback import FallbackExecutor
    from review_mcp.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)


class ProtocolDispatcher:
    """Dispatches requests against a frozen :class:`ToolRegistry`.

    Usage::

        dispatcher = ProtocolDispatcher(config, registry, FallbackExecutor())
        response = await dispatcher.dispatch(request)
    """

    def __init__(
        self,
        config: ServerConfig,
        registry: ToolRegistry,
        executor: FallbackExecutor,
    ) -> None:
        self._config = config
        self._registry = registry
        self._executor = executor
        self._handlers: dict[str, Callable[[JsonRpcRequest], Awaitable[dict[str, Any]]]] = {
            "initialize": self._initialize,
            "ping": self._ping,
            "tools/list": self._tools_list,
            "tools/call": self._tools_call,
        }

    @property
    def methods(self) -> list[str]:
        return list(self._handlers)

    async def dispatch(self, request: JsonRpcRequest) -> JsonRpcResponse:
        """Handle *request* to completion; never raises."""
        with _tracer.start_as_current_span("mcp.dispatch") as span:
            span.set_attribute(ATTR_METHOD, request.method)
            span.set_attribute(ATTR_REQUEST_ID, str(request.id))
            logger.info("Handling %s (id=%r)", request.method, request.id)

            try:
                handler = self._handlers.get(request.method)
                if handler is None:
                    raise MethodNotFoundError(request.method)
                result = await handler(request)
            except ProtocolError as exc:
                span.set_attribute(ATTR_ERROR_CODE, exc.code)
                logger.info("%s (id=%r) failed: %s", request.method, request.id, exc.message)
                return JsonRpcResponse.failure(request.id, exc.code, exc.message, exc.data)
            except Exception:
                span.set_attribute(ATTR_ERROR_CODE, InternalError.code)
                logger.exception("Unexpected error handling %s (id=%r)", request.method, request.id)
                return JsonRpcResponse.failure(request.id, InternalError.code, "Internal error")

            return JsonRpcResponse.success(request.id, result)

    # ------------------------------------------------------------------
    # Method handlers
    # ------------------------------------------------------------------

    async def _initialize(self, request: JsonRpcRequest) -> dict[str, Any]:
        if request.params is not None and not isinstance(request.params, dict):
            raise InvalidParamsError("initialize params must be an object")
        return {
            "protocolVersion": self._config.protocol_version,
            "capabilities": {"tools": {}},
            "serverInfo": {"name": self._config.name, "version": self._config.version},
        }

    async def _ping(self, request: JsonRpcRequest) -> dict[str, Any]:
        return {
            "status": "ok",
            "server": self._config.name,
            "version": self._config.version,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    async def _tools_list(self, request: JsonRpcRequest) -> dict[str, Any]:
        return {"tools": [d.to_wire() for d in self._registry.descriptors()]}

    async def _tools_call(self, request: JsonRpcRequest) -> dict[str, Any]:
        name, arguments = _call_params(request.params)

        tool = self._registry.get(name)
        if tool is None:
            raise ToolNotFoundError(name)

        validated = validate_arguments(tool.descriptor, arguments)

        with _tracer.start_as_current_span("mcp.tool.call") as span:
            span.set_attribute(ATTR_TOOL_NAME, name)
            outcome: ToolOutcome
            if isinstance(tool, ExternalServiceTool):
                outcome = await self._executor.execute_with_fallback(
                    tool,
                    validated,
                    tool.primary,
                    tool.fallback,
                    configured=tool.is_configured,
                )
            else:
                outcome = await self._run_local(name, tool.execute, validated)

        return outcome.to_wire()

    @staticmethod
    async def _run_local(
        name: str,
        execute: Callable[[dict[str, Any]], Awaitable[ToolOutcome]],
        arguments: dict[str, Any],
    ) -> ToolOutcome:
        try:
            return await execute(arguments)
        except ProtocolError:
            raise
        except Exception as exc:
            logger.exception("Tool %s raised", name)
            raise ToolExecutionError(name, str(exc)) from exc


def _call_params(params: Any) -> tuple[str, dict[str, Any]]:
    """Extract ``name`` and ``arguments`` from ``tools/call`` params."""
    if not isinstance(params, dict):
        raise InvalidParamsError("tools/call params must be an object with a 'name'")

    name = params.get("name")
    if not isinstance(name, str) or not name:
        raise InvalidParamsError("tools/call params require a string 'name'")

    arguments = params.get("arguments")
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        raise InvalidParamsError(f"Arguments for tool '{name}' must be an object")

    return name, arguments
