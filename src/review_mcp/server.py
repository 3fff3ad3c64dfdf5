"""McpServer — the byte-in/byte-out boundary wrapping the dispatcher.

Built once per process by :func:`build_server`; transports hold a reference
and call :meth:`McpServer.handle_bytes` for every request body.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from review_mcp.llm.client import ChatCompletionClient
from review_mcp.protocol.codec import encode_response, parse_request
from review_mcp.protocol.dispatcher import ProtocolDispatcher
from review_mcp.protocol.errors import InternalError, ParseError, ProtocolError
from review_mcp.protocol.models import JsonRpcResponse
from review_mcp.tools.fallback import FallbackExecutor
from review_mcp.tools.registry import build_registry

if TYPE_CHECKING:
    from review_mcp.config import ServerConfig
    from review_mcp.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


class McpServer:
    """Parses, dispatches and encodes one request at a time.

    Holds no per-request state, so one instance serves concurrent requests.
    """

    def __init__(self, config: ServerConfig, registry: ToolRegistry, dispatcher: ProtocolDispatcher) -> None:
        self.config = config
        self.registry = registry
        self.dispatcher = dispatcher

    async def handle(self, raw: bytes | str) -> JsonRpcResponse:
        """Turn a raw request body into a response envelope; never raises."""
        try:
            request = parse_request(raw)
        except ParseError as exc:
            logger.warning("Rejected request body: %s", exc.message)
            return JsonRpcResponse.failure(exc.request_id, exc.code, exc.message)
        except ProtocolError as exc:
            logger.warning("Rejected request body: %s", exc.message)
            return JsonRpcResponse.failure(None, exc.code, exc.message)
        except Exception:
            logger.exception("Unexpected error parsing request body")
            return JsonRpcResponse.failure(None, InternalError.code, "Internal error")

        return await self.dispatcher.dispatch(request)

    async def handle_bytes(self, raw: bytes | str) -> bytes:
        return encode_response(await self.handle(raw))


def build_server(config: ServerConfig) -> McpServer:
    """Assemble registry, fallback executor and dispatcher from *config*.

    Raises:
        ConfigError: *config* enables an unknown tool.
    """
    llm_client: ChatCompletionClient | None = None
    if config.tools.get("ai_code_review", True):
        llm_client = ChatCompletionClient(config.ai)
        if not config.ai.is_configured:
            logger.warning("AI service not configured; ai_code_review will return fallback results")

    registry = build_registry(config, llm_client)
    dispatcher = ProtocolDispatcher(config, registry, FallbackExecutor(timeout=config.ai.timeout))
    logger.info(
        "%s %s ready with %d tool(s): %s",
        config.name,
        config.version,
        len(registry),
        ", ".join(registry.names()),
    )
    return McpServer(config, registry, dispatcher)
