"""HTTP transport — a FastAPI app exposing the server on ``POST /mcp``.

``GET`` on the same paths is a health check with no protocol semantics.
The server (and so the registry) is built once per app, not per request.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request, Response

if TYPE_CHECKING:
    from review_mcp.server import McpServer

logger = logging.getLogger(__name__)

MCP_PATHS = ("/mcp", "/api/mcp-server")


def create_app(server: McpServer) -> FastAPI:
    """Build the FastAPI application around an already-built *server*."""
    app = FastAPI(title=server.config.name, version=server.config.version)
    app.state.mcp_server = server

    async def handle_rpc(request: Request) -> Response:
        body = await request.body()
        payload = await server.handle_bytes(body)
        return Response(content=payload, media_type="application/json")

    async def health() -> dict[str, Any]:
        return {
            "status": "ok",
            "server": server.config.name,
            "version": server.config.version,
            "tools": server.registry.names(),
        }

    for path in MCP_PATHS:
        app.add_api_route(path, handle_rpc, methods=["POST"])
        app.add_api_route(path, health, methods=["GET"])

    logger.info("HTTP app created for %s on %s", server.config.name, ", ".join(MCP_PATHS))
    return app
