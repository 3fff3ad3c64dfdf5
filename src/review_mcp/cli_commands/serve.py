"""``review-mcp serve`` and ``review-mcp http`` — run the server."""

from __future__ import annotations

import asyncio
from pathlib import Path  # noqa: TC003
from typing import TYPE_CHECKING

import click

from review_mcp.cli_commands._output import (
    build_or_exit,
    config_option,
    configure_logging,
    err_console,
    load_or_exit,
    log_level_option,
)

if TYPE_CHECKING:
    from review_mcp.server import McpServer


def _prepare(config_path: Path | None, telemetry: bool) -> McpServer:
    from review_mcp.utils.telemetry import configure_telemetry

    config = load_or_exit(config_path)
    if telemetry or config.telemetry.enabled:
        try:
            configure_telemetry(
                service_name=config.name,
                otlp_endpoint=config.telemetry.otlp_endpoint,
            )
        except ImportError as exc:
            err_console.print(f"[yellow]Telemetry disabled:[/yellow] {exc}")
    return build_or_exit(config)


@click.command()
@config_option
@log_level_option
@click.option("--telemetry", is_flag=True, help="Enable tracing (requires the otel extra).")
def serve(config_path: Path | None, log_level: str, telemetry: bool) -> None:
    """Serve MCP over stdin/stdout (newline-delimited JSON)."""
    from review_mcp.transport.stdio import serve_stdio

    configure_logging(log_level)
    server = _prepare(config_path, telemetry)
    asyncio.run(serve_stdio(server))


@click.command()
@config_option
@log_level_option
@click.option("--host", default="127.0.0.1", show_default=True, help="Bind address.")
@click.option("--port", default=7071, show_default=True, type=int, help="Bind port.")
@click.option("--telemetry", is_flag=True, help="Enable tracing (requires the otel extra).")
def http(config_path: Path | None, log_level: str, host: str, port: int, telemetry: bool) -> None:
    """Serve MCP over HTTP (POST /mcp)."""
    import uvicorn

    from review_mcp.transport.http import create_app

    configure_logging(log_level)
    server = _prepare(config_path, telemetry)
    uvicorn.run(create_app(server), host=host, port=port, log_level=log_level.lower())
