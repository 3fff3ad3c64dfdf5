"""Shared CLI helpers: console, logging setup, config loading."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
from rich.console import Console
from rich.table import Table

from review_mcp.config import ServerConfig, load_config
from review_mcp.protocol.errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import Callable

    from review_mcp.server import McpServer

console = Console()
err_console = Console(stderr=True)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def config_option(func: Callable[..., Any]) -> Callable[..., Any]:
    """``--config`` option shared by every command."""
    return click.option(
        "--config",
        "-c",
        "config_path",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        default=None,
        help="YAML/JSON config file (defaults to environment variables).",
    )(func)


def log_level_option(func: Callable[..., Any]) -> Callable[..., Any]:
    return click.option(
        "--log-level",
        type=click.Choice(LOG_LEVELS, case_sensitive=False),
        default="WARNING",
        show_default=True,
        help="Logging level (logs go to stderr).",
    )(func)


def configure_logging(level: str) -> None:
    """Send all logs to stderr; stdout is reserved for protocol output."""
    logging.basicConfig(
        level=level.upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def load_or_exit(config_path: Path | None) -> ServerConfig:
    try:
        return load_config(config_path)
    except ConfigError as exc:
        err_console.print(f"[red]Configuration error:[/red] {exc}")
        sys.exit(1)


def build_or_exit(config: ServerConfig) -> McpServer:
    from review_mcp.server import build_server

    try:
        return build_server(config)
    except ConfigError as exc:
        err_console.print(f"[red]Configuration error:[/red] {exc}")
        sys.exit(1)


def print_tools_table(tools: list[dict[str, Any]]) -> None:
    """Pretty-print ``tools/list`` descriptors as a table."""
    table = Table(title="Enabled Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Required")
    table.add_column("Description")

    for tool in tools:
        schema = tool.get("inputSchema", {})
        table.add_row(
            tool.get("name", "?"),
            ", ".join(schema.get("required", [])) or "-",
            _truncate(tool.get("description", "")),
        )

    console.print(table)


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
