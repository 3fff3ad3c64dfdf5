"""``review-mcp tools`` — list and invoke tools through the protocol path."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path  # noqa: TC003
from typing import TYPE_CHECKING, Any

import click

from review_mcp.cli_commands._output import (
    build_or_exit,
    config_option,
    console,
    err_console,
    load_or_exit,
    print_tools_table,
)

if TYPE_CHECKING:
    from review_mcp.server import McpServer


def _request(server: McpServer, method: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
    body = json.dumps({"jsonrpc": "2.0", "id": 1, "method": method, "params": params or {}})
    return json.loads(asyncio.run(server.handle_bytes(body)))


@click.group()
def tools() -> None:
    """List and invoke tools."""


@tools.command("list")
@config_option
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON.")
def list_tools(config_path: Path | None, as_json: bool) -> None:
    """List the tools enabled by the configuration."""
    response = _request(build_or_exit(load_or_exit(config_path)), "tools/list")
    descriptors: list[dict[str, Any]] = response["result"]["tools"]

    if as_json:
        console.print_json(json.dumps(descriptors))
        return
    if not descriptors:
        console.print("[yellow]No tools enabled.[/yellow]")
        return
    print_tools_table(descriptors)


@tools.command("call")
@click.argument("name")
@click.option("--args", "-a", "raw_args", default="{}", help="Tool arguments as a JSON object.")
@config_option
def call_tool(name: str, raw_args: str, config_path: Path | None) -> None:
    """Invoke tool NAME and print the response envelope."""
    try:
        arguments = json.loads(raw_args)
    except json.JSONDecodeError as exc:
        err_console.print(f"[red]Invalid --args JSON:[/red] {exc}")
        sys.exit(2)

    response = _request(build_or_exit(load_or_exit(config_path)), "tools/call", {"name": name, "arguments": arguments})
    console.print_json(json.dumps(response))
    if "error" in response:
        sys.exit(1)
