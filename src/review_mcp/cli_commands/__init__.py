"""CLI subcommand registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all subcommands on the CLI group."""
    from review_mcp.cli_commands.serve import http, serve
    from review_mcp.cli_commands.tools import tools

    cli.add_command(serve)
    cli.add_command(http)
    cli.add_command(tools)
