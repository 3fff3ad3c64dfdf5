"""review-mcp CLI entrypoint."""

from __future__ import annotations

import click

from review_mcp import __version__


@click.group()
@click.version_option(version=__version__, prog_name="review-mcp")
def main() -> None:
    """review-mcp — code review tools over the Model Context Protocol."""


# Register subcommands
from review_mcp.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
