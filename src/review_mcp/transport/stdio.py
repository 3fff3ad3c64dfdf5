"""Newline-delimited JSON over stdin/stdout.

One request per line, one response line per request. Blank lines are
skipped; EOF ends the loop.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import TYPE_CHECKING, BinaryIO

if TYPE_CHECKING:
    from review_mcp.server import McpServer

logger = logging.getLogger(__name__)


async def serve_stdio(
    server: McpServer,
    instream: BinaryIO | None = None,
    outstream: BinaryIO | None = None,
) -> int:
    """Serve requests from *instream* until EOF; return the number handled."""
    reader = instream if instream is not None else sys.stdin.buffer
    writer = outstream if outstream is not None else sys.stdout.buffer
    handled = 0

    logger.info("Serving %s over stdio", server.config.name)
    while True:
        line = await asyncio.to_thread(reader.readline)
        if not line:
            break
        if not line.strip():
            continue

        response = await server.handle_bytes(line)
        writer.write(response + b"\n")
        writer.flush()
        handled += 1

    logger.info("stdin closed after %d request(s)", handled)
    return handled
