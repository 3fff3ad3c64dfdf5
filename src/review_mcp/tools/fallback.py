"""FallbackExecutor — bounded primary attempt, degraded result on any failure.

Every tool backed by an unreliable remote service goes through
:meth:`FallbackExecutor.execute_with_fallback` instead of carrying its own
try/except. The caller always receives a well-formed :class:`ToolOutcome`;
only the ``status`` marker inside the payload tells a real result from a
fallback one.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from review_mcp.protocol.errors import ToolExecutionError
from review_mcp.protocol.models import ToolOutcome
from review_mcp.utils.telemetry import ATTR_FALLBACK, ATTR_FALLBACK_REASON, get_tracer

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from review_mcp.tools.base import Tool

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

DEFAULT_TIMEOUT = 20.0


class FallbackExecutor:
    """Runs a primary coroutine under a timeout, falling back on failure.

    Usage::

        executor = FallbackExecutor(timeout=10.0)
        outcome = await executor.execute_with_fallback(
            tool, arguments, tool.primary, tool.fallback
        )
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        if timeout <= 0:
            msg = "timeout must be positive"
            raise ValueError(msg)
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        return self._timeout

    async def execute_with_fallback(
        self,
        tool: Tool,
        arguments: dict[str, Any],
        primary: Callable[[dict[str, Any]], Awaitable[dict[str, Any]]],
        fallback: Callable[[dict[str, Any]], dict[str, Any]],
        *,
        configured: bool = True,
    ) -> ToolOutcome:
        """Return the primary result, or the fallback result if it cannot be had.

        Args:
            tool: The tool being invoked (used for logging only).
            arguments: Validated tool arguments, passed to both producers.
            primary: Coroutine function calling the remote service.
            fallback: Pure function building the degraded result.
            configured: ``False`` skips the primary attempt entirely.
        """
        with _tracer.start_as_current_span("mcp.tool.fallback") as span:
            reason = await self._attempt(tool, arguments, primary, configured)
            if isinstance(reason, dict):
                span.set_attribute(ATTR_FALLBACK, False)
                return ToolOutcome.from_json(reason)

            span.set_attribute(ATTR_FALLBACK, True)
            span.set_attribute(ATTR_FALLBACK_REASON, reason)
            logger.info("Using fallback result for %s (%s)", tool.name, reason)
            try:
                payload = fallback(arguments)
            except Exception as exc:
                logger.exception("%s: fallback producer failed", tool.name)
                raise ToolExecutionError(tool.name, f"fallback failed: {exc}") from exc
            return ToolOutcome.from_json(payload)

    async def _attempt(
        self,
        tool: Tool,
        arguments: dict[str, Any],
        primary: Callable[[dict[str, Any]], Awaitable[dict[str, Any]]],
        configured: bool,
    ) -> dict[str, Any] | str:
        """Return the primary payload, or a short reason string on failure."""
        if not configured:
            logger.warning("%s: external service not configured, skipping primary attempt", tool.name)
            return "not_configured"

        try:
            payload = await asyncio.wait_for(primary(arguments), timeout=self._timeout)
        except TimeoutError:
            logger.warning("%s: primary attempt timed out after %ss", tool.name, self._timeout)
            return "timeout"
        except Exception as exc:
            logger.warning("%s: primary attempt failed: %s", tool.name, exc, exc_info=True)
            return "error"

        if not isinstance(payload, dict):
            logger.warning("%s: primary attempt returned %s, expected an object", tool.name, type(payload).__name__)
            return "malformed"
        return payload
