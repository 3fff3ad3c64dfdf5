"""Tool contract and argument validation.

A tool is a named capability with a declared argument schema. The dispatcher
validates arguments against that schema before ``execute`` is ever called,
so tool code can rely on required arguments being present and well-typed.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from functools import cached_property
from typing import Any

from review_mcp.protocol.errors import InvalidParamsError
from review_mcp.protocol.models import ToolDescriptor, ToolOutcome, ToolParameter

logger = logging.getLogger(__name__)


class Tool(ABC):
    """Base class for every registered tool.

    Subclasses set ``name``, ``description`` and ``parameters`` as class
    attributes and implement :meth:`execute`.
    """

    name: str = ""
    description: str = ""
    parameters: dict[str, ToolParameter] = {}

    @cached_property
    def descriptor(self) -> ToolDescriptor:
        """Built on first access, which the registry makes at registration."""
        return ToolDescriptor(
            name=self.name,
            description=self.description,
            parameters=dict(self.parameters),
        )

    @abstractmethod
    async def execute(self, arguments: dict[str, Any]) -> ToolOutcome:
        """Run the tool on already-validated *arguments*."""


class ExternalServiceTool(Tool):
    """A tool whose real work is a call to a remote service.

    Such tools are never executed directly: the dispatcher hands
    :meth:`primary` and :meth:`fallback` to a
    :class:`~review_mcp.tools.fallback.FallbackExecutor`, which guarantees a
    well-formed outcome even when the service is down.
    """

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Whether credentials/endpoint for the remote service are present."""

    @abstractmethod
    async def primary(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Produce the full-quality result by calling the remote service."""

    @abstractmethod
    def fallback(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Produce a deterministic, locally computed, clearly labelled result."""

    async def execute(self, arguments: dict[str, Any]) -> ToolOutcome:
        return ToolOutcome.from_json(await self.primary(arguments))


_JSON_TYPES: dict[str, tuple[type, ...]] = {
    "string": (str,),
    "boolean": (bool,),
    "number": (int, float),
    "integer": (int,),
    "object": (dict,),
    "array": (list,),
}


def _matches_type(value: Any, expected: str) -> bool:
    if expected in ("number", "integer") and isinstance(value, bool):
        return False
    return isinstance(value, _JSON_TYPES[expected])


def validate_arguments(descriptor: ToolDescriptor, arguments: dict[str, Any]) -> dict[str, Any]:
    """Check *arguments* against *descriptor* and return the normalized set.

    Missing optional parameters get their declared default; undeclared
    arguments are dropped.

    Raises:
        InvalidParamsError: A required argument is missing, or any argument
            has the wrong JSON type or is outside its enum.
    """
    validated: dict[str, Any] = {}

    for name, param in descriptor.parameters.items():
        if name not in arguments or arguments[name] is None:
            if param.required:
                raise InvalidParamsError(
                    f"Missing required argument '{name}' for tool '{descriptor.name}'",
                    data={"tool": descriptor.name, "argument": name},
                )
            if param.default is not None:
                validated[name] = param.default
            continue

        value = arguments[name]
        if not _matches_type(value, param.type):
            raise InvalidParamsError(
                f"Argument '{name}' for tool '{descriptor.name}' must be of type "
                f"{param.type}, got {type(value).__name__}",
                data={"tool": descriptor.name, "argument": name},
            )
        if param.enum is not None and value not in param.enum:
            allowed = ", ".join(str(v) for v in param.enum)
            raise InvalidParamsError(
                f"Argument '{name}' for tool '{descriptor.name}' must be one of: {allowed}",
                data={"tool": descriptor.name, "argument": name},
            )
        validated[name] = value

    ignored = set(arguments) - set(descriptor.parameters)
    if ignored:
        logger.debug("Dropping undeclared arguments for %s: %s", descriptor.name, sorted(ignored))

    return validated
