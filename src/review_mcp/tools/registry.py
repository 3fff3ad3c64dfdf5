"""ToolRegistry — the name-to-tool map shared by every request.

Built once at startup from the static list of built-in tools filtered by the
``tools`` flags of :class:`~review_mcp.config.ServerConfig`, then frozen.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from review_mcp.protocol.errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from review_mcp.config import ServerConfig
    from review_mcp.llm.client import ChatCompletionClient
    from review_mcp.protocol.models import ToolDescriptor
    from review_mcp.tools.base import Tool

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Ordered mapping of tool name to :class:`Tool`.

    Usage::

        registry = ToolRegistry()
        registry.register(MarkdownReviewTool())
        registry.freeze()

        registry.get("markdown_review")
        registry.descriptors()      # registration order
    """

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}
        self._descriptors: dict[str, ToolDescriptor] = {}
        self._frozen = False

    def register(self, tool: Tool) -> None:
        """Add *tool*; a duplicate name replaces the earlier entry."""
        if self._frozen:
            msg = "ToolRegistry is frozen; tools can only be registered at startup"
            raise RuntimeError(msg)
        if tool.name in self._tools:
            logger.warning("Tool %s registered twice; the later registration wins", tool.name)
        self._tools[tool.name] = tool
        self._descriptors[tool.name] = tool.descriptor
        logger.info("Registered tool: %s", tool.name)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def descriptors(self) -> list[ToolDescriptor]:
        """Descriptors of all registered tools, in registration order."""
        return list(self._descriptors.values())

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._tools.values())


def _builtin_factories(
    llm_client: ChatCompletionClient | None,
) -> dict[str, Callable[[], Tool]]:
    from review_mcp.tools.ai_code_review import AICodeReviewTool
    from review_mcp.tools.dependency_check import DependencyCheckTool
    from review_mcp.tools.markdown_review import MarkdownReviewTool

    return {
        MarkdownReviewTool.name: MarkdownReviewTool,
        DependencyCheckTool.name: DependencyCheckTool,
        AICodeReviewTool.name: lambda: AICodeReviewTool(llm_client),
    }


def build_registry(
    config: ServerConfig,
    llm_client: ChatCompletionClient | None = None,
) -> ToolRegistry:
    """Build and freeze the registry for the tools enabled in *config*.

    Raises:
        ConfigError: *config* names a tool that does not exist.
    """
    factories = _builtin_factories(llm_client)
    unknown = sorted(set(config.tools) - set(factories))
    if unknown:
        raise ConfigError(f"Unknown tool(s) in configuration: {', '.join(unknown)}")

    registry = ToolRegistry()
    for name, factory in factories.items():
        if config.tools.get(name, True):
            registry.register(factory())
        else:
            logger.info("Tool %s disabled by configuration", name)
    registry.freeze()
    return registry
