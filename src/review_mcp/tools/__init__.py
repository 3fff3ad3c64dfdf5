"""Tool contract, registry, fallback executor and built-in tools."""

from review_mcp.tools.base import ExternalServiceTool, Tool, validate_arguments
from review_mcp.tools.fallback import FallbackExecutor
from review_mcp.tools.registry import ToolRegistry, build_registry

__all__ = [
    "ExternalServiceTool",
    "FallbackExecutor",
    "Tool",
    "ToolRegistry",
    "build_registry",
    "validate_arguments",
]
