"""Review MCP — a Model Context Protocol server exposing code review tools."""

from __future__ import annotations

__version__ = "0.1.0"
