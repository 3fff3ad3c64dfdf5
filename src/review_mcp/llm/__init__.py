"""LLM access for AI-backed tools."""

from review_mcp.llm.client import ChatCompletionClient

__all__ = ["ChatCompletionClient"]
