"""Shared fixtures: configs, a built server, and LiteLLM response mocks."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from review_mcp.config import AIServiceConfig, ServerConfig
from review_mcp.server import McpServer, build_server


def make_mock_litellm_response(content: str | None = "Looks good.") -> MagicMock:
    """Create a ``MagicMock`` shaped like LiteLLM's ``choices[0].message``."""
    message = MagicMock()
    message.content = content

    choice = MagicMock()
    choice.message = message
    choice.finish_reason = "stop"

    response = MagicMock()
    response.choices = [choice]
    return response


@pytest.fixture
def config() -> ServerConfig:
    """All tools enabled, AI service not configured."""
    return ServerConfig(name="test-server", version="9.9.9")


@pytest.fixture
def ai_config() -> AIServiceConfig:
    return AIServiceConfig(
        endpoint="https://example.openai.azure.com",
        api_key="secret",
        timeout=5.0,
    )


@pytest.fixture
def configured(config: ServerConfig, ai_config: AIServiceConfig) -> ServerConfig:
    """All tools enabled, AI service configured."""
    return config.model_copy(update={"ai": ai_config})


@pytest.fixture
def server(config: ServerConfig) -> McpServer:
    return build_server(config)


@pytest.fixture
def litellm_response() -> Any:
    return make_mock_litellm_response
