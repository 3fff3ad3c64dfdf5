"""Server configuration: identity, enabled tools and the AI service.

Configuration is read exactly once at startup, either from the process
environment (:meth:`ServerConfig.from_env`) or from a YAML/JSON file
(:func:`load_config`). Nothing consults configuration at call time.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from review_mcp import __version__
from review_mcp.protocol.errors import ConfigError

DEFAULT_SERVER_NAME = "Code Review MCP Server"
PROTOCOL_VERSION = "2024-11-05"

_TRUTHY = {"1", "true", "yes", "on"}

# Environment flag -> tool name
_TOOL_FLAGS = {
    "ENABLE_MARKDOWN_TOOL": "markdown_review",
    "ENABLE_DEPENDENCY_TOOL": "dependency_check",
    "ENABLE_AI_TOOL": "ai_code_review",
}


def _default_tools() -> dict[str, bool]:
    return {name: True for name in _TOOL_FLAGS.values()}


class AIServiceConfig(BaseModel):
    """Connection settings for the chat-completion endpoint.

    ``endpoint`` is the Azure OpenAI resource URL; requests go to the
    ``deployment`` chat model through LiteLLM's ``azure/`` provider.
    """

    endpoint: str | None = None
    api_key: str | None = None
    deployment: str = "gpt-35-turbo"
    api_version: str = "2024-02-15-preview"
    timeout: float = Field(default=20.0, gt=0)
    max_tokens: int = 1000
    temperature: float = 0.3
    top_p: float = 0.9

    @property
    def is_configured(self) -> bool:
        return bool(self.endpoint) and bool(self.api_key)

    @property
    def model(self) -> str:
        """LiteLLM model string."""
        return f"azure/{self.deployment}"


class TelemetrySettings(BaseModel):
    """Optional telemetry configuration."""

    enabled: bool = False
    otlp_endpoint: str | None = None


class ServerConfig(BaseModel):
    """Top-level server configuration."""

    name: str = DEFAULT_SERVER_NAME
    version: str = __version__
    protocol_version: str = PROTOCOL_VERSION
    tools: dict[str, bool] = Field(default_factory=_default_tools)
    ai: AIServiceConfig = Field(default_factory=AIServiceConfig)
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ServerConfig:
        """Build a config from environment variables.

        Unset variables keep their defaults. Tool flags accept
        ``true/1/yes/on`` (case-insensitive); any other value disables.
        """
        env = os.environ if environ is None else environ

        tools = _default_tools()
        for flag, tool_name in _TOOL_FLAGS.items():
            raw = env.get(flag)
            if raw is not None:
                tools[tool_name] = raw.strip().lower() in _TRUTHY

        ai: dict[str, Any] = {}
        for var, field in (
            ("AZURE_AI_ENDPOINT", "endpoint"),
            ("AZURE_AI_KEY", "api_key"),
            ("AZURE_AI_DEPLOYMENT", "deployment"),
            ("AZURE_AI_API_VERSION", "api_version"),
            ("AZURE_AI_TIMEOUT", "timeout"),
        ):
            if env.get(var):
                ai[field] = env[var]

        data: dict[str, Any] = {"tools": tools, "ai": ai}
        if env.get("MCP_SERVER_NAME"):
            data["name"] = env["MCP_SERVER_NAME"]
        if env.get("MCP_SERVER_VERSION"):
            data["version"] = env["MCP_SERVER_VERSION"]

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(f"Invalid environment configuration: {exc}") from exc


def load_config(path: Path | None = None) -> ServerConfig:
    """Load configuration from *path*, or from the environment if ``None``.

    Environment variables in the form ``${VAR}`` or ``$VAR`` are expanded
    before parsing. The file is read as YAML, so JSON files load as well.

    Raises:
        ConfigError: The file cannot be read, parsed or validated.
    """
    if path is None:
        return ServerConfig.from_env()

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc

    try:
        data: Any = yaml.safe_load(os.path.expandvars(raw))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Config parse error in {path}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping, got {type(data).__name__}")

    try:
        return ServerConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config in {path}: {exc}") from exc
