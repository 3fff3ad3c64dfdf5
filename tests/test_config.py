"""Tests for ServerConfig, AIServiceConfig and load_config."""

from __future__ import annotations

from pathlib import Path

import pytest

from review_mcp import __version__
from review_mcp.config import (
    DEFAULT_SERVER_NAME,
    PROTOCOL_VERSION,
    AIServiceConfig,
    ServerConfig,
    load_config,
)
from review_mcp.protocol.errors import ConfigError


class TestDefaults:
    def test_server_defaults(self) -> None:
        config = ServerConfig()
        assert config.name == DEFAULT_SERVER_NAME
        assert config.version == __version__
        assert config.protocol_version == PROTOCOL_VERSION
        assert config.tools == {
            "markdown_review": True,
            "dependency_check": True,
            "ai_code_review": True,
        }
        assert config.ai.is_configured is False
        assert config.telemetry.enabled is False

    def test_ai_model_string(self) -> None:
        assert AIServiceConfig(deployment="gpt-4o").model == "azure/gpt-4o"

    @pytest.mark.parametrize(
        ("endpoint", "api_key", "expected"),
        [(None, None, False), ("https://x", None, False), (None, "k", False), ("https://x", "k", True)],
    )
    def test_ai_is_configured(self, endpoint: str | None, api_key: str | None, expected: bool) -> None:
        assert AIServiceConfig(endpoint=endpoint, api_key=api_key).is_configured is expected


class TestFromEnv:
    def test_empty_environment(self) -> None:
        assert ServerConfig.from_env({}) == ServerConfig()

    def test_identity_and_ai(self) -> None:
        config = ServerConfig.from_env(
            {
                "MCP_SERVER_NAME": "Reviewer",
                "MCP_SERVER_VERSION": "2.0.0",
                "AZURE_AI_ENDPOINT": "https://example.openai.azure.com",
                "AZURE_AI_KEY": "k",
                "AZURE_AI_DEPLOYMENT": "gpt-4o",
                "AZURE_AI_TIMEOUT": "7.5",
            }
        )
        assert config.name == "Reviewer"
        assert config.version == "2.0.0"
        assert config.ai.is_configured
        assert config.ai.deployment == "gpt-4o"
        assert config.ai.timeout == 7.5

    @pytest.mark.parametrize(
        ("raw", "enabled"),
        [("true", True), ("TRUE", True), ("1", True), ("yes", True), ("false", False), ("0", False), ("nah", False)],
    )
    def test_tool_flags(self, raw: str, enabled: bool) -> None:
        config = ServerConfig.from_env({"ENABLE_MARKDOWN_TOOL": raw})
        assert config.tools["markdown_review"] is enabled
        assert config.tools["dependency_check"] is True

    def test_empty_values_ignored(self) -> None:
        assert ServerConfig.from_env({"AZURE_AI_ENDPOINT": "", "MCP_SERVER_NAME": ""}) == ServerConfig()

    @pytest.mark.parametrize("timeout", ["soon", "0", "-3"])
    def test_invalid_timeout(self, timeout: str) -> None:
        with pytest.raises(ConfigError, match="environment"):
            ServerConfig.from_env({"AZURE_AI_TIMEOUT": timeout})


class TestLoadConfig:
    def test_none_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MCP_SERVER_NAME", "From Env")
        assert load_config().name == "From Env"

    def test_yaml_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TEST_AI_KEY", "expanded-key")
        path = tmp_path / "server.yaml"
        path.write_text(
            "name: File Server\n"
            "tools:\n"
            "  ai_code_review: false\n"
            "ai:\n"
            "  endpoint: https://example.openai.azure.com\n"
            "  api_key: ${TEST_AI_KEY}\n"
            "  timeout: 3\n"
        )
        config = load_config(path)
        assert config.name == "File Server"
        assert config.tools == {"ai_code_review": False}
        assert config.ai.api_key == "expanded-key"
        assert config.ai.timeout == 3.0

    def test_json_file(self, tmp_path: Path) -> None:
        path = tmp_path / "server.json"
        path.write_text('{"name": "Json Server", "version": "0.0.1"}')
        assert load_config(path).version == "0.0.1"

    def test_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == ServerConfig()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot read"):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("name: [unclosed\n")
        with pytest.raises(ConfigError, match="parse error"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_invalid_values(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("tools:\n  markdown_review: maybe\n")
        with pytest.raises(ConfigError, match="Invalid config"):
            load_config(path)
