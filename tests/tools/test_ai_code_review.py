"""Tests for the ai_code_review tool."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from review_mcp.config import AIServiceConfig
from review_mcp.llm.client import ChatCompletionClient
from review_mcp.protocol.errors import ExternalServiceError
from review_mcp.tools.ai_code_review import (
    REVIEW_FOCUS,
    STATUS_AI,
    STATUS_FALLBACK,
    AICodeReviewTool,
    build_review_prompt,
    count_functions,
    heuristic_issues,
)
from review_mcp.tools.fallback import FallbackExecutor

ARGS = {"code": "function add(a, b) { return a + b; }", "language": "javascript", "review_type": "security"}


def _client(configured: bool = True) -> MagicMock:
    client = MagicMock(spec=ChatCompletionClient)
    client.is_configured = configured
    client.complete = AsyncMock(return_value="1. **Overall Assessment**: fine")
    return client


class TestHelpers:
    def test_prompt_contains_code_and_focus(self) -> None:
        prompt = build_review_prompt("x = 1", "python", "performance")
        assert "```python\nx = 1\n```" in prompt
        assert REVIEW_FOCUS["performance"] in prompt

    def test_count_functions(self) -> None:
        code = "function a() {}\nconst b = () => 1;\ndef c():\n    pass\n"
        assert count_functions(code) == 3

    def test_heuristic_issues(self) -> None:
        code = "var x = 1; console.log(x); // TODO"
        issues = heuristic_issues(code, "javascript")
        assert "Remove console.log statements before production" in issues
        assert "Address TODO/FIXME comments" in issues
        assert "Use 'const' or 'let' instead of 'var'" in issues

    def test_var_only_flagged_for_js(self) -> None:
        assert heuristic_issues("var x", "python") == ["No obvious issues detected in this code sample"]

    def test_long_code_without_error_handling(self) -> None:
        issues = heuristic_issues("x = 1\n" * 50, "python")
        assert issues == ["Consider adding error handling for robustness"]


class TestConfiguration:
    def test_no_client_is_not_configured(self) -> None:
        assert AICodeReviewTool().is_configured is False

    def test_client_configuration_passes_through(self) -> None:
        assert AICodeReviewTool(_client(True)).is_configured is True
        assert AICodeReviewTool(_client(False)).is_configured is False

    def test_real_client_without_endpoint(self) -> None:
        tool = AICodeReviewTool(ChatCompletionClient(AIServiceConfig()))
        assert tool.is_configured is False


class TestPrimary:
    async def test_primary_result(self) -> None:
        client = _client()
        result = await AICodeReviewTool(client).primary(ARGS)
        assert result == {
            "status": STATUS_AI,
            "language": "javascript",
            "review_type": "security",
            "analysis": "1. **Overall Assessment**: fine",
        }
        messages = client.complete.await_args.args[0]
        assert [m["role"] for m in messages] == ["system", "user"]
        assert ARGS["code"] in messages[1]["content"]

    async def test_primary_without_client_raises(self) -> None:
        with pytest.raises(RuntimeError):
            await AICodeReviewTool().primary(ARGS)

    async def test_primary_propagates_service_error(self) -> None:
        client = _client()
        client.complete.side_effect = ExternalServiceError("Azure AI", "503")
        with pytest.raises(ExternalServiceError):
            await AICodeReviewTool(client).primary(ARGS)


class TestFallback:
    def test_fallback_shape(self) -> None:
        result = AICodeReviewTool().fallback(ARGS)
        assert result["status"] == STATUS_FALLBACK
        assert result["status"] != STATUS_AI
        analysis = result["analysis"]
        assert set(analysis) == {
            "overall_assessment",
            "issues",
            "recommendations",
            "best_practices",
            "security_notes",
        }
        assert "1 functions detected" in analysis["overall_assessment"]
        assert "Implement input validation" in analysis["recommendations"]
        assert analysis["security_notes"]

    def test_no_security_notes_for_performance(self) -> None:
        args = {**ARGS, "review_type": "performance"}
        assert AICodeReviewTool().fallback(args)["analysis"]["security_notes"] == []

    def test_fallback_is_deterministic(self) -> None:
        tool = AICodeReviewTool()
        assert tool.fallback(ARGS) == tool.fallback(ARGS)


class TestThroughExecutor:
    async def test_service_failure_degrades(self) -> None:
        client = _client()
        client.complete.side_effect = ExternalServiceError("Azure AI", "boom")
        tool = AICodeReviewTool(client)

        outcome = await FallbackExecutor(timeout=1.0).execute_with_fallback(
            tool, ARGS, tool.primary, tool.fallback, configured=tool.is_configured
        )

        assert json.loads(outcome.content[0].text)["status"] == STATUS_FALLBACK

    async def test_unconfigured_never_calls_service(self) -> None:
        client = _client(configured=False)
        tool = AICodeReviewTool(client)

        outcome = await FallbackExecutor().execute_with_fallback(
            tool, ARGS, tool.primary, tool.fallback, configured=tool.is_configured
        )

        assert json.loads(outcome.content[0].text)["status"] == STATUS_FALLBACK
        client.complete.assert_not_awaited()
