"""ai_code_review — LLM-powered code review with a deterministic local fallback."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

from review_mcp.protocol.models import ToolParameter
from review_mcp.tools.base import ExternalServiceTool

if TYPE_CHECKING:
    from review_mcp.llm.client import ChatCompletionClient

logger = logging.getLogger(__name__)

STATUS_AI = "ai_analysis"
STATUS_FALLBACK = "mock_analysis"

SYSTEM_PROMPT = (
    "You are an expert code reviewer. Provide detailed, actionable feedback on code "
    "quality, security, and best practices. Format your response as structured "
    "analysis with specific recommendations."
)

REVIEW_FOCUS = {
    "security": "Focus on security vulnerabilities, input validation, authentication, and potential exploits.",
    "performance": "Focus on performance optimizations, algorithmic efficiency, and resource usage.",
    "best_practices": "Focus on code style, maintainability, readability, and language-specific best practices.",
    "comprehensive": "Provide a comprehensive review covering security, performance, maintainability, and best practices.",
}

_FUNCTION_PATTERNS = [
    re.compile(r"function\s+\w+"),
    re.compile(r"const\s+\w+\s*=\s*\("),
    re.compile(r"\w+\s*:\s*\("),
    re.compile(r"def\s+\w+"),
]

_BASE_RECOMMENDATIONS = [
    "Add comprehensive documentation",
    "Implement unit tests",
    "Consider edge cases and error scenarios",
]

_TYPE_RECOMMENDATIONS = {
    "security": [
        "Implement input validation",
        "Use secure coding practices",
        "Review for injection vulnerabilities",
    ],
    "performance": [
        "Profile for bottlenecks",
        "Optimize algorithm complexity",
        "Consider caching strategies",
    ],
    "best_practices": [
        "Follow SOLID principles",
        "Use meaningful variable names",
        "Refactor large functions",
    ],
    "comprehensive": [
        "Apply security best practices",
        "Optimize for performance",
        "Follow coding standards",
    ],
}


class AICodeReviewTool(ExternalServiceTool):
    """Reviews code through a chat-completion model.

    When no model is reachable the fallback produces a heuristic review
    labelled ``status: "mock_analysis"``.
    """

    name = "ai_code_review"
    description = (
        "Analyze code using Azure AI to provide intelligent feedback on quality, "
        "security, and best practices"
    )
    parameters = {
        "code": ToolParameter(
            type="string",
            description="The code content to review",
            required=True,
        ),
        "language": ToolParameter(
            type="string",
            description="Programming language (javascript, typescript, python, etc.)",
            default="typescript",
        ),
        "review_type": ToolParameter(
            type="string",
            description="Type of review: security, performance, best_practices, or comprehensive",
            enum=list(REVIEW_FOCUS),
            default="comprehensive",
        ),
    }

    def __init__(self, client: ChatCompletionClient | None = None) -> None:
        self._client = client

    @property
    def is_configured(self) -> bool:
        return self._client is not None and self._client.is_configured

    async def primary(self, arguments: dict[str, Any]) -> dict[str, Any]:
        if self._client is None:
            msg = "no chat-completion client"
            raise RuntimeError(msg)

        code, language, review_type = _unpack(arguments)
        text = await self._client.complete([
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": build_review_prompt(code, language, review_type)},
        ])
        logger.info("ai_code_review received %d characters of analysis", len(text))
        return {
            "status": STATUS_AI,
            "language": language,
            "review_type": review_type,
            "analysis": text,
        }

    def fallback(self, arguments: dict[str, Any]) -> dict[str, Any]:
        code, language, review_type = _unpack(arguments)
        security_notes = (
            [
                "Validate all user inputs",
                "Use parameterized queries for database operations",
                "Implement proper authentication and authorization",
            ]
            if review_type in ("security", "comprehensive")
            else []
        )
        shape = "well-structured" if len(code) > 100 else "concise"
        return {
            "status": STATUS_FALLBACK,
            "language": language,
            "review_type": review_type,
            "message": "AI service unavailable - showing heuristic analysis",
            "analysis": {
                "overall_assessment": (
                    f"This {language} code appears to be {shape} with "
                    f"{count_functions(code)} functions detected."
                ),
                "issues": heuristic_issues(code, language),
                "recommendations": _BASE_RECOMMENDATIONS + _TYPE_RECOMMENDATIONS.get(review_type, []),
                "best_practices": [
                    f"Follow {language} naming conventions",
                    "Add comprehensive error handling",
                    "Include unit tests for all functions",
                    "Document complex logic with comments",
                ],
                "security_notes": security_notes,
            },
            "note": "This is a heuristic analysis. Configure AI credentials for LLM-powered review.",
        }


def _unpack(arguments: dict[str, Any]) -> tuple[str, str, str]:
    return (
        arguments["code"],
        arguments.get("language", "typescript"),
        arguments.get("review_type", "comprehensive"),
    )


def build_review_prompt(code: str, language: str, review_type: str) -> str:
    focus = REVIEW_FOCUS.get(review_type, REVIEW_FOCUS["comprehensive"])
    return (
        f"Please review this {language} code. {focus}\n\n"
        f"## Code to Review:\n```{language}\n{code}\n```\n\n"
        "## Please provide:\n"
        "1. **Overall Assessment**: Brief summary of code quality\n"
        "2. **Specific Issues**: List any problems found with line references where possible\n"
        "3. **Recommendations**: Actionable suggestions for improvement\n"
        "4. **Best Practices**: Language-specific recommendations\n"
        "5. **Security Considerations**: Any security concerns (if applicable)\n\n"
        "Format your response clearly with sections and bullet points for easy reading."
    )


def count_functions(code: str) -> int:
    return sum(len(pattern.findall(code)) for pattern in _FUNCTION_PATTERNS)


def heuristic_issues(code: str, language: str) -> list[str]:
    issues: list[str] = []
    if "console.log" in code:
        issues.append("Remove console.log statements before production")
    if "TODO" in code or "FIXME" in code:
        issues.append("Address TODO/FIXME comments")
    if "try" not in code and "catch" not in code and len(code) > 200:
        issues.append("Consider adding error handling for robustness")
    if language in ("javascript", "typescript") and "var " in code:
        issues.append("Use 'const' or 'let' instead of 'var'")
    return issues or ["No obvious issues detected in this code sample"]
