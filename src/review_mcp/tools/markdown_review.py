"""Heuristic quality and accessibility review of markdown documents."""

from __future__ import annotations

import logging
import re
import time
from datetime import datetime, timezone
from typing import Any

from review_mcp.protocol.models import ToolOutcome, ToolParameter
from review_mcp.tools.base import Tool

logger = logging.getLogger(__name__)

_HEADING = re.compile(r"^(#{1,6})\s+(.+)$", re.MULTILINE)
_LINK = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_IMAGE = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")
_IMAGE_NO_ALT = re.compile(r"!\[\s*\]\([^)]+\)")
_EMPTY_LINK = re.compile(r"\]\(\s*\)")
_CODE_BLOCK = re.compile(r"```[\s\S]*?```")
_CODE_BLOCK_LANG = re.compile(r"```(\w+)")
_INLINE_CODE = re.compile(r"`[^`]+`")
_GENERIC_LINK_TEXT = re.compile(r"\[(click here|here|link|read more)\]\(", re.IGNORECASE)

_SEVERITY_PENALTY = {"high": 15, "medium": 8, "low": 3}


class MarkdownReviewTool(Tool):
    """Reviews markdown structure, links, code blocks and accessibility."""

    name = "markdown_review"
    description = (
        "Analyze and provide improvement suggestions for markdown content "
        "including grammar, structure, links, and accessibility"
    )
    parameters = {
        "content": ToolParameter(
            type="string",
            description="The markdown content to review",
            required=True,
        ),
        "analysis_type": ToolParameter(
            type="string",
            description="Type of analysis to perform: basic, comprehensive, or accessibility",
            enum=["basic", "comprehensive", "accessibility"],
            default="comprehensive",
        ),
    }

    async def execute(self, arguments: dict[str, Any]) -> ToolOutcome:
        started = time.perf_counter()
        content: str = arguments["content"]
        analysis_type: str = arguments.get("analysis_type", "comprehensive")

        analysis = analyze_markdown(content, analysis_type)
        logger.info(
            "markdown_review finished: %d issue(s), score %d, %.1fms",
            len(analysis["issues"]),
            analysis["qualityScore"],
            (time.perf_counter() - started) * 1000,
        )
        return ToolOutcome.from_json(analysis)


def analyze_markdown(content: str, analysis_type: str = "comprehensive") -> dict[str, Any]:
    """Run the checks selected by *analysis_type* over *content*."""
    headings = heading_structure(content)
    analysis: dict[str, Any] = {
        "summary": {
            "contentLength": len(content),
            "lineCount": len(content.split("\n")),
            "analysisType": analysis_type,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
        "issues": _basic_issues(content),
        "suggestions": _basic_suggestions(content),
        "metrics": {
            "headingStructure": headings,
            "linkAnalysis": _link_metrics(content),
            "codeBlockAnalysis": _code_block_metrics(content),
        },
    }

    if analysis_type in ("comprehensive", "accessibility"):
        analysis["issues"].extend(_structural_issues(headings))
        analysis["suggestions"].extend(_structural_suggestions(content))

    if analysis_type == "accessibility":
        analysis["issues"].extend(_accessibility_issues(content))
        analysis["suggestions"].append(
            {
                "type": "accessibility_best_practices",
                "priority": "high",
                "message": "Follow accessibility best practices",
                "practices": [
                    "Use descriptive alt text for images",
                    "Write descriptive link text",
                    "Use proper heading hierarchy",
                    "Ensure sufficient color contrast in images",
                    "Provide context for code examples",
                ],
            }
        )

    analysis["qualityScore"] = quality_score(analysis["issues"], headings, content)
    return analysis


def heading_structure(content: str) -> dict[str, Any]:
    structure = [
        {"level": len(match.group(1)), "text": match.group(2)}
        for match in _HEADING.finditer(content)
    ]
    skipped = any(
        current["level"] > previous["level"] + 1
        for previous, current in zip(structure, structure[1:])
    )
    return {
        "totalHeadings": len(structure),
        "structure": structure,
        "hasH1": any(h["level"] == 1 for h in structure),
        "hasSkippedLevels": skipped,
    }


def _link_metrics(content: str) -> dict[str, Any]:
    links = _LINK.findall(content)
    return {
        "totalLinks": len(links),
        "totalImages": len(_IMAGE.findall(content)),
        "links": [
            {
                "text": text,
                "url": url,
                "isExternal": url.startswith("http"),
                "hasAltText": bool(text),
            }
            for text, url in links
        ],
    }


def _code_block_metrics(content: str) -> dict[str, Any]:
    blocks = _CODE_BLOCK.findall(content)
    languages = []
    for block in blocks:
        match = _CODE_BLOCK_LANG.match(block)
        language = match.group(1) if match else "none"
        languages.append({"language": language, "hasLanguage": language != "none"})
    return {
        "totalCodeBlocks": len(blocks),
        "totalInlineCode": len(_INLINE_CODE.findall(content)),
        "codeBlocks": languages,
    }


def _basic_issues(content: str) -> list[dict[str, Any]]:
    issues: list[dict[str, Any]] = []

    empty_links = _EMPTY_LINK.findall(content)
    if empty_links:
        issues.append({
            "type": "broken_link",
            "severity": "high",
            "message": f"Found {len(empty_links)} empty link(s)",
            "count": len(empty_links),
        })

    no_alt = _IMAGE_NO_ALT.findall(content)
    if no_alt:
        issues.append({
            "type": "missing_alt_text",
            "severity": "medium",
            "message": f"Found {len(no_alt)} image(s) without alt text",
            "count": len(no_alt),
        })

    if "\n\n\n" in content:
        issues.append({
            "type": "excessive_blank_lines",
            "severity": "low",
            "message": "Found multiple consecutive blank lines",
            "suggestion": "Use single blank lines for better readability",
        })

    return issues


def _basic_suggestions(content: str) -> list[dict[str, Any]]:
    suggestions: list[dict[str, Any]] = []

    if len(_HEADING.findall(content)) > 3:
        suggestions.append({
            "type": "table_of_contents",
            "priority": "medium",
            "message": "Consider adding a table of contents for better navigation",
            "implementation": "Add <!-- TOC --> comment where you want the table of contents",
        })

    if "```\n" in content:
        suggestions.append({
            "type": "code_language",
            "priority": "medium",
            "message": "Specify language for code blocks to enable syntax highlighting",
            "example": "```javascript\ncode here\n```",
        })

    return suggestions


def _structural_issues(headings: dict[str, Any]) -> list[dict[str, Any]]:
    issues: list[dict[str, Any]] = []
    if not headings["hasH1"]:
        issues.append({
            "type": "missing_h1",
            "severity": "medium",
            "message": "Document should have at least one H1 heading",
            "suggestion": "Add a main title using # at the beginning of your document",
        })
    if headings["hasSkippedLevels"]:
        issues.append({
            "type": "skipped_heading_levels",
            "severity": "medium",
            "message": "Heading levels are not sequential",
            "suggestion": "Use consecutive heading levels (H1, H2, H3) for better structure",
        })
    return issues


def _structural_suggestions(content: str) -> list[dict[str, Any]]:
    if "## " not in content and "# " in content:
        return [{
            "type": "document_structure",
            "priority": "low",
            "message": "Consider breaking long content into sections with H2 headings",
            "benefit": "Improves readability and navigation",
        }]
    return []


def _accessibility_issues(content: str) -> list[dict[str, Any]]:
    issues: list[dict[str, Any]] = []

    no_alt = _IMAGE_NO_ALT.findall(content)
    if no_alt:
        issues.append({
            "type": "accessibility_alt_text",
            "severity": "high",
            "message": "Images without alt text are not accessible to screen readers",
            "count": len(no_alt),
            "wcagGuideline": "WCAG 2.1 Level A - 1.1.1 Non-text Content",
        })

    generic = _GENERIC_LINK_TEXT.findall(content)
    if generic:
        issues.append({
            "type": "accessibility_link_text",
            "severity": "medium",
            "message": "Generic link text is not descriptive for screen readers",
            "count": len(generic),
            "wcagGuideline": "WCAG 2.1 Level AA - 2.4.4 Link Purpose",
        })

    return issues


def quality_score(
    issues: list[dict[str, Any]], headings: dict[str, Any], content: str
) -> int:
    """Score 0-100: severity penalties, short/unstructured content, heading bonus."""
    score = 100
    for issue in issues:
        score -= _SEVERITY_PENALTY.get(issue.get("severity", ""), 5)

    if len(content) < 50:
        score -= 10
    if not headings["hasH1"]:
        score -= 10
    if headings["hasSkippedLevels"]:
        score -= 5
    elif headings["totalHeadings"] > 1:
        score += 5

    return max(0, min(100, score))
