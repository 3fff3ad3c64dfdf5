"""Vulnerability, update and compatibility review of a package.json."""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from typing import Any

import nodesemver

from review_mcp.protocol.errors import ToolExecutionError
from review_mcp.protocol.models import ToolOutcome, ToolParameter
from review_mcp.tools.base import Tool

logger = logging.getLogger(__name__)

# Static stand-ins for a vulnerability database and the npm registry.
KNOWN_VULNERABILITIES: list[dict[str, str]] = [
    {
        "package": "lodash",
        "affectedVersions": "<4.17.19",
        "severity": "high",
        "cve": "CVE-2020-8203",
        "description": "Prototype pollution vulnerability",
        "fixedVersion": "4.17.19",
    },
    {
        "package": "minimist",
        "affectedVersions": "<1.2.6",
        "severity": "medium",
        "cve": "CVE-2021-44906",
        "description": "Prototype pollution vulnerability",
        "fixedVersion": "1.2.6",
    },
]

LATEST_VERSIONS: dict[str, str] = {
    "express": "4.18.2",
    "react": "18.2.0",
    "lodash": "4.17.21",
    "axios": "1.6.0",
    "typescript": "5.4.0",
    "@types/node": "20.11.0",
}

_RISK_WEIGHT = {"critical": 10, "high": 7, "medium": 4, "low": 1}


class DependencyCheckTool(Tool):
    """Checks package.json dependencies against known vulnerabilities and latest versions."""

    name = "dependency_check"
    description = (
        "Analyze project dependencies for security vulnerabilities, "
        "outdated packages, and compatibility issues"
    )
    parameters = {
        "package_json": ToolParameter(
            type="string",
            description="Content of package.json file to analyze",
            required=True,
        ),
        "check_type": ToolParameter(
            type="string",
            description="Type of dependency check: security, updates, or comprehensive",
            enum=["security", "updates", "comprehensive"],
            default="comprehensive",
        ),
        "include_dev_dependencies": ToolParameter(
            type="boolean",
            description="Whether to include devDependencies in the analysis",
            default=True,
        ),
    }

    async def execute(self, arguments: dict[str, Any]) -> ToolOutcome:
        try:
            package_data = json.loads(arguments["package_json"])
        except json.JSONDecodeError as exc:
            raise ToolExecutionError(self.name, f"package_json is not valid JSON: {exc}") from exc
        if not isinstance(package_data, dict):
            raise ToolExecutionError(self.name, "package_json must contain a JSON object")

        analysis = analyze_dependencies(
            package_data,
            arguments.get("check_type", "comprehensive"),
            arguments.get("include_dev_dependencies", True),
        )
        logger.info(
            "dependency_check finished: %d dependencies, %d vulnerable, %d outdated",
            analysis["summary"]["totalDependencies"],
            len(analysis["security"]["vulnerabilities"]),
            len(analysis["updates"]["outdated"]),
        )
        return ToolOutcome.from_json(analysis)


def analyze_dependencies(
    package_data: dict[str, Any],
    check_type: str = "comprehensive",
    include_dev: bool = True,
) -> dict[str, Any]:
    dependencies = _string_map(package_data.get("dependencies"))
    dev_dependencies = _string_map(package_data.get("devDependencies")) if include_dev else {}
    all_dependencies = {**dependencies, **dev_dependencies}

    analysis: dict[str, Any] = {
        "summary": {
            "projectName": package_data.get("name"),
            "projectVersion": package_data.get("version"),
            "totalDependencies": len(all_dependencies),
            "productionDependencies": len(dependencies),
            "devDependencies": len(dev_dependencies),
            "checkType": check_type,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
        "security": {"vulnerabilities": [], "riskScore": 0, "recommendations": []},
        "updates": {"outdated": [], "recommendations": []},
        "compatibility": {
            "issues": [],
            "nodeVersionCheck": node_version_check(package_data),
            "recommendations": [],
        },
    }

    if check_type in ("security", "comprehensive"):
        analysis["security"] = security_analysis(all_dependencies)
    if check_type in ("updates", "comprehensive"):
        analysis["updates"] = update_analysis(all_dependencies)
    if check_type == "comprehensive":
        analysis["compatibility"]["issues"] = peer_conflicts(
            all_dependencies, _string_map(package_data.get("peerDependencies"))
        )

    analysis["insights"] = _insights(analysis)
    return analysis


def security_analysis(dependencies: dict[str, str]) -> dict[str, Any]:
    vulnerabilities: list[dict[str, Any]] = []
    risk_score = 0

    for package, spec in dependencies.items():
        current = clean_version(spec)
        for vuln in KNOWN_VULNERABILITIES:
            if vuln["package"] == package and satisfies(current, vuln["affectedVersions"]):
                vulnerabilities.append({**vuln, "currentVersion": current})
                risk_score += _RISK_WEIGHT.get(vuln["severity"], 0)

    recommendations: list[dict[str, str]] = []
    if vulnerabilities:
        recommendations.append({
            "type": "immediate_action",
            "priority": "high",
            "message": f"Found {len(vulnerabilities)} security vulnerabilities",
            "action": "Update affected packages immediately",
        })
    if risk_score > 20:
        recommendations.append({
            "type": "security_audit",
            "priority": "high",
            "message": "High security risk detected",
            "action": "Perform comprehensive security audit",
        })

    return {"vulnerabilities": vulnerabilities, "riskScore": risk_score, "recommendations": recommendations}


def update_analysis(dependencies: dict[str, str]) -> dict[str, Any]:
    outdated: list[dict[str, Any]] = []

    for package, spec in dependencies.items():
        latest = LATEST_VERSIONS.get(package)
        current = parse_version(clean_version(spec))
        newest = parse_version(latest) if latest is not None else None
        if current is None or newest is None:
            continue
        if nodesemver.lt(current, newest, False):
            outdated.append({
                "package": package,
                "currentVersion": clean_version(spec),
                "latestVersion": latest,
                "updateType": update_type(current, newest),
                "versionsBehind": versions_behind(current, newest),
            })

    by_type: dict[str, list[str]] = {"major": [], "minor": [], "patch": []}
    for entry in outdated:
        by_type[entry["updateType"]].append(entry["package"])

    recommendations: list[dict[str, Any]] = []
    if by_type["major"]:
        recommendations.append({
            "type": "major_updates",
            "priority": "medium",
            "message": f"{len(by_type['major'])} package(s) have major updates available",
            "action": "Review breaking changes before updating",
            "packages": by_type["major"],
        })
    if by_type["minor"]:
        recommendations.append({
            "type": "minor_updates",
            "priority": "low",
            "message": f"{len(by_type['minor'])} package(s) have minor updates available",
            "action": "Safe to update, new features available",
        })
    if by_type["patch"]:
        recommendations.append({
            "type": "patch_updates",
            "priority": "low",
            "message": f"{len(by_type['patch'])} package(s) have patch updates available",
            "action": "Recommended to update for bug fixes",
        })

    return {"outdated": outdated, "recommendations": recommendations}


def peer_conflicts(dependencies: dict[str, str], peers: dict[str, str]) -> list[dict[str, Any]]:
    issues: list[dict[str, Any]] = []
    for package, required in peers.items():
        installed = dependencies.get(package)
        if installed is not None and not satisfies(clean_version(installed), required):
            issues.append({
                "type": "peer_dependency_conflict",
                "package": package,
                "required": required,
                "installed": installed,
                "severity": "medium",
            })
    return issues


def node_version_check(package_data: dict[str, Any]) -> dict[str, Any]:
    engines = package_data.get("engines")
    if not isinstance(engines, dict) or not engines.get("node"):
        return {"specified": False, "recommendation": "Specify Node.js version in engines field"}
    return {"specified": True, "requirement": engines["node"], "isSupported": True}


def _insights(analysis: dict[str, Any]) -> list[dict[str, Any]]:
    insights: list[dict[str, Any]] = []

    risk = analysis["security"]["riskScore"]
    if risk > 0:
        insights.append({
            "type": "security",
            "title": "Security Risk Assessment",
            "message": f"Your project has a security risk score of {risk}",
            "priority": "high" if risk > 10 else "medium",
        })

    outdated = len(analysis["updates"]["outdated"])
    if outdated:
        insights.append({
            "type": "maintenance",
            "title": "Package Maintenance",
            "message": f"{outdated} of your dependencies are outdated",
            "recommendation": "Regular updates improve security and performance",
        })

    insights.append({
        "type": "best_practices",
        "title": "Dependency Management Best Practices",
        "recommendations": [
            "Pin exact versions for production deployments",
            "Use npm audit regularly to check for vulnerabilities",
            "Keep dependencies up to date",
            "Remove unused dependencies",
            "Use lockfiles (package-lock.json) for consistent installs",
        ],
    })
    return insights


# ---------------------------------------------------------------------------
# npm version helpers
# ---------------------------------------------------------------------------


def _string_map(value: Any) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(k): str(v) for k, v in value.items()}


def clean_version(spec: str) -> str:
    return re.sub(r"^[\^~]", "", spec.strip())


def parse_version(text: str) -> nodesemver.SemVer | None:
    """Strict semver for *text* (a leading ``v`` is allowed), or None."""
    try:
        return nodesemver.make_semver(text.strip(), False)
    except ValueError:
        return None


def satisfies(version: str, range_spec: str) -> bool:
    """Whether *version* falls in the npm range *range_spec*.

    Unparseable versions or ranges never match.
    """
    try:
        return bool(nodesemver.satisfies(version.strip(), range_spec, False))
    except ValueError:
        return False


def update_type(current: nodesemver.SemVer, latest: nodesemver.SemVer) -> str:
    if latest.major > current.major:
        return "major"
    if latest.minor > current.minor:
        return "minor"
    return "patch"


def versions_behind(current: nodesemver.SemVer, latest: nodesemver.SemVer) -> int:
    return (
        (latest.major - current.major) * 1000
        + (latest.minor - current.minor) * 100
        + (latest.patch - current.patch)
    )
