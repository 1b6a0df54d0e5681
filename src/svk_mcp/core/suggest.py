"""Rule-based suggestions for which SVK skill to run next."""

import logging
import re
from datetime import datetime, timezone
from pathlib import Path

from svk_mcp.config import settings
from svk_mcp.core.docs import DOCS_DIR
from svk_mcp.core.resolver import AUDIT_SKILLS, DEFAULT_SKILL, count_history
from svk_mcp.core.state import scan_skill_states
from svk_mcp.models import SkillState, Suggestion

logger = logging.getLogger("svk.suggest")

CODE_DIRS = ("programs", "src", "contracts", "app", "lib")
TEST_DIRS = ("tests", "test", "__tests__")

PRIORITY_ORDER = {"critical": 0, "high": 1, "medium": 2, "info": 3}

_UNRESOLVED = re.compile(r"unresolved|open|pending|not\s+fixed", re.IGNORECASE)


def _any_dir(project_dir: Path, names: tuple[str, ...]) -> bool:
    return any((project_dir / name).is_dir() for name in names)


def count_severities(report: str) -> tuple[int, int, bool]:
    """(critical count, high count, mentions unresolved) for a final report."""
    critical = len(re.findall(r"CRITICAL", report, re.IGNORECASE))
    high = len(re.findall(r"\bHIGH\b", report, re.IGNORECASE))
    return critical, high, bool(_UNRESOLVED.search(report))


def days_since(timestamp: str, now: datetime | None = None) -> float | None:
    """Days elapsed since an ISO timestamp, or None if it cannot be parsed."""
    if not timestamp:
        return None
    try:
        then = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return None
    if then.tzinfo is None:
        then = then.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    return (now - then).total_seconds() / 86400


def build_suggestions(project_dir: Path, now: datetime | None = None) -> list[Suggestion]:
    """Apply every rule to the project and return suggestions, most urgent first."""
    states: dict[str, SkillState] = {s.skill: s for s in scan_skill_states(project_dir)}
    history_count = sum(count_history(project_dir).values())
    audit_dir = project_dir / AUDIT_SKILLS[DEFAULT_SKILL].current_root

    has_code = _any_dir(project_dir, CODE_DIRS)
    has_docs = (project_dir / DOCS_DIR).is_dir()
    has_audit = audit_dir.is_dir()

    suggestions: list[Suggestion] = []

    if has_code and not has_docs:
        suggestions.append(Suggestion(
            suggestion="Run /GL:survey — no architecture docs found",
            priority="high",
            reason="Code exists but no GL documentation has been generated. "
            "Architecture docs help all downstream tools (including security audits) work better.",
        ))

    gl_state = states.get("grand-library")
    if has_docs and gl_state is not None:
        age = days_since(gl_state.updated, now)
        if age is not None and age > settings.stale_docs_days:
            suggestions.append(Suggestion(
                suggestion="Docs may be stale — consider /GL:update",
                priority="medium",
                reason=f"GL docs were last updated {int(age)} days ago. "
                "If significant code changes have been made, docs may be out of date.",
            ))

    if has_code and not has_audit:
        suggestions.append(Suggestion(
            suggestion="Consider /SOS:scan before deployment",
            priority="high",
            reason="No security audit found. Running SOS before deployment catches vulnerabilities early.",
        ))

    if has_audit:
        try:
            report = (audit_dir / "FINAL_REPORT.md").read_text(encoding="utf-8")
        except FileNotFoundError:
            report = None
        if report is not None:
            critical, high, unresolved = count_severities(report)
            if unresolved and (critical or high):
                suggestions.append(Suggestion(
                    suggestion=f"{critical} CRITICAL + {high} HIGH findings may be unresolved — fix before launch",
                    priority="critical",
                    reason="The audit report contains unresolved critical or high severity findings.",
                ))

    if history_count > 0 and not has_audit and has_code:
        suggestions.append(Suggestion(
            suggestion="Codebase changed since last audit — /SOS:scan for delta audit",
            priority="medium",
            reason=f"{history_count} previous audit(s) archived, but no current audit exists. Code may have changed.",
        ))

    if has_audit and has_code and not _any_dir(project_dir, TEST_DIRS):
        suggestions.append(Suggestion(
            suggestion="Consider test generation for audited code",
            priority="medium",
            reason="Security audit exists but no test directory detected. Tests codify invariants the audit identified.",
        ))

    if not suggestions:
        suggestions.append(Suggestion(
            suggestion="Project looks solid",
            priority="info",
            reason="All expected SVK artifacts are present and no immediate actions detected.",
        ))

    suggestions.sort(key=lambda s: PRIORITY_ORDER.get(s.priority, 3))
    logger.info("Built %d suggestions for %s", len(suggestions), project_dir)
    return suggestions
