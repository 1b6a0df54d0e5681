"""SVK MCP server.

Exposes SVK artifacts as 8 read-only tools:
- svk_project_status: Current phase, progress and next step of every skill
- svk_get_doc: Grand Library docs by name, or a listing of all of them
- svk_get_decisions: Architectural decisions captured during the GL interview
- svk_get_audit: SOS/DB audit reports, architecture, strategies and findings
- svk_search: Full-text search across docs, audits, decisions and knowledge
- svk_suggest: Which SVK skill would be most valuable to run next
- svk_list_knowledge: Catalog of the SVK knowledge bases
- svk_read_knowledge: Read one knowledge base file

Every tool re-reads the project on each call; nothing is cached.
"""

import json
import logging
from typing import Literal

from mcp.server.fastmcp import FastMCP
from pydantic import BaseModel

from svk_mcp.config import settings

logger = logging.getLogger("svk.server")

mcp = FastMCP(
    "svk",
    instructions=(
        "SVK provides knowledge, not control. "
        "Use svk_project_status first to see which SVK skills have run and what comes next. "
        "Use svk_get_audit and svk_get_doc to read specific artifacts, "
        "and svk_search to find a term across all of them. "
        "Responses with only a 'text' field are explanations (nothing found yet, bad parameter), not errors."
    ),
)


def _dump(result: BaseModel) -> str:
    return json.dumps(result.model_dump(mode="json", exclude_none=True), indent=2, ensure_ascii=False)


@mcp.tool()
async def svk_project_status() -> str:
    """Current state of all active SVK skills (audit progress, doc generation status, next steps).

    Use this to understand what SVK work has been done or is in progress.
    """
    from svk_mcp.tools.status import project_status

    return _dump(project_status(settings.project_dir))


@mcp.tool()
async def svk_get_doc(name: str | None = None) -> str:
    """Retrieve a GL-generated document by name, or list all available docs.

    Args:
        name: Document name or partial match (e.g. "architecture", "data-model"). Omit to list all.
    """
    from svk_mcp.tools.docs import get_doc

    return _dump(get_doc(settings.project_dir, name=name))


@mcp.tool()
async def svk_get_decisions(topic: str | None = None) -> str:
    """Retrieve architectural decisions captured during the GL interview.

    Args:
        topic: Filter by topic (e.g. "staking", "auth", "token"). Omit for all.
    """
    from svk_mcp.tools.docs import get_decisions

    return _dump(get_decisions(settings.project_dir, topic=topic))


@mcp.tool()
async def svk_get_audit(
    skill: str = "sos",
    audit: str | None = None,
    type: Literal["report", "findings", "architecture", "strategies"] = "report",
    subsystem: str | None = None,
    severity: str | None = None,
) -> str:
    """Retrieve SOS/DB audit findings, reports, architecture docs, or strategies.

    Args:
        skill: Audit skill, "sos" (Stronghold of Security) or "db" (Dinh's Bulwark)
        audit: "current" (default), "previous", or a specific archive path
        type: What to retrieve. Defaults to "report"
        subsystem: Filter findings by subsystem (e.g. "tax-program", "staking")
        severity: Filter findings by severity (e.g. "critical", "high")
    """
    from svk_mcp.tools.audit import get_audit

    result = get_audit(
        settings.project_dir,
        skill=skill,
        audit=audit,
        type=type,
        subsystem=subsystem,
        severity=severity,
    )
    return _dump(result)


@mcp.tool()
async def svk_search(
    query: str,
    scope: Literal["docs", "audit", "decisions", "all"] = "all",
) -> str:
    """Full-text search across all SVK artifacts: docs, audit findings, decisions.

    Args:
        query: Search string (case-insensitive, literal)
        scope: Limit to specific artifact types. Defaults to "all"
    """
    from svk_mcp.tools.search import search

    # EmptyQueryError propagates; FastMCP reports it as a tool error
    return _dump(search(settings.project_dir, query, scope))


@mcp.tool()
async def svk_suggest() -> str:
    """Analyze current project state and suggest which SVK skills to run next."""
    from svk_mcp.tools.suggest import suggest

    return _dump(suggest(settings.project_dir))


@mcp.tool()
async def svk_list_knowledge(skill: str | None = None) -> str:
    """List SVK knowledge bases: exploit patterns, domain packs, skill references.

    Returns metadata and structure, not file content.

    Args:
        skill: "stronghold-of-security", "grand-library", "dinhs-bulwark" or "svk". Omit to see all.
    """
    from svk_mcp.tools.knowledge import list_knowledge

    return _dump(list_knowledge(skill=skill))


@mcp.tool()
async def svk_read_knowledge(skill: str, path: str | None = None) -> str:
    """Read a specific SVK knowledge file. Use svk_list_knowledge first to discover files.

    Args:
        skill: Knowledge base to read from
        path: Relative path within the knowledge base. Omit to get the primary index.
    """
    from svk_mcp.tools.knowledge import read_knowledge_file

    return _dump(read_knowledge_file(skill, path=path))


def main():
    """Entry point for the MCP server."""
    # stderr only: stdout carries the MCP protocol
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info("SVK MCP server for %s running on stdio", settings.project_dir)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
