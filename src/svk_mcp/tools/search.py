"""Search tool: full-text search across SVK artifacts."""

from pathlib import Path

from svk_mcp.core.search import search_artifacts
from svk_mcp.models import SearchResults, TextResult


def search(project_dir: Path, query: str, scope: str | None = None) -> SearchResults | TextResult:
    """Search docs, audits, decisions and knowledge for a literal string.

    Args:
        project_dir: Project root.
        query: Case-insensitive substring to look for. Must not be blank.
        scope: "docs", "audit", "decisions" or "all" (default).

    Returns:
        Matches grouped by file, each with its line number and a short excerpt.

    Raises:
        EmptyQueryError: if the query is empty or whitespace only.
    """
    return search_artifacts(project_dir, query, scope)
