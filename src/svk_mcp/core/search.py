"""Full-text search across SVK artifacts."""

import logging
from collections.abc import Iterable
from pathlib import Path

from svk_mcp.config import settings
from svk_mcp.core.collector import collect_files
from svk_mcp.models import FileMatches, SearchMatch, SearchResults, TextResult

logger = logging.getLogger("svk.search")

# Each scope is its own explicit set of roots; "all" is not computed as a union
SCOPE_DIRS: dict[str, tuple[str, ...]] = {
    "docs": (".docs",),
    "audit": (".audit", ".audit-history"),
    "decisions": (".docs/DECISIONS",),
    "all": (".docs", ".audit", ".audit-history", ".svk"),
}

DEFAULT_SCOPE = "all"


class EmptyQueryError(ValueError):
    """Raised when a search query is empty or whitespace only."""


def search_lines(
    lines: Iterable[str],
    query: str,
    max_excerpts: int | None = None,
    context: int | None = None,
) -> list[SearchMatch]:
    """Find lines containing the query (case-insensitive) with surrounding context.

    Stops after `max_excerpts` matches.
    """
    if max_excerpts is None:
        max_excerpts = settings.max_excerpts
    if context is None:
        context = settings.context_lines

    lines = list(lines)
    needle = query.lower()
    matches: list[SearchMatch] = []

    for i, line in enumerate(lines):
        if needle not in line.lower():
            continue
        start = max(0, i - context)
        end = min(len(lines), i + context + 1)
        matches.append(SearchMatch(line=i + 1, excerpt="\n".join(lines[start:end])))
        if len(matches) >= max_excerpts:
            break

    return matches


def search_artifacts(project_dir: Path, query: str, scope: str | None = None) -> SearchResults | TextResult:
    """Search every artifact in the scope's roots for a literal query.

    Raises EmptyQueryError for an empty or whitespace-only query.
    """
    if not query or not query.strip():
        raise EmptyQueryError("Search query is required.")

    scope = scope or DEFAULT_SCOPE
    dirs = SCOPE_DIRS.get(scope)
    if dirs is None:
        return TextResult(
            text=f'Unknown scope "{scope}". Valid: {", ".join(SCOPE_DIRS)}.',
            available=list(SCOPE_DIRS),
        )

    results: list[FileMatches] = []
    files_seen = 0

    for path in collect_files(project_dir / d for d in dirs):
        files_seen += 1
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            logger.debug("Skipping unreadable file: %s", path)
            continue

        matches = search_lines(content.split("\n"), query)
        if matches:
            results.append(FileMatches(file=path.relative_to(project_dir).as_posix(), matches=matches))

    if files_seen == 0:
        return TextResult(text=f'No SVK artifacts found in scope "{scope}".')

    if not results:
        return TextResult(text=f'No results for "{query}" in scope "{scope}".')

    logger.info("Search '%s' (%s): %d files matched", query[:50], scope, len(results))
    return SearchResults(
        query=query,
        scope=scope,
        total_files_matched=len(results),
        results=results,
    )
