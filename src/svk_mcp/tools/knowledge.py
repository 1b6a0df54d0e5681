"""Knowledge tools: browse and read SVK knowledge bases."""

from svk_mcp.core.knowledge import (
    KNOWLEDGE_SOURCES,
    InvalidKnowledgePath,
    enumerate_detailed,
    get_source,
    read_knowledge,
    source_ids,
    summarize,
)
from svk_mcp.models import KnowledgeDetail, KnowledgeFile, KnowledgeOverview, TextResult


def list_knowledge(skill: str | None = None) -> KnowledgeOverview | KnowledgeDetail | TextResult:
    """Overview of all knowledge bases, or the detailed layout of one."""
    if not skill:
        return KnowledgeOverview(knowledge_bases=[summarize(s) for s in KNOWLEDGE_SOURCES])

    source = get_source(skill)
    if source is None:
        return TextResult(text=f"Unknown knowledge base: {skill}", available=source_ids())
    return enumerate_detailed(source)


def read_knowledge_file(skill: str, path: str | None = None) -> KnowledgeFile | TextResult:
    """Read a knowledge file; without a path, the base's primary index."""
    source = get_source(skill)
    if source is None:
        return TextResult(text=f"Unknown knowledge base: {skill}", available=source_ids())

    if not path:
        if not source.primary_index:
            return TextResult(
                text=f"{source.name} has no primary index. Specify a file path.",
                available=source.static_files or [],
            )
        path = source.primary_index

    try:
        result = read_knowledge(source, path)
    except InvalidKnowledgePath:
        return TextResult(text="Invalid path")

    if result is None:
        return TextResult(text=f"File not found: {path}. Use svk_list_knowledge to browse available files.")
    return result
