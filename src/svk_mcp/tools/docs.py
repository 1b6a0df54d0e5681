"""Docs tools: Grand Library documents and architectural decisions."""

from pathlib import Path

from svk_mcp.core.docs import (
    DECISIONS_DIR,
    DOCS_DIR,
    filter_decisions,
    find_doc,
    list_docs,
    list_markdown,
    load_decisions,
    read_doc,
)
from svk_mcp.models import DecisionsResult, DocContent, DocListing, TextResult

NO_DOCS = "No GL documentation found. Run /GL:survey to generate docs."
NO_DECISIONS = "No decisions found. Decisions are captured during /GL:interview."


def get_doc(project_dir: Path, name: str | None = None) -> DocListing | DocContent | TextResult:
    """Fetch a GL doc by exact or partial name, or list every doc when no name is given."""
    if not name:
        docs = list_docs(project_dir)
        if docs is None:
            return TextResult(text=NO_DOCS)
        return DocListing(documents=docs)

    files = list_markdown(project_dir / DOCS_DIR)
    if files is None:
        return TextResult(text=NO_DOCS)

    match = find_doc(files, name)
    try:
        doc = read_doc(project_dir, match) if match else None
    except UnicodeDecodeError:
        return TextResult(text=f'Document "{match.stem}" is not valid UTF-8 text.')
    if doc is None:
        return TextResult(
            text=f'No document matching "{name}" found.',
            available=[f.stem for f in files],
        )
    return doc


def get_decisions(project_dir: Path, topic: str | None = None) -> DecisionsResult | TextResult:
    """Architectural decisions from the GL interview, optionally filtered by topic."""
    decisions = load_decisions(project_dir)
    if not decisions:
        return TextResult(text=NO_DECISIONS)

    if topic:
        filtered = filter_decisions(decisions, topic)
        if not filtered:
            return TextResult(
                text=f'No decisions matching topic "{topic}" in {DOCS_DIR}/{DECISIONS_DIR}.',
                available=[d.name for d in decisions],
            )
        return DecisionsResult(decisions=filtered)

    return DecisionsResult(decisions=decisions)
