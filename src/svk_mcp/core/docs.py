"""Access to Grand Library documents and interview decisions."""

import logging
import re
from pathlib import Path

import yaml

from svk_mcp.models import DocContent, DocSummary

logger = logging.getLogger("svk.docs")

DOCS_DIR = ".docs"
DECISIONS_DIR = "DECISIONS"

_FRONTMATTER = re.compile(r"^---\s*\n(.*?)\n---\s*\n?", re.DOTALL)


def list_markdown(directory: Path) -> list[Path] | None:
    """Markdown files directly inside a directory, or None if it does not exist."""
    try:
        return sorted(p for p in directory.iterdir() if p.suffix == ".md" and p.is_file())
    except (FileNotFoundError, NotADirectoryError):
        return None


def describe(content: str) -> str:
    """One-line description of a document.

    Uses the YAML front matter `description` (or `title`) when present,
    otherwise the first non-empty line with any heading marks removed.
    """
    body = content
    fm_match = _FRONTMATTER.match(content)
    if fm_match:
        body = content[fm_match.end():]
        try:
            meta = yaml.safe_load(fm_match.group(1))
        except yaml.YAMLError as e:
            logger.debug("Ignoring invalid front matter: %s", e)
            meta = None
        if isinstance(meta, dict):
            desc = meta.get("description") or meta.get("title")
            if desc:
                return str(desc).strip()

    first = next((line for line in body.split("\n") if line.strip()), "")
    return re.sub(r"^#+\s*", "", first).strip()


def _relative(project_dir: Path, path: Path) -> str:
    return path.relative_to(project_dir).as_posix()


def list_docs(project_dir: Path) -> list[DocSummary] | None:
    """Summaries of every GL doc, or None when no docs directory exists."""
    files = list_markdown(project_dir / DOCS_DIR)
    if files is None:
        return None

    docs: list[DocSummary] = []
    for path in files:
        try:
            description = describe(path.read_text(encoding="utf-8"))
        except (FileNotFoundError, UnicodeDecodeError):
            description = ""
        docs.append(DocSummary(name=path.stem, path=_relative(project_dir, path), description=description))
    return docs


def find_doc(files: list[Path], name: str) -> Path | None:
    """Exact (case-insensitive) stem match first, then partial filename match."""
    wanted = name.lower()
    for path in files:
        if path.stem.lower() == wanted:
            return path
    for path in files:
        if wanted in path.name.lower():
            return path
    return None


def read_doc(project_dir: Path, path: Path) -> DocContent | None:
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    return DocContent(name=path.stem, path=_relative(project_dir, path), content=content)


def load_decisions(project_dir: Path) -> list[DocContent] | None:
    """Every decision record, or None when the decisions directory is absent."""
    files = list_markdown(project_dir / DOCS_DIR / DECISIONS_DIR)
    if files is None:
        return None

    decisions: list[DocContent] = []
    for path in files:
        try:
            doc = read_doc(project_dir, path)
        except UnicodeDecodeError as e:
            logger.warning("Skipping undecodable decision %s: %s", path.name, e)
            continue
        if doc is not None:
            decisions.append(doc)
    return decisions


def filter_decisions(decisions: list[DocContent], topic: str) -> list[DocContent]:
    """Decisions whose name or content mentions the topic (case-insensitive)."""
    needle = topic.lower()
    return [d for d in decisions if needle in d.name.lower() or needle in d.content.lower()]
