"""Registry of SVK knowledge bases and read access to their files.

Roots are fixed per knowledge base; the content below them is enumerated
on every call.
"""

import logging
from pathlib import Path

from svk_mcp.config import settings
from svk_mcp.models import (
    DomainPack,
    KnowledgeBaseSummary,
    KnowledgeCategory,
    KnowledgeDetail,
    KnowledgeFile,
    KnowledgeSource,
)

logger = logging.getLogger("svk.knowledge")

KNOWLEDGE_SOURCES: list[KnowledgeSource] = [
    KnowledgeSource(
        id="stronghold-of-security",
        name="Stronghold of Security (SOS)",
        description="128 exploit patterns for Solana security auditing",
        base_path="stronghold-of-security/knowledge-base",
        primary_index="PATTERNS_INDEX.md",
    ),
    KnowledgeSource(
        id="grand-library",
        name="Grand Library (GL)",
        description="Documentation resources, domain packs, and templates",
        base_path="grand-library/resources",
        primary_index="INDEX.md",
    ),
    KnowledgeSource(
        id="dinhs-bulwark",
        name="Dinh's Bulwark (DB)",
        description="312 off-chain exploit patterns and 168 AI-generated code pitfalls for off-chain security auditing",
        base_path="dinhs-bulwark/knowledge-base",
        primary_index="PATTERNS_INDEX.md",
    ),
    KnowledgeSource(
        id="svk",
        name="SVK Core",
        description="Skill foundation patterns, vision, and goals",
        base_path="Documents",
        static_files=["Skill_Foundation.md", "VISION.md", "Goals.md"],
    ),
]

DOMAIN_PACKS_DIR = "domain-packs"


class InvalidKnowledgePath(ValueError):
    """Raised for paths that escape a knowledge base."""


def get_source(skill: str) -> KnowledgeSource | None:
    return next((s for s in KNOWLEDGE_SOURCES if s.id == skill), None)


def source_ids() -> list[str]:
    return [s.id for s in KNOWLEDGE_SOURCES]


def _base(source: KnowledgeSource) -> Path:
    return (settings.svk_repo_dir / source.base_path).resolve()


def _subdirs(directory: Path) -> list[str]:
    try:
        return sorted(p.name for p in directory.iterdir() if p.is_dir())
    except (FileNotFoundError, NotADirectoryError):
        return []


def _md_files(directory: Path) -> list[str]:
    try:
        return sorted(p.name for p in directory.iterdir() if p.is_file() and p.suffix == ".md")
    except (FileNotFoundError, NotADirectoryError):
        return []


def _count_md(directory: Path) -> int:
    if not directory.is_dir():
        return 0
    return sum(1 for p in directory.rglob("*.md") if p.is_file())


def _existing_static_files(source: KnowledgeSource) -> list[str]:
    base = _base(source)
    return [f for f in source.static_files or [] if (base / f).is_file()]


def _domain_packs(base: Path, check_index: bool) -> list[DomainPack] | None:
    packs_dir = base / DOMAIN_PACKS_DIR
    names = _subdirs(packs_dir)
    if not names:
        return None

    packs = []
    for name in names:
        index = f"{DOMAIN_PACKS_DIR}/{name}/INDEX.md"
        if check_index and not (packs_dir / name / "INDEX.md").is_file():
            index = None
        packs.append(DomainPack(name=name, index=index, file_count=_count_md(packs_dir / name)))
    return packs


def summarize(source: KnowledgeSource) -> KnowledgeBaseSummary:
    """Light overview entry for one knowledge base."""
    if source.static_files is not None:
        return KnowledgeBaseSummary(
            skill=source.id,
            name=source.name,
            description=source.description,
            files=_existing_static_files(source),
        )

    base = _base(source)
    return KnowledgeBaseSummary(
        skill=source.id,
        name=source.name,
        description=source.description,
        primary_index=source.primary_index,
        categories=_subdirs(base),
        file_count=_count_md(base),
        domain_packs=_domain_packs(base, check_index=False),
    )


def enumerate_detailed(source: KnowledgeSource) -> KnowledgeDetail:
    """Category breakdown of one knowledge base with file counts."""
    if source.static_files is not None:
        files = _existing_static_files(source)
        return KnowledgeDetail(
            skill=source.id,
            name=source.name,
            primary_index=source.primary_index,
            files=files,
            total_files=len(files),
        )

    base = _base(source)
    categories: dict[str, KnowledgeCategory] = {}
    for name in _subdirs(base):
        category_dir = base / name
        subdirs = _subdirs(category_dir)
        if subdirs:
            categories[name] = KnowledgeCategory(subcategories=subdirs, file_count=_count_md(category_dir))
        else:
            files = _md_files(category_dir)
            categories[name] = KnowledgeCategory(files=files, file_count=len(files))

    return KnowledgeDetail(
        skill=source.id,
        name=source.name,
        primary_index=source.primary_index,
        categories=categories,
        total_files=_count_md(base),
        domain_packs=_domain_packs(base, check_index=True),
    )


def knowledge_path(source: KnowledgeSource, relative_path: str) -> Path:
    """Absolute path of a file inside a knowledge base.

    Raises InvalidKnowledgePath when the path leaves the base directory.
    """
    base = _base(source)
    target = (base / relative_path).resolve()
    if not target.is_relative_to(base):
        raise InvalidKnowledgePath(relative_path)
    return target


def read_knowledge(source: KnowledgeSource, relative_path: str) -> KnowledgeFile | None:
    """Read one knowledge file, or None when it does not exist."""
    target = knowledge_path(source, relative_path)
    try:
        content = target.read_text(encoding="utf-8")
    except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
        return None
    logger.debug("Read knowledge file %s/%s", source.id, relative_path)
    return KnowledgeFile(
        skill=source.id,
        path=target.relative_to(_base(source)).as_posix(),
        content=content,
    )
