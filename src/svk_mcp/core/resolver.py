"""Resolution of audit artifact directories (current, previous, explicit)."""

import logging
from pathlib import Path

from pydantic import BaseModel

from svk_mcp.models import ArtifactReference

logger = logging.getLogger("svk.resolver")


class AuditSkill(BaseModel):
    """Where an audit skill keeps its current run and its archived runs."""

    id: str
    current_root: str
    history_root: str
    start_command: str


AUDIT_SKILLS: dict[str, AuditSkill] = {
    "sos": AuditSkill(id="sos", current_root=".audit", history_root=".audit-history", start_command="/SOS:scan"),
    "db": AuditSkill(id="db", current_root=".bulwark", history_root=".bulwark-history", start_command="/DB:scan"),
}

SKILL_ALIASES = {
    "stronghold-of-security": "sos",
    "dinhs-bulwark": "db",
}

DEFAULT_SKILL = "sos"


def audit_skill(skill: str | None) -> AuditSkill:
    """Look up an audit skill by short id or full name; unknown ids fall back to SOS."""
    key = SKILL_ALIASES.get(skill or "", skill or DEFAULT_SKILL)
    if key not in AUDIT_SKILLS:
        logger.debug("Unknown audit skill '%s', using '%s'", skill, DEFAULT_SKILL)
        key = DEFAULT_SKILL
    return AUDIT_SKILLS[key]


def list_snapshots(history_dir: Path) -> list[str]:
    """Names of the snapshot directories under a history root, sorted."""
    try:
        return sorted(p.name for p in history_dir.iterdir() if p.is_dir())
    except (FileNotFoundError, NotADirectoryError):
        return []


def resolve(project_dir: Path, reference: ArtifactReference) -> Path | None:
    """Map a reference to a concrete artifact directory.

    "current" and explicit paths are returned without checking they exist;
    the read that follows does. An absolute explicit path loses its anchor
    and is joined to the project root like a relative one. "previous" is the snapshot whose name sorts
    last, or None when there is no history.
    """
    skill = audit_skill(reference.skill)

    if reference.mode == "current":
        return project_dir / skill.current_root

    if reference.mode == "previous":
        history_dir = project_dir / skill.history_root
        snapshots = list_snapshots(history_dir)
        if not snapshots:
            return None
        return history_dir / snapshots[-1]

    explicit = Path(reference.explicit_path)
    if explicit.is_absolute():
        # Explicit paths are always read under the project root
        explicit = explicit.relative_to(explicit.anchor)
    return project_dir / explicit


def count_history(project_dir: Path) -> dict[str, int]:
    """Number of archived runs under each audit skill's history root."""
    return {
        skill.history_root: len(list_snapshots(project_dir / skill.history_root))
        for skill in AUDIT_SKILLS.values()
    }
