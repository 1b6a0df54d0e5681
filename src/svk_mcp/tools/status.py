"""Project status tool: where every SVK skill stands."""

from pathlib import Path

from svk_mcp.core.resolver import count_history
from svk_mcp.core.state import current_phase, scan_skill_states
from svk_mcp.models import Progress, ProjectStatus, SkillState, SkillStatus, TextResult


def skill_status(state: SkillState) -> SkillStatus:
    """Status record for one skill."""
    summary = current_phase(state)
    return SkillStatus(
        skill=state.skill,
        phase=summary.phase,
        status=summary.status,
        updated=(state.updated or "unknown").split("T")[0],
        progress=summary.progress,
        next=summary.next_step,
        details=summary.details,
    )


def _progress_text(progress: Progress) -> str:
    if isinstance(progress, dict):
        return ", ".join(f"{v} {k.replace('_', ' ')}" for k, v in progress.items())
    return str(progress)


def format_summary(statuses: list[SkillStatus], history: dict[str, int]) -> str:
    """Human-readable status block, one entry per skill."""
    lines = []
    for s in statuses:
        line = f"▸ {s.skill} — {s.phase} ({s.status})"
        if s.progress:
            line += f" — {_progress_text(s.progress)}"
        line += f" — updated {s.updated}"
        if s.next:
            line += f"\n  {s.next}"
        lines.append(line)

    for root, count in history.items():
        if count > 0:
            lines.append(f"\nHistory: {count} previous audit(s) in {root}/")

    return "\n".join(lines)


def project_status(project_dir: Path) -> ProjectStatus | TextResult:
    """Current phase, progress and next step of every skill with state in the project.

    Args:
        project_dir: Project root holding the skills' hidden state directories.

    Returns:
        ProjectStatus, or a TextResult when no SVK state or history exists.
    """
    states = scan_skill_states(project_dir)
    history = count_history(project_dir)
    history_total = sum(history.values())

    if not states and history_total == 0:
        return TextResult(text="No SVK state found in this project.")

    statuses = [skill_status(s) for s in states]
    return ProjectStatus(
        skills=statuses,
        history=history,
        audit_history_count=history_total,
        summary=format_summary(statuses, history),
    )
