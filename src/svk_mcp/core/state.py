"""Discovery and normalization of per-skill STATE.json documents."""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from svk_mcp.core.next_steps import next_step_hint
from svk_mcp.core.progress import format_progress
from svk_mcp.models import COMPLETE, IN_PROGRESS, PENDING, CurrentPhaseSummary, SkillState

logger = logging.getLogger("svk.state")

STATE_FILE = "STATE.json"


def scan_skill_states(project_dir: Path) -> list[SkillState]:
    """Load every `.*/STATE.json` in the project that declares a skill.

    A corrupt document is logged and skipped so it cannot hide the status
    of the other skills. A missing project directory yields no states.
    """
    try:
        candidates = sorted(
            p for p in project_dir.iterdir() if p.name.startswith(".") and p.is_dir()
        )
    except (FileNotFoundError, NotADirectoryError):
        return []

    states: list[SkillState] = []
    for state_dir in candidates:
        state = _load_state(state_dir / STATE_FILE)
        if state is not None:
            states.append(state)
    return states


def _load_state(path: Path) -> SkillState | None:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (FileNotFoundError, NotADirectoryError, IsADirectoryError):
        return None
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("Skipping unreadable state file %s: %s", path, e)
        return None

    if not isinstance(raw, dict) or not raw.get("skill"):
        # Not an SVK state file
        return None

    try:
        return SkillState.from_document(raw, state_dir=path.parent.name)
    except ValidationError as e:
        logger.warning(
            "Skipping malformed state file %s (%d errors)", path, e.error_count()
        )
        return None


def infer_phase(state: SkillState) -> tuple[str, str]:
    """Reduce the phase map to (phase, status).

    The first in-progress phase wins; otherwise the last complete phase in
    declared order; otherwise the first phase, pending.
    """
    last_complete = None
    for name, record in state.phases.items():
        if record.status == IN_PROGRESS:
            return name, IN_PROGRESS
        if record.status == COMPLETE:
            last_complete = name

    if last_complete is not None:
        return last_complete, COMPLETE
    return next(iter(state.phases)), PENDING


def current_phase(state: SkillState) -> CurrentPhaseSummary:
    """Current phase with its progress text and next-step hint."""
    phase, status = infer_phase(state)
    progress = format_progress(state, phase, status)
    return CurrentPhaseSummary(
        phase=phase,
        status=status,
        progress=progress.progress,
        next_step=next_step_hint(state.skill, phase, status),
        details=progress.details,
    )
