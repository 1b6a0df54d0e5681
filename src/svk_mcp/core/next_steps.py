"""Phase topology of each skill, as suggested next commands.

NEXT_COMMANDS maps a completed phase to the command that starts the
following one. RESUME_COMMANDS maps an in-progress phase to the command
that resumes it. A None command marks the end of a pipeline; DONE_MESSAGES
holds what to say there, or after a completed phase the table does not
list, if anything.
"""

from svk_mcp.models import COMPLETE, IN_PROGRESS

_AUDIT_PHASES = ("scan", "analyze", "strategize", "investigate", "report", "verify")
_BOK_PHASES = ("scan", "analyze", "confirm", "generate", "execute", "report")


def _chain(prefix: str, phases: tuple[str, ...]) -> dict[str, str | None]:
    table: dict[str, str | None] = {}
    for current, following in zip(phases, phases[1:] + (None,)):
        table[current] = f"/{prefix}:{following}" if following else None
    return table


def _resume(prefix: str, phases: tuple[str, ...], suffix: str = "") -> dict[str, str]:
    return {phase: f"/{prefix}:{phase}{suffix}" for phase in phases}


NEXT_COMMANDS: dict[str, dict[str, str | None]] = {
    "grand-library": {
        "survey": "/GL:interview",
        "interview": "/GL:draft",
        "draft": "/GL:reconcile",
        "reconcile": None,
    },
    "stronghold-of-security": _chain("SOS", _AUDIT_PHASES),
    "dinhs-bulwark": _chain("DB", _AUDIT_PHASES),
    "book-of-knowledge": _chain("BOK", _BOK_PHASES),
    "BOK": _chain("BOK", _BOK_PHASES),
}

RESUME_COMMANDS: dict[str, dict[str, str]] = {
    "grand-library": {
        "survey": "/GL:survey",
        "interview": "/GL:interview --resume",
        "draft": "/GL:draft",
        "reconcile": "/GL:reconcile",
    },
    "stronghold-of-security": _resume("SOS", _AUDIT_PHASES, " (auto-resumes)"),
    "dinhs-bulwark": _resume("DB", _AUDIT_PHASES, " (auto-resumes)"),
    "book-of-knowledge": _resume("BOK", _BOK_PHASES),
    "BOK": _resume("BOK", _BOK_PHASES),
}

DONE_MESSAGES: dict[str, str] = {
    "book-of-knowledge": "Verification complete",
    "BOK": "Verification complete",
}


def next_step_hint(skill: str, phase: str, status: str) -> str | None:
    """Suggest the command to run next, or None when there is nothing to suggest."""
    if status == IN_PROGRESS:
        command = RESUME_COMMANDS.get(skill, {}).get(phase)
        return f"Resume: {command}" if command else None

    if status == COMPLETE:
        table = NEXT_COMMANDS.get(skill, {})
        command = table.get(phase)
        if command is None:
            # End of the pipeline, or a phase the table does not know
            return DONE_MESSAGES.get(skill)
        return f"Next: /clear then {command}"

    return None
