"""Per-skill progress formatting.

Each skill surfaces different counters from its STATE.json. Formatters are
registered by skill id; adding a skill is an entry in PROGRESS_FORMATTERS.
Unknown skills get DefaultFormatter, which surfaces nothing.
"""

from typing import Any, Protocol

from svk_mcp.models import COMPLETE, IN_PROGRESS, SkillProgress, SkillState


class ProgressFormatter(Protocol):
    def format(self, state: SkillState, phase: str, status: str) -> SkillProgress: ...


def _counter(state: SkillState, phase: str, name: str) -> Any:
    record = state.phases.get(phase)
    return record.counter(name) if record is not None else 0


def _tier(state: SkillState) -> str:
    config = state.extra.get("config")
    if isinstance(config, dict):
        return config.get("tier") or "standard"
    return "standard"


class DefaultFormatter:
    def format(self, state: SkillState, phase: str, status: str) -> SkillProgress:
        return SkillProgress()


class GrandLibraryFormatter:
    """Docs generator: topics during interview, waves during draft."""

    def format(self, state: SkillState, phase: str, status: str) -> SkillProgress:
        result = SkillProgress(details={"project_name": state.extra.get("project_name") or "unnamed"})
        if status != IN_PROGRESS:
            return result

        if phase == "interview":
            done = _counter(state, phase, "topics_completed")
            total = _counter(state, phase, "topics_total")
            result.progress = f"{done}/{total} topics"
        elif phase == "draft":
            wave = _counter(state, phase, "current_wave")
            total = _counter(state, phase, "waves_total")
            result.progress = f"wave {wave}/{total}"
        return result


class AuditFormatter:
    """Security auditors (SOS, DB): batch counter during investigate."""

    def format(self, state: SkillState, phase: str, status: str) -> SkillProgress:
        result = SkillProgress(details={
            "audit_number": state.extra.get("audit_number") or 1,
            "tier": _tier(state),
        })
        if phase == "investigate" and status == IN_PROGRESS:
            done = _counter(state, phase, "batches_completed")
            total = _counter(state, phase, "batches_total")
            result.progress = f"{done}/{total} batches"
        return result


class VerificationFormatter:
    """Book of Knowledge: named proof counters during and after execute."""

    COUNTERS = ("proven", "stress_tested", "failed", "inconclusive")

    def format(self, state: SkillState, phase: str, status: str) -> SkillProgress:
        result = SkillProgress(details={
            "kani_available": bool(state.extra.get("kani_available", False)),
            "degraded_mode": bool(state.extra.get("degraded_mode", False)),
        })
        if phase == "execute" and status in (IN_PROGRESS, COMPLETE):
            result.progress = {name: _counter(state, phase, name) for name in self.COUNTERS}
        if phase == "analyze" and status == COMPLETE:
            result.details["invariants_proposed"] = _counter(state, phase, "invariants_proposed")
        return result


_AUDIT = AuditFormatter()
_VERIFICATION = VerificationFormatter()

PROGRESS_FORMATTERS: dict[str, ProgressFormatter] = {
    "grand-library": GrandLibraryFormatter(),
    "stronghold-of-security": _AUDIT,
    "dinhs-bulwark": _AUDIT,
    "book-of-knowledge": _VERIFICATION,
    "BOK": _VERIFICATION,
}

DEFAULT_FORMATTER = DefaultFormatter()


def format_progress(state: SkillState, phase: str, status: str) -> SkillProgress:
    """Format skill-specific progress; never raises for unknown skills."""
    formatter = PROGRESS_FORMATTERS.get(state.skill, DEFAULT_FORMATTER)
    return formatter.format(state, phase, status)
