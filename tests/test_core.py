"""Core tests for svk-mcp: collector, state, progress, next steps, resolver, findings, search."""

import json
import tempfile
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from svk_mcp.core.collector import DirectoryCollector, collect_files
from svk_mcp.core.findings import filter_findings, load_findings
from svk_mcp.core.next_steps import next_step_hint
from svk_mcp.core.progress import format_progress
from svk_mcp.core.resolver import audit_skill, count_history, resolve
from svk_mcp.core.search import EmptyQueryError, search_artifacts, search_lines
from svk_mcp.core.state import current_phase, infer_phase, scan_skill_states
from svk_mcp.models import ArtifactReference, SearchResults, SkillState, TextResult


def _write(root: Path, rel: str, content: str) -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def _state(skill: str, phases: dict, **extra) -> SkillState:
    return SkillState.from_document({"skill": skill, "phases": phases, **extra})


# ─── Collector ────────────────────────────────────────────────────────────


def test_collector_filters_and_prunes():
    """Only .md/.json files are collected; VCS and dependency dirs are skipped."""
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        _write(root, "a.md", "a")
        _write(root, "b.json", "{}")
        _write(root, "c.txt", "c")
        _write(root, "nested/deep/d.md", "d")
        _write(root, "nested/node_modules/pkg/e.md", "e")
        _write(root, ".git/f.md", "f")

        names = [p.relative_to(root).as_posix() for p in DirectoryCollector(root)]
        assert names == ["a.md", "b.json", "nested/deep/d.md"]
        print(f"  PASS: collected {names}")


def test_collector_missing_root_is_empty():
    with tempfile.TemporaryDirectory() as tmp:
        assert list(DirectoryCollector(Path(tmp) / "nope")) == []
        assert list(collect_files([Path(tmp) / "x", Path(tmp) / "y"])) == []


def test_collector_is_restartable():
    """Each iteration re-reads the tree, so later files show up."""
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        _write(root, "one.md", "1")
        collector = DirectoryCollector(root)
        assert len(list(collector)) == 1
        _write(root, "two.md", "2")
        assert len(list(collector)) == 2


# ─── Phase inference ──────────────────────────────────────────────────────


def test_in_progress_wins_regardless_of_position():
    state = _state("x", {
        "a": {"status": "complete"},
        "b": {"status": "complete"},
        "c": {"status": "in_progress"},
    })
    assert infer_phase(state) == ("c", "in_progress")

    state = _state("x", {
        "a": {"status": "in_progress"},
        "b": {"status": "complete"},
    })
    assert infer_phase(state) == ("a", "in_progress")


def test_last_complete_phase_when_nothing_in_progress():
    state = _state("x", {
        "a": {"status": "complete"},
        "b": {"status": "complete"},
        "c": {"status": "pending"},
    })
    assert infer_phase(state) == ("b", "complete")


def test_all_pending_returns_first_phase():
    state = _state("x", {"survey": {"status": "pending"}, "draft": {}})
    assert infer_phase(state) == ("survey", "pending")


def test_first_in_progress_wins_when_several():
    state = _state("x", {
        "a": {"status": "complete"},
        "b": {"status": "in_progress"},
        "c": {"status": "in_progress"},
    })
    assert infer_phase(state) == ("b", "in_progress")


def test_bare_string_phase_status():
    state = _state("x", {"scan": "complete", "analyze": "pending"})
    assert infer_phase(state) == ("scan", "complete")


def test_state_extras_and_updated_fallback():
    state = SkillState.from_document({
        "skill": "grand-library",
        "version": 2,
        "project_name": "amm",
        "last_updated": "2026-02-01T10:00:00Z",
        "phases": {"survey": {"status": "complete"}},
    })
    assert state.version == "2"
    assert state.updated == "2026-02-01T10:00:00Z"
    assert state.extra == {"project_name": "amm"}


# ─── Progress formatting ──────────────────────────────────────────────────


def test_grand_library_progress():
    state = _state("grand-library", {
        "survey": {"status": "complete"},
        "interview": {"status": "in_progress", "topics_completed": 3, "topics_total": 8},
    }, project_name="dex")
    summary = current_phase(state)
    assert summary.progress == "3/8 topics"
    assert summary.details["project_name"] == "dex"
    assert summary.next_step == "Resume: /GL:interview --resume"

    state = _state("grand-library", {
        "survey": {"status": "complete"},
        "interview": {"status": "complete"},
        "draft": {"status": "in_progress", "current_wave": 2, "waves_total": 5},
    })
    assert current_phase(state).progress == "wave 2/5"


def test_audit_progress():
    state = _state("stronghold-of-security", {
        "scan": {"status": "complete"},
        "investigate": {"status": "in_progress", "batches_completed": 4, "batches_total": 10},
    }, audit_number=3, config={"tier": "deep"})
    summary = current_phase(state)
    assert summary.progress == "4/10 batches"
    assert summary.details == {"audit_number": 3, "tier": "deep"}
    assert summary.next_step == "Resume: /SOS:investigate (auto-resumes)"


def test_verification_progress_counters():
    state = _state("book-of-knowledge", {
        "execute": {"status": "complete", "proven": 5, "failed": 1},
        "report": {"status": "pending"},
    }, kani_available=True)
    summary = current_phase(state)
    assert summary.progress == {"proven": 5, "stress_tested": 0, "failed": 1, "inconclusive": 0}
    assert summary.details["kani_available"] is True
    assert summary.details["degraded_mode"] is False


def test_unknown_skill_progress_never_raises():
    state = _state("future-skill", {"alpha": {"status": "in_progress", "weird": [1, 2]}}, config="bad")
    result = format_progress(state, "alpha", "in_progress")
    assert result.progress is None
    assert result.details == {}


def test_audit_formatter_tolerates_non_dict_config():
    state = _state("dinhs-bulwark", {"scan": {"status": "complete"}}, config="not-a-dict")
    assert current_phase(state).details["tier"] == "standard"


# ─── Next steps ───────────────────────────────────────────────────────────


def test_next_step_after_complete():
    assert next_step_hint("grand-library", "survey", "complete") == "Next: /clear then /GL:interview"
    assert next_step_hint("stronghold-of-security", "report", "complete") == "Next: /clear then /SOS:verify"
    assert next_step_hint("dinhs-bulwark", "scan", "complete") == "Next: /clear then /DB:analyze"


def test_next_step_resume():
    assert next_step_hint("dinhs-bulwark", "scan", "in_progress") == "Resume: /DB:scan (auto-resumes)"
    assert next_step_hint("BOK", "generate", "in_progress") == "Resume: /BOK:generate"


def test_next_step_end_of_pipeline_and_unknowns():
    assert next_step_hint("stronghold-of-security", "verify", "complete") is None
    assert next_step_hint("book-of-knowledge", "report", "complete") == "Verification complete"
    assert next_step_hint("grand-library", "nonexistent", "complete") is None
    assert next_step_hint("BOK", "custom-phase", "complete") == "Verification complete"
    assert next_step_hint("stronghold-of-security", "custom-phase", "complete") is None
    assert next_step_hint("unknown", "scan", "in_progress") is None
    assert next_step_hint("grand-library", "survey", "pending") is None


# ─── State scanning ───────────────────────────────────────────────────────


def test_scan_skips_corrupt_and_foreign_files():
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        _write(root, ".docs/STATE.json", '{"skill": "grand-lib')
        _write(root, ".vscode/STATE.json", json.dumps({"editor": True}))
        _write(root, ".empty/STATE.json", json.dumps({"skill": "x", "phases": {}}))
        _write(root, "visible/STATE.json", json.dumps({"skill": "y", "phases": {"a": {}}}))
        _write(root, ".audit/STATE.json", json.dumps({
            "skill": "stronghold-of-security",
            "phases": {"scan": {"status": "complete"}},
        }))

        states = scan_skill_states(root)
        assert [s.skill for s in states] == ["stronghold-of-security"]
        assert states[0].state_dir == ".audit"


def test_scan_missing_project_dir():
    with tempfile.TemporaryDirectory() as tmp:
        assert scan_skill_states(Path(tmp) / "missing") == []


# ─── Resolver ─────────────────────────────────────────────────────────────


def test_resolve_current_is_stable_and_unchecked():
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        ref = ArtifactReference.parse("sos", "current")
        first = resolve(root, ref)
        assert first == root / ".audit"
        assert not first.exists()
        assert resolve(root, ref) == first
        assert resolve(root, ArtifactReference.parse("sos", None)) == first


def test_resolve_previous_picks_greatest_name():
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        for name in ("2026-01-01", "2026-02-15", "2025-12-31"):
            (root / ".audit-history" / name).mkdir(parents=True)
        _write(root, ".audit-history/2027-notes.md", "not a directory")

        resolved = resolve(root, ArtifactReference.parse("sos", "previous"))
        assert resolved == root / ".audit-history" / "2026-02-15"


def test_resolve_previous_without_history():
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        assert resolve(root, ArtifactReference.parse("sos", "previous")) is None
        (root / ".bulwark-history").mkdir()
        assert resolve(root, ArtifactReference.parse("db", "previous")) is None


def test_resolve_explicit_path_verbatim():
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        ref = ArtifactReference.parse("sos", ".audit-history/2025-06-01_audit-1")
        assert ref.mode == "explicit"
        assert resolve(root, ref) == root / ".audit-history" / "2025-06-01_audit-1"


def test_resolve_absolute_explicit_path_stays_under_root():
    with tempfile.TemporaryDirectory() as tmp, tempfile.TemporaryDirectory() as other:
        root = Path(tmp)
        resolved = resolve(root, ArtifactReference.parse("sos", other))
        assert resolved.is_relative_to(root)
        assert resolved == root / Path(other).relative_to(Path(other).anchor)


def test_audit_skill_aliases():
    assert audit_skill("dinhs-bulwark").current_root == ".bulwark"
    assert audit_skill("db").history_root == ".bulwark-history"
    assert audit_skill(None).id == "sos"
    assert audit_skill("audit-skill").id == "sos"


def test_count_history_per_root():
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        (root / ".audit-history" / "a").mkdir(parents=True)
        (root / ".audit-history" / "b").mkdir(parents=True)
        assert count_history(root) == {".audit-history": 2, ".bulwark-history": 0}


# ─── Findings ─────────────────────────────────────────────────────────────


def _findings_dir(root: Path) -> Path:
    audit = root / ".audit"
    _write(audit, "findings/H001.md", "# Reentrancy\nSubsystem: AMM\nSeverity: High\n")
    _write(audit, "findings/H002.md", "# Rounding\nSubsystem: amm\nSeverity: Low\n")
    _write(audit, "findings/H003.md", "# Overflow\nSubsystem: staking\nSeverity: HIGH\n")
    _write(audit, "findings/notes.txt", "AMM HIGH")
    return audit


def test_findings_filter_conjunction():
    with tempfile.TemporaryDirectory() as tmp:
        findings = load_findings(_findings_dir(Path(tmp)))
        assert [f.file for f in findings] == ["H001.md", "H002.md", "H003.md"]

        both = filter_findings(findings, subsystem="amm", severity="high")
        assert [f.file for f in both] == ["H001.md"]

        assert [f.file for f in filter_findings(findings, subsystem="AMM")] == ["H001.md", "H002.md"]
        assert [f.file for f in filter_findings(findings, severity="high")] == ["H001.md", "H003.md"]
        assert filter_findings(findings) == findings


def test_findings_missing_directory():
    with tempfile.TemporaryDirectory() as tmp:
        assert load_findings(Path(tmp) / ".audit") == []


# ─── Search ───────────────────────────────────────────────────────────────


def test_search_lines_context_and_cap():
    lines = ["match 1", "b", "c", "d", "match 5", "match 6", "match 7", "match 8"]
    matches = search_lines(lines, "MATCH", max_excerpts=3, context=2)
    assert [m.line for m in matches] == [1, 5, 6]
    assert matches[0].excerpt == "match 1\nb\nc"
    assert matches[1].excerpt == "c\nd\nmatch 5\nmatch 6\nmatch 7"


def test_search_lines_clipped_at_end():
    matches = search_lines(["a", "b", "last hit"], "hit", max_excerpts=3, context=2)
    assert matches[0].excerpt == "a\nb\nlast hit"


@pytest.mark.parametrize("query", ["", "   "])
def test_search_rejects_empty_query(query):
    with tempfile.TemporaryDirectory() as tmp:
        with pytest.raises(EmptyQueryError):
            search_artifacts(Path(tmp), query)


def test_search_scope_is_not_widened():
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        _write(root, ".docs/architecture.md", "The oracle feeds prices.\n")
        _write(root, ".docs/DECISIONS/auth.md", "We chose multisig.\n")

        result = search_artifacts(root, "oracle", "decisions")
        assert isinstance(result, TextResult)
        assert "No results" in result.text

        result = search_artifacts(root, "oracle", "docs")
        assert isinstance(result, SearchResults)
        assert result.results[0].file == ".docs/architecture.md"


def test_search_groups_by_file_and_skips_unreadable():
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        _write(root, ".audit/FINAL_REPORT.md", "intro\nOracle manipulation\noutro\n")
        _write(root, ".svk/notes.json", '{"note": "oracle"}')
        (root / ".audit" / "binary.md").write_bytes(b"\xff\xfe oracle \xff")

        result = search_artifacts(root, "ORACLE", "all")
        assert isinstance(result, SearchResults)
        files = [r.file for r in result.results]
        assert files == [".audit/FINAL_REPORT.md", ".svk/notes.json"]
        assert result.total_files_matched == 2
        assert result.results[0].matches[0].line == 2


def test_search_no_artifacts_and_unknown_scope():
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        result = search_artifacts(root, "anything", "audit")
        assert isinstance(result, TextResult)
        assert "No SVK artifacts found" in result.text

        result = search_artifacts(root, "anything", "everything")
        assert isinstance(result, TextResult)
        assert result.available == ["docs", "audit", "decisions", "all"]


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
