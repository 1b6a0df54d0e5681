"""Audit tool: reports, architecture, strategies and findings of SOS/DB audits."""

import logging
from pathlib import Path

from svk_mcp.core.findings import filter_findings, load_findings
from svk_mcp.core.resolver import audit_skill, resolve
from svk_mcp.models import ArtifactReference, AuditDocument, FindingsResult, TextResult

logger = logging.getLogger("svk.audit")

AUDIT_DOCUMENTS = {
    "report": "FINAL_REPORT.md",
    "architecture": "ARCHITECTURE.md",
    "strategies": "STRATEGIES.md",
}

AUDIT_TYPES = (*AUDIT_DOCUMENTS, "findings")


def _read_document(project_dir: Path, audit_dir: Path, doc_type: str) -> AuditDocument | TextResult:
    path = audit_dir / AUDIT_DOCUMENTS[doc_type]
    try:
        content = path.read_text(encoding="utf-8")
    except (FileNotFoundError, NotADirectoryError, IsADirectoryError):
        if audit_dir.is_dir():
            return TextResult(
                text=f"No {doc_type} document found in {audit_dir.name}/ yet. "
                "The audit may not have reached that phase."
            )
        return TextResult(text=f"Audit directory {audit_dir.name}/ does not exist.")
    except UnicodeDecodeError as e:
        logger.warning("Skipping undecodable audit document %s: %s", path, e)
        return TextResult(text=f"{path.name} in {audit_dir.name}/ is not valid UTF-8 text.")

    try:
        rel = path.relative_to(project_dir).as_posix()
    except ValueError:
        rel = str(path)
    return AuditDocument(type=doc_type, path=rel, content=content)


def get_audit(
    project_dir: Path,
    skill: str | None = None,
    audit: str | None = None,
    type: str | None = None,
    subsystem: str | None = None,
    severity: str | None = None,
) -> AuditDocument | FindingsResult | TextResult:
    """Retrieve a document or the filtered findings of an audit run.

    Args:
        project_dir: Project root.
        skill: Audit skill, "sos" (default) or "db".
        audit: "current" (default), "previous", or a path relative to the project.
        type: "report" (default), "findings", "architecture" or "strategies".
        subsystem: Keep findings mentioning this subsystem.
        severity: Keep findings mentioning this severity.
    """
    spec = audit_skill(skill)
    reference = ArtifactReference.parse(spec.id, audit)
    audit_dir = resolve(project_dir, reference)

    if audit_dir is None:
        return TextResult(
            text=f"No {spec.id} audit found. Run {spec.start_command} to start a security audit."
        )

    doc_type = type or "report"
    if doc_type == "findings":
        findings = filter_findings(load_findings(audit_dir), subsystem=subsystem, severity=severity)
        logger.info("Findings in %s: %d after filters", audit_dir.name, len(findings))
        return FindingsResult(count=len(findings), findings=findings)

    if doc_type not in AUDIT_DOCUMENTS:
        return TextResult(
            text=f'Unknown audit type "{doc_type}". Valid: {", ".join(AUDIT_TYPES)}.',
            available=list(AUDIT_TYPES),
        )

    return _read_document(project_dir, audit_dir, doc_type)
