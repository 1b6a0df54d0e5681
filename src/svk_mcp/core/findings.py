"""Loading and filtering of audit findings."""

import logging
from pathlib import Path

from svk_mcp.models import Finding

logger = logging.getLogger("svk.findings")

FINDINGS_DIR = "findings"


def load_findings(artifact_dir: Path) -> list[Finding]:
    """Read every markdown finding under `<artifact_dir>/findings`, in name order.

    A missing findings directory yields no findings. A finding that vanishes
    before it is read, or is not valid UTF-8, is skipped.
    """
    findings_dir = artifact_dir / FINDINGS_DIR
    try:
        files = sorted(p for p in findings_dir.iterdir() if p.suffix == ".md" and p.is_file())
    except (FileNotFoundError, NotADirectoryError):
        return []

    findings: list[Finding] = []
    for path in files:
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            continue
        except UnicodeDecodeError as e:
            logger.warning("Skipping undecodable finding %s: %s", path.name, e)
            continue
        findings.append(Finding(file=path.name, content=content))
    return findings


def filter_findings(
    findings: list[Finding],
    subsystem: str | None = None,
    severity: str | None = None,
) -> list[Finding]:
    """Keep findings mentioning the subsystem and the severity (both, when given).

    Both are case-insensitive substring tests over the whole document.
    """
    filtered = findings

    if subsystem:
        sub = subsystem.lower()
        filtered = [f for f in filtered if sub in f.content.lower()]

    if severity:
        sev = severity.upper()
        filtered = [f for f in filtered if sev in f.content.upper()]

    return filtered
