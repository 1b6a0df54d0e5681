"""Suggest tool: which SVK skill to run next."""

from pathlib import Path

from svk_mcp.core.suggest import build_suggestions
from svk_mcp.models import SuggestionsResult


def suggest(project_dir: Path) -> SuggestionsResult:
    """Suggestions for the project, most urgent first."""
    return SuggestionsResult(suggestions=build_suggestions(project_dir))
