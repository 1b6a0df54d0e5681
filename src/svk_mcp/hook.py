"""SessionStart hook: inject the SVK project status into a new agent session.

Prints hook JSON with the status block as additionalContext. Prints nothing
when the project has no SVK state, so sessions without SVK pay no context.
"""

import json
import os
import sys
from pathlib import Path

from svk_mcp.models import ProjectStatus
from svk_mcp.tools.status import project_status

HEADER = "SVK Project Status\n━━━━━━━━━━━━━━━━━"


def build_hook_output(project_dir: Path) -> dict | None:
    status = project_status(project_dir)
    if not isinstance(status, ProjectStatus):
        return None
    return {
        "hookSpecificOutput": {
            "hookEventName": "SessionStart",
            "additionalContext": f"{HEADER}\n{status.summary}",
        }
    }


def main():
    project_dir = Path(os.environ.get("CLAUDE_PROJECT_DIR", "."))
    output = build_hook_output(project_dir)
    if output is not None:
        sys.stdout.write(json.dumps(output, ensure_ascii=False))


if __name__ == "__main__":
    main()
