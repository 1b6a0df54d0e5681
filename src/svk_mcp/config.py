"""Configuration for the SVK MCP server."""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """SVK configuration loaded from environment and .env file."""

    # Project whose SVK artifacts are served (SVK_PROJECT_DIR)
    project_dir: Path = Path.cwd()

    # SVK checkout holding the skill knowledge bases
    svk_repo_dir: Path = Path(__file__).resolve().parents[2]

    # Search settings
    max_excerpts: int = 3  # per file
    context_lines: int = 2  # before and after each matching line

    # Suggestions
    stale_docs_days: int = 7

    log_level: str = "INFO"

    model_config = {"env_prefix": "SVK_", "env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
