"""Recursive collection of SVK artifact files."""

import logging
import os
from collections.abc import Iterable, Iterator
from itertools import chain
from pathlib import Path

logger = logging.getLogger("svk.collector")

ARTIFACT_EXTENSIONS = (".md", ".json")

# Version-control and dependency directories, never descended into
PRUNED_DIRS = frozenset({".git", ".hg", ".svn", "node_modules", ".venv"})


class DirectoryCollector:
    """Lazy, restartable walk over the artifact files below one root.

    Each iteration re-reads the tree depth-first, visiting entries in name
    order. A missing root yields nothing: artifact roots are optional and
    their absence means nothing has been produced yet.
    """

    def __init__(self, root: Path, extensions: Iterable[str] = ARTIFACT_EXTENSIONS):
        self.root = Path(root)
        self.extensions = tuple(extensions)

    def __iter__(self) -> Iterator[Path]:
        return self._walk(self.root)

    def _walk(self, directory: Path) -> Iterator[Path]:
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except (FileNotFoundError, NotADirectoryError):
            # Root absent, or a subdirectory removed while we were walking
            logger.debug("Skipping missing directory: %s", directory)
            return

        for entry in entries:
            if entry.is_dir(follow_symlinks=False):
                if entry.name in PRUNED_DIRS:
                    continue
                yield from self._walk(Path(entry.path))
            elif entry.name.endswith(self.extensions):
                yield Path(entry.path)


def collect_files(roots: Iterable[Path]) -> Iterator[Path]:
    """Chain the collectors of several roots, in the given order."""
    return chain.from_iterable(DirectoryCollector(root) for root in roots)
