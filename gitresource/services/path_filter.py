"""
Path gating for the path-filter policy.
"""

import logging
from typing import Iterable

from ..infra.git_client import GitBackend

logger = logging.getLogger(__name__)


class PathFilter:
    """Decide whether any watched path changed between two commits."""

    def __init__(self, git: GitBackend, path: str):
        self.git = git
        self.path = path

    def touched(self, last_seen: str, tip: str, watched: Iterable[str]) -> bool:
        """
        True if a watched path differs between last_seen and tip.

        Paths are compared exactly; directories and globs are not expanded.
        """
        changed = set(self.git.changed_paths(self.path, last_seen, tip))
        logger.debug(f"{len(changed)} paths changed between {last_seen} and {tip}")
        for watched_path in watched:
            if watched_path in changed:
                logger.debug(f"Watched path changed: {watched_path}")
                return True
        return False
