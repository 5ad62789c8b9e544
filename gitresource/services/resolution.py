"""
Version resolution engine for gitresource.

Given a source configuration and the version the pipeline saw last,
decides which versions are new and in what order. Exactly one policy
applies to a source:

- TAG_FILTER: versions are tags matching source.tag_filter
- PATH_FILTER: versions are commits, but only when a watched path changed
- PLAIN_COMMIT: versions are commits on the branch

Results are oldest first; the final element is the newest version.
When the previously seen version is found it is the first element.
"""

import logging
from enum import Enum
from typing import Callable, Dict, List, Optional

from ..domain.source import SourceConfig, VersionRef
from ..infra.git_client import GitBackend
from .path_filter import PathFilter
from .tag_selector import TagSelector

logger = logging.getLogger(__name__)


class Policy(Enum):
    """How new versions are discovered for a source."""
    TAG_FILTER = "tag_filter"
    PATH_FILTER = "path_filter"
    PLAIN_COMMIT = "plain_commit"

    @classmethod
    def for_source(cls, source: SourceConfig) -> 'Policy':
        """tag_filter wins over paths; neither means plain commits."""
        if source.tag_filter:
            return cls.TAG_FILTER
        if source.paths:
            return cls.PATH_FILTER
        return cls.PLAIN_COMMIT


class ResolutionEngine:
    """
    Resolve the ordered list of new versions for a source.

    Example:
        engine = ResolutionEngine(GitClient(), "/tmp/mirror")
        versions = engine.resolve(source, last_seen="4f2a...")
        print([v.ref for v in versions])
    """

    def __init__(self, git: GitBackend, path: str):
        """
        Initialize ResolutionEngine.

        Args:
            git: Backend used for every repository query
            path: Local clone the backend operates on
        """
        self.git = git
        self.path = path
        self.tags = TagSelector(git, path)
        self.paths = PathFilter(git, path)
        self._policies: Dict[Policy, Callable[[SourceConfig, Optional[str]], List[str]]] = {
            Policy.TAG_FILTER: self._resolve_tags,
            Policy.PATH_FILTER: self._resolve_paths,
            Policy.PLAIN_COMMIT: self._resolve_commits,
        }
        missing = set(Policy) - set(self._policies)
        if missing:
            raise NotImplementedError(f"no resolver for policies: {sorted(p.value for p in missing)}")

    def resolve(self, source: SourceConfig, last_seen: Optional[str] = None) -> List[VersionRef]:
        """
        Return new versions, oldest first.

        Args:
            source: Source configuration (branch must already be defaulted)
            last_seen: Previously reported version ref, or None on first check

        Returns:
            Possibly empty list of VersionRef
        """
        policy = Policy.for_source(source)
        logger.debug(f"Resolving {source.uri} ({source.branch}) with {policy.value} policy, last seen {last_seen!r}")
        refs = self._policies[policy](source, last_seen or None)
        return [VersionRef(ref) for ref in refs]

    def _resolve_tags(self, source: SourceConfig, last_seen: Optional[str]) -> List[str]:
        tags = self.tags.select(source.tag_filter)
        if last_seen is None:
            latest = self.tags.latest(tags)
            return [latest.name] if latest else []
        return self.tags.since(tags, last_seen)

    def _resolve_paths(self, source: SourceConfig, last_seen: Optional[str]) -> List[str]:
        if last_seen is None:
            return self._resolve_commits(source, None)

        tip = self.git.branch_tip(self.path, source.branch)
        if self.paths.touched(last_seen, tip.id, source.paths):
            return self._resolve_commits(source, last_seen)

        logger.info(f"No watched paths changed since {last_seen}")
        return []

    def _resolve_commits(self, source: SourceConfig, last_seen: Optional[str]) -> List[str]:
        tip = self.git.branch_tip(self.path, source.branch)
        if last_seen is None:
            return [tip.id]

        result: List[str] = []
        for commit_id in self.git.list_commits(self.path, tip.id):
            result.insert(0, commit_id)
            if commit_id == last_seen:
                break
        else:
            logger.info(f"Version {last_seen!r} not reachable from {source.branch}, returning full history")
        return result
