"""
Metadata extraction for materialized versions.
"""

import logging

from ..domain.records import MetadataField, MetadataRecord, format_commit_date
from ..exit_codes import ResolutionError
from ..infra.git_client import GitBackend

logger = logging.getLogger(__name__)


class MetadataExtractor:
    """Describe a version as a fixed, ordered list of fields."""

    def __init__(self, git: GitBackend):
        self.git = git

    def describe(self, path: str, version: str, branch: str) -> MetadataRecord:
        """
        Build metadata for version.

        The version is looked up as a tag first, then as a commit id.
        The branch field echoes the configured branch.

        Raises:
            ResolutionError: if version is neither a tag nor a commit
        """
        commit = self.git.resolve_tag(path, version)
        is_tag = commit is not None
        if commit is None:
            commit = self.git.resolve_commit(path, version)
        if commit is None:
            raise ResolutionError(f"version {version!r} is neither a tag nor a commit in {path}")

        return MetadataRecord(fields=(
            MetadataField('commit', commit.id),
            MetadataField('author', commit.author),
            MetadataField('date', format_commit_date(commit.timestamp)),
            MetadataField('branch', branch),
            MetadataField('tag', version if is_tag else ""),
            MetadataField('message', commit.message),
        ))
