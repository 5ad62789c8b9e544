"""Shared fixtures: an in-memory git backend for engine tests."""

from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

import pytest

from gitresource.domain.records import CommitRecord, TagRecord
from gitresource.exit_codes import ConfigError, GitError


class FakeGitBackend:
    """
    In-memory stand-in for GitClient.

    history maps branch name to commit ids, newest first.
    diffs maps (old, new) to the changed paths between them.
    """

    def __init__(self):
        self.commits: Dict[str, CommitRecord] = {}
        self.history: Dict[str, List[str]] = {}
        self.tags: List[TagRecord] = []
        self.diffs: Dict[Tuple[str, str], List[str]] = {}
        self.repos = set()
        self.calls: List[tuple] = []

    def add_commit(self, commit_id: str, branch: str = "master", when: int = 0,
                   author: str = "Ada", message: str = "change") -> CommitRecord:
        record = CommitRecord(
            id=commit_id,
            timestamp=datetime.fromtimestamp(when, tz=timezone.utc),
            author=author,
            message=message,
        )
        self.commits[commit_id] = record
        self.history.setdefault(branch, []).insert(0, commit_id)
        return record

    def add_tag(self, name: str, commit_id: str, when: int) -> TagRecord:
        tag = TagRecord(name=name, target_commit_id=commit_id, timestamp=when)
        self.tags.append(tag)
        return tag

    def is_git_repo(self, path: str) -> bool:
        return path in self.repos

    def clone(self, url: str, branch: str, path: str) -> None:
        self.calls.append(('clone', url, branch, path))
        self.repos.add(path)

    def fetch(self, path: str) -> None:
        self.calls.append(('fetch', path))

    def branch_tip(self, path: str, branch: str) -> CommitRecord:
        if not self.history.get(branch):
            raise ConfigError(f"branch '{branch}' not found on remote 'origin'")
        return self.commits[self.history[branch][0]]

    def list_tags(self, path: str) -> List[TagRecord]:
        return list(self.tags)

    def list_commits(self, path: str, tip: str) -> List[str]:
        for ids in self.history.values():
            if ids and ids[0] == tip:
                return list(ids)
        raise GitError(f"unknown revision {tip}")

    def changed_paths(self, path: str, old: str, new: str) -> List[str]:
        self.calls.append(('changed_paths', old, new))
        return list(self.diffs.get((old, new), []))

    def resolve_tag(self, path: str, name: str) -> Optional[CommitRecord]:
        for tag in self.tags:
            if tag.name == name:
                return self.commits.get(tag.target_commit_id)
        return None

    def resolve_commit(self, path: str, commit_id: str) -> Optional[CommitRecord]:
        return self.commits.get(commit_id)

    def checkout(self, path: str, commit_id: str) -> None:
        self.calls.append(('checkout', path, commit_id))


@pytest.fixture
def fake_git():
    """Backend with three commits on master: c1 (oldest) .. c3 (tip)."""
    git = FakeGitBackend()
    git.add_commit("c1", when=100, message="first")
    git.add_commit("c2", when=200, message="second")
    git.add_commit("c3", when=300, author="Grace", message="third")
    return git
