"""
Git client infrastructure for gitresource.

Provides a clean abstraction over git command execution.
All repository access goes through this client, making it:
- Easy to replace with an in-memory fake for testing
- Consistent in error handling
- Isolated from the version resolution logic

GitBackend is the capability interface the services depend on;
GitClient implements it by running the git executable.
"""

import os
import re
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Tuple, runtime_checkable
import logging

from ..domain.records import CommitRecord, TagRecord
from ..exit_codes import ConfigError, GitError

logger = logging.getLogger(__name__)

_COMMIT_ID = re.compile(r'^[0-9a-fA-F]{4,64}$')
_SHOW_FORMAT = '%H%x00%cn%x00%cI%x00%B'
_TAG_FORMAT = '%(refname:strip=2)%00%(objectname)%00%(*objectname)%00%(creatordate:unix)'


@runtime_checkable
class GitBackend(Protocol):
    """Repository operations the resolution engine relies on."""

    def is_git_repo(self, path: str) -> bool: ...

    def clone(self, url: str, branch: str, path: str) -> None: ...

    def fetch(self, path: str) -> None: ...

    def branch_tip(self, path: str, branch: str) -> CommitRecord: ...

    def list_tags(self, path: str) -> List[TagRecord]: ...

    def list_commits(self, path: str, tip: str) -> List[str]: ...

    def changed_paths(self, path: str, old: str, new: str) -> List[str]: ...

    def resolve_tag(self, path: str, name: str) -> Optional[CommitRecord]: ...

    def resolve_commit(self, path: str, commit_id: str) -> Optional[CommitRecord]: ...

    def checkout(self, path: str, commit_id: str) -> None: ...


class GitClient:
    """
    Abstraction over git commands.

    Example:
        client = GitClient(ssh_dir="/root/.ssh")
        client.clone("git@example.com:team/app.git", "main", "/tmp/app")
        tip = client.branch_tip("/tmp/app", "main")
        print(tip.id)
    """

    def __init__(
        self,
        timeout: Optional[int] = 300,
        ssh_dir: Optional[str] = None,
        remote: str = "origin"
    ):
        """
        Initialize GitClient.

        Args:
            timeout: Command timeout in seconds; None or 0 waits indefinitely
            ssh_dir: Directory holding id_rsa; used for ssh transports when present
            remote: Name of the remote to clone from and fetch
        """
        self.timeout = timeout or None
        self.ssh_dir = ssh_dir
        self.remote = remote

    def _env(self) -> Dict[str, str]:
        env = os.environ.copy()
        env['GIT_TERMINAL_PROMPT'] = '0'
        if self.ssh_dir:
            key = Path(self.ssh_dir).expanduser() / 'id_rsa'
            if key.exists():
                # Host keys are not verified
                env['GIT_SSH_COMMAND'] = (
                    f'ssh -i "{key}" -o IdentitiesOnly=yes '
                    '-o StrictHostKeyChecking=no -o UserKnownHostsFile=/dev/null'
                )
        return env

    def _run(
        self,
        args: List[str],
        cwd: Optional[str] = None,
        check: bool = False
    ) -> Tuple[Optional[str], int]:
        """
        Run a git command.

        Args:
            args: Arguments after "git"
            cwd: Working directory
            check: Raise GitError on non-zero exit, timeout or missing git

        Returns:
            Tuple of (stdout, returncode)
        """
        cmd = ['git'] + args
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                env=self._env()
            )
        except subprocess.TimeoutExpired:
            logger.warning(f"Git command timed out: {' '.join(cmd)}")
            if check:
                raise GitError(f"git {args[0]} timed out after {self.timeout}s", command=cmd)
            return None, -1
        except OSError as e:
            logger.error(f"Git command failed: {' '.join(cmd)} - {e}")
            if check:
                raise GitError(f"git {args[0]} could not be run: {e}", command=cmd)
            return None, -1

        if check and result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise GitError(
                f"git {args[0]} failed (exit {result.returncode}): {stderr}",
                command=cmd,
                stderr=stderr
            )

        output = result.stdout
        return output.strip() if output else None, result.returncode

    def is_git_repo(self, path: str) -> bool:
        """Check if path is a git repository."""
        git_dir = Path(path) / ".git"
        return git_dir.exists()

    def clone(self, url: str, branch: str, path: str) -> None:
        """Clone url into path with branch checked out."""
        logger.info(f"Cloning {url} ({branch}) into {path}")
        self._run(
            ['clone', '--origin', self.remote, '--branch', branch, url, path],
            check=True
        )

    def fetch(self, path: str) -> None:
        """Update remote-tracking branches and tags from the remote."""
        logger.info(f"Fetching {self.remote} in {path}")
        self._run(['fetch', '--tags', '--force', '--prune', self.remote], cwd=path, check=True)

    def _rev_parse(self, path: str, rev: str) -> Optional[str]:
        output, code = self._run(['rev-parse', '--verify', '--quiet', f'{rev}^{{commit}}'], cwd=path)
        if code != 0 or not output:
            return None
        return output.strip()

    def _show(self, path: str, commit_id: str) -> CommitRecord:
        output, _ = self._run(['show', '-s', f'--format={_SHOW_FORMAT}', commit_id], cwd=path, check=True)
        return parse_show_output(output or "")

    def branch_tip(self, path: str, branch: str) -> CommitRecord:
        """
        Resolve the remote-tracking branch to its tip commit.

        Raises:
            ConfigError: if the branch does not exist on the remote
        """
        ref = f'refs/remotes/{self.remote}/{branch}'
        commit_id = self._rev_parse(path, ref)
        if commit_id is None:
            raise ConfigError(f"branch '{branch}' not found on remote '{self.remote}'")
        return self._show(path, commit_id)

    def list_tags(self, path: str) -> List[TagRecord]:
        """
        List all tags in ref-name order.

        Returns:
            TagRecord per tag, peeled to the target commit
        """
        output, _ = self._run(
            ['for-each-ref', '--sort=refname', f'--format={_TAG_FORMAT}', 'refs/tags'],
            cwd=path,
            check=True
        )
        return parse_tag_output(output or "")

    def list_commits(self, path: str, tip: str) -> List[str]:
        """Commit ids reachable from tip, newest first in topological order."""
        output, _ = self._run(['rev-list', '--topo-order', tip], cwd=path, check=True)
        if not output:
            return []
        return [line.strip() for line in output.split('\n') if line.strip()]

    def changed_paths(self, path: str, old: str, new: str) -> List[str]:
        """
        Paths that differ between the trees of two commits.

        Renames are reported as a deletion plus an addition, so both
        the old and the new path appear.
        """
        output, _ = self._run(
            ['diff', '--name-only', '--no-renames', '-z', old, new, '--'],
            cwd=path,
            check=True
        )
        if not output:
            return []
        return [p for p in output.split('\0') if p]

    def resolve_tag(self, path: str, name: str) -> Optional[CommitRecord]:
        """The commit a tag points at, or None if there is no such tag."""
        commit_id = self._rev_parse(path, f'refs/tags/{name}')
        if commit_id is None:
            return None
        return self._show(path, commit_id)

    def resolve_commit(self, path: str, commit_id: str) -> Optional[CommitRecord]:
        """The commit with this (possibly abbreviated) id, or None."""
        if not _COMMIT_ID.match(commit_id):
            return None
        full_id = self._rev_parse(path, commit_id)
        if full_id is None:
            return None
        return self._show(path, full_id)

    def checkout(self, path: str, commit_id: str) -> None:
        """Force a detached checkout of commit_id, discarding local changes."""
        logger.info(f"Checking out {commit_id} in {path}")
        self._run(['checkout', '--force', '--detach', commit_id], cwd=path, check=True)


def parse_show_output(output: str) -> CommitRecord:
    """Parse `git show -s --format=%H%x00%cn%x00%cI%x00%B` output."""
    parts = output.split('\0', 3)
    if len(parts) < 4:
        raise GitError(f"unexpected git show output: {output[:80]!r}")
    commit_id, committer, date_str, message = parts
    try:
        when = datetime.fromisoformat(date_str.strip().replace('Z', '+00:00'))
    except ValueError:
        raise GitError(f"unparseable commit date {date_str!r} for {commit_id}")
    return CommitRecord(
        id=commit_id.strip(),
        timestamp=when,
        author=committer.strip(),
        message=message.strip()
    )


def parse_tag_output(output: str) -> List[TagRecord]:
    """Parse for-each-ref output produced with the tag format."""
    tags = []
    for line in output.split('\n'):
        if not line.strip():
            continue

        parts = line.split('\0')
        if len(parts) < 4:
            logger.debug(f"Skipping malformed tag line: {line!r}")
            continue

        name, object_id, peeled_id, when = parts[:4]
        try:
            timestamp = int(when.strip())
        except ValueError:
            timestamp = 0

        tags.append(TagRecord(
            name=name.strip(),
            target_commit_id=(peeled_id or object_id).strip(),
            timestamp=timestamp
        ))

    return tags
