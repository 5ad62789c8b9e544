"""
Source configuration and payload domain objects for gitresource.

The pipeline engine sends a JSON payload on stdin:

    {
        "source": {"uri": "...", "branch": "main", "tag_filter": "v.*",
                   "paths": ["src/app.go"], "private_key": "..."},
        "version": {"ref": "..."}
    }

These objects parse and validate that payload. They hold no I/O.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from ..exit_codes import ConfigError


DEFAULT_BRANCH = "master"


@dataclass(frozen=True)
class VersionRef:
    """
    An opaque version identifier: a commit id or a tag name.

    Equality is exact string comparison.
    """
    ref: str

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['VersionRef']:
        """Parse {"ref": ...}; absent, null or empty refs mean no version."""
        if not data:
            return None
        if not isinstance(data, dict):
            raise ConfigError(f"version must be an object, got {type(data).__name__}")
        ref = data.get('ref')
        if ref is None or ref == "":
            return None
        if not isinstance(ref, str):
            raise ConfigError("version.ref must be a string")
        return cls(ref=ref)

    def to_dict(self) -> Dict[str, str]:
        return {'ref': self.ref}

    def __str__(self) -> str:
        return self.ref


@dataclass(frozen=True)
class SourceConfig:
    """
    Where the repository lives and which versions of it are interesting.

    Attributes:
        uri: Repository location (URL or local path)
        branch: Branch to track; empty means the default branch
        tag_filter: Regular expression; when set, only matching tags are versions
        paths: Exact file paths; when set (and no tag_filter), only commits
            touching one of them produce new versions
        private_key: SSH private key material, opaque to the engine
    """
    uri: str
    branch: str = ""
    tag_filter: str = ""
    paths: Tuple[str, ...] = ()
    private_key: str = field(default="", repr=False)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'SourceConfig':
        """Parse the "source" object of a payload."""
        if not isinstance(data, dict):
            raise ConfigError("payload is missing the 'source' object")

        uri = data.get('uri') or ""
        if not uri:
            raise ConfigError("source.uri is required")

        paths = data.get('paths') or []
        if isinstance(paths, str):
            paths = [paths]
        if not isinstance(paths, list) or not all(isinstance(p, str) for p in paths):
            raise ConfigError("source.paths must be a list of strings")

        return cls(
            uri=uri,
            branch=data.get('branch') or "",
            tag_filter=data.get('tag_filter') or "",
            paths=tuple(paths),
            private_key=data.get('private_key') or "",
        )

    def with_default_branch(self, default: str = DEFAULT_BRANCH) -> 'SourceConfig':
        """Return a copy whose branch is filled in when it was left empty."""
        if self.branch:
            return self
        return SourceConfig(
            uri=self.uri,
            branch=default,
            tag_filter=self.tag_filter,
            paths=self.paths,
            private_key=self.private_key,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize without the private key."""
        result = {'uri': self.uri, 'branch': self.branch}
        if self.tag_filter:
            result['tag_filter'] = self.tag_filter
        if self.paths:
            result['paths'] = list(self.paths)
        return result


@dataclass(frozen=True)
class Payload:
    """A single request from the pipeline engine."""
    source: SourceConfig
    version: Optional[VersionRef] = None

    @classmethod
    def from_dict(cls, data: Any) -> 'Payload':
        if not isinstance(data, dict):
            raise ConfigError("payload must be a JSON object")
        return cls(
            source=SourceConfig.from_dict(data.get('source')),
            version=VersionRef.from_dict(data.get('version')),
        )

    @property
    def last_seen(self) -> Optional[str]:
        """The previously seen version ref, if any."""
        return self.version.ref if self.version else None
