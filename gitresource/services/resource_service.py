"""
Resource operations for gitresource.

Orchestrates the three operations the pipeline engine invokes:
- initialize: provision SSH keys, clone or fetch the repository
- check: list new versions since the last seen one
- materialize: check out one version and describe it

Each call is self-contained; nothing is cached between calls.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config import load_config
from ..domain.records import MetadataRecord
from ..domain.source import Payload, SourceConfig, VersionRef
from ..exit_codes import ConfigError
from ..infra.git_client import GitBackend, GitClient
from ..infra.key_store import KeyStore
from .metadata_extractor import MetadataExtractor
from .resolution import ResolutionEngine

logger = logging.getLogger(__name__)


@dataclass
class MaterializeResult:
    """What the `in` operation reports back."""
    version: VersionRef
    metadata: MetadataRecord

    def to_dict(self) -> Dict[str, Any]:
        return {
            'version': self.version.to_dict(),
            'metadata': self.metadata.to_list(),
        }


class ResourceService:
    """
    Service for the resource's initialize/check/materialize operations.

    Example:
        service = ResourceService()
        payload = Payload.from_dict(json.load(sys.stdin))
        versions = service.check(payload, "/tmp/mirror")
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        git_client: Optional[GitBackend] = None,
        key_store: Optional[KeyStore] = None
    ):
        """
        Initialize ResourceService.

        Args:
            config: Configuration dict (loads default if None)
            git_client: Git backend (creates a GitClient if None)
            key_store: Key store (uses the configured ssh dir if None)
        """
        self.config = config or load_config()
        git_config = self.config.get('git', {})
        ssh_dir = self.config.get('ssh', {}).get('dir')
        self.git = git_client or GitClient(
            timeout=git_config.get('timeout', 300),
            ssh_dir=ssh_dir,
            remote=git_config.get('remote', 'origin')
        )
        self.keys = key_store or KeyStore(Path(ssh_dir or Path.home() / '.ssh'))
        self.metadata = MetadataExtractor(self.git)

    @property
    def default_branch(self) -> str:
        return self.config.get('git', {}).get('default_branch') or 'master'

    def cache_path(self, source: SourceConfig) -> str:
        """Local mirror location for check when no path is given."""
        cache_dir = Path(self.config.get('cache', {}).get('dir') or Path.home() / '.cache' / 'gitresource')
        name = "".join(c if c.isalnum() or c in '-_.' else '_' for c in source.uri).strip('_')
        return str(cache_dir.expanduser() / (name or 'repo'))

    def _source(self, payload: Payload) -> SourceConfig:
        return payload.source.with_default_branch(self.default_branch)

    def initialize(self, payload: Payload, path: str) -> SourceConfig:
        """
        Prepare a local clone at path.

        Provisions the SSH key once, then fetches if path is already a
        repository and clones otherwise.

        Returns:
            The source with its branch defaulted
        """
        source = self._source(payload)
        self.keys.provision(source.private_key)

        if self.git.is_git_repo(path):
            self.git.fetch(path)
        else:
            parent = os.path.dirname(os.path.abspath(path))
            os.makedirs(parent, exist_ok=True)
            self.git.clone(source.uri, source.branch, path)
        return source

    def check(self, payload: Payload, path: str) -> List[VersionRef]:
        """Refresh the mirror at path and return new versions, oldest first."""
        source = self.initialize(payload, path)
        versions = ResolutionEngine(self.git, path).resolve(source, payload.last_seen)
        logger.info(f"Found {len(versions)} version(s) for {source.uri}")
        return versions

    def materialize(self, payload: Payload, destination: str) -> MaterializeResult:
        """
        Check out the payload's version into destination.

        Raises:
            ConfigError: if the payload carries no version
            ResolutionError: if the version is neither a tag nor a commit
        """
        if payload.version is None:
            raise ConfigError("version.ref is required to fetch a version")

        source = self.initialize(payload, destination)
        metadata = self.metadata.describe(destination, payload.version.ref, source.branch)
        self.git.checkout(destination, metadata.commit)
        return MaterializeResult(version=payload.version, metadata=metadata)
