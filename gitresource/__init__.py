"""
gitresource - A pipeline resource for git repositories.

gitresource answers three questions for a pipeline engine:

    init   Prepare a local clone (SSH keys, clone or fetch)
    check  Which versions are new since the last one seen, oldest first?
    in     Check out one version and describe it

Quick Start:
    from gitresource import Payload, ResourceService

    payload = Payload.from_dict({
        "source": {"uri": "https://example.com/app.git", "branch": "main"},
        "version": {"ref": "4f2a9c..."},
    })
    service = ResourceService()
    for version in service.check(payload, "/tmp/mirror"):
        print(version.ref)

Version policies:
    tag_filter set  -> tags matching the expression, ordered by tag time
    paths set       -> branch commits, only when a watched path changed
    otherwise       -> branch commits

Domain Objects:
    SourceConfig, Payload, VersionRef, CommitRecord, TagRecord, MetadataRecord

Services:
    ResolutionEngine - Policy selection and version ordering
    ResourceService  - initialize / check / materialize
"""

__version__ = "0.3.0"

from .domain import (
    SourceConfig,
    Payload,
    VersionRef,
    CommitRecord,
    TagRecord,
    MetadataField,
    MetadataRecord,
)

from .services import (
    ResolutionEngine,
    Policy,
    ResourceService,
    MetadataExtractor,
)

from .infra import GitBackend, GitClient, KeyStore

from .config import load_config

__all__ = [
    "__version__",
    # Domain objects
    "SourceConfig",
    "Payload",
    "VersionRef",
    "CommitRecord",
    "TagRecord",
    "MetadataField",
    "MetadataRecord",
    # Services
    "ResolutionEngine",
    "Policy",
    "ResourceService",
    "MetadataExtractor",
    # Infrastructure
    "GitBackend",
    "GitClient",
    "KeyStore",
    # Configuration
    "load_config",
]
