"""
Domain layer for gitresource.

Contains pure domain objects with no I/O or side effects:
- SourceConfig / Payload / VersionRef: what the pipeline engine asks for
- CommitRecord / TagRecord: what the git backend answers with
- MetadataRecord: descriptive fields for a materialized version

These objects are immutable and provide serialization methods
for JSON output.
"""

from .source import SourceConfig, Payload, VersionRef, DEFAULT_BRANCH
from .records import (
    CommitRecord,
    TagRecord,
    MetadataField,
    MetadataRecord,
    format_commit_date,
)

__all__ = [
    'SourceConfig',
    'Payload',
    'VersionRef',
    'DEFAULT_BRANCH',
    'CommitRecord',
    'TagRecord',
    'MetadataField',
    'MetadataRecord',
    'format_commit_date',
]
