"""
Infrastructure layer for gitresource.

Contains abstractions for external systems:
- GitBackend / GitClient: git command execution
- KeyStore: SSH key material on disk

These provide clean interfaces that can be faked for testing.
"""

from .git_client import GitBackend, GitClient
from .key_store import KeyStore

__all__ = [
    'GitBackend',
    'GitClient',
    'KeyStore',
]
