"""
Service layer for gitresource.

Contains the decision logic that sits on top of the git backend:
- ResolutionEngine: which versions are new, and in what order
- TagSelector / PathFilter: helpers for the tag and path policies
- MetadataExtractor: descriptive fields for one version
- ResourceService: initialize / check / materialize orchestration

Services are the primary API for commands to use.
"""

from .tag_selector import TagSelector
from .path_filter import PathFilter
from .resolution import ResolutionEngine, Policy
from .metadata_extractor import MetadataExtractor
from .resource_service import ResourceService, MaterializeResult

__all__ = [
    'TagSelector',
    'PathFilter',
    'ResolutionEngine',
    'Policy',
    'MetadataExtractor',
    'ResourceService',
    'MaterializeResult',
]
