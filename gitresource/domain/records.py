"""
Git object records and metadata for gitresource.

CommitRecord and TagRecord are produced by the git backend and never
mutated afterwards. MetadataRecord is the ordered name/value list that
accompanies a materialized version.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Tuple

DATE_FORMAT = "%Y-%m-%d %H:%M:%S %z"


@dataclass(frozen=True)
class CommitRecord:
    """A commit as seen by the backend."""
    id: str
    timestamp: datetime
    author: str
    message: str


@dataclass(frozen=True)
class TagRecord:
    """
    A tag and the time associated with it.

    For annotated tags the timestamp is the tagger time; for lightweight
    tags it is the target commit's committer time.
    """
    name: str
    target_commit_id: str
    timestamp: int  # Unix seconds


@dataclass(frozen=True)
class MetadataField:
    name: str
    value: str

    def to_dict(self) -> Dict[str, str]:
        return {'name': self.name, 'value': self.value}


@dataclass(frozen=True)
class MetadataRecord:
    """Ordered metadata fields for one version."""
    fields: Tuple[MetadataField, ...]

    def get(self, name: str) -> str:
        """Return the value of a field by name (KeyError if absent)."""
        for item in self.fields:
            if item.name == name:
                return item.value
        raise KeyError(name)

    @property
    def tag(self) -> str:
        return self.get('tag')

    @property
    def commit(self) -> str:
        return self.get('commit')

    def to_list(self) -> List[Dict[str, str]]:
        return [item.to_dict() for item in self.fields]


def format_commit_date(when: datetime) -> str:
    """Render a commit time the way metadata reports it."""
    return when.strftime(DATE_FORMAT)
