"""Lockable resource entity."""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Mapping, Optional


@dataclass
class LockableResource:
    """A named unit of shared capacity held by at most one queue item."""
    name: str
    labels: FrozenSet[str] = frozenset()
    attributes: Dict[str, str] = field(default_factory=dict)
    description: str = ""
    reserved_by: Optional[str] = None  # Queue item id, None when free

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Resource name must not be empty")
        self.labels = frozenset(self.labels)

    def is_free(self) -> bool:
        return self.reserved_by is None

    def has_label(self, label: str) -> bool:
        return label in self.labels

    def matches(self, params: Optional[Mapping[str, Any]] = None) -> bool:
        """Check that every supplied parameter equals the resource attribute."""
        if not params:
            return True

        for key, value in params.items():
            if key not in self.attributes:
                return False
            if self.attributes[key] != str(value):
                return False
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "labels": sorted(self.labels),
            "attributes": dict(self.attributes),
            "description": self.description,
            "reserved_by": self.reserved_by,
        }

    def __str__(self) -> str:
        return self.name
