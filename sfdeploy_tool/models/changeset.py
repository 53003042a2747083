"""Change set model"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any


@dataclass
class ChangeSet:
    """Files changed between two commits

    For an initial build (no previous commit) every file at the current
    commit is an addition.
    """
    current_ref: str
    previous_ref: Optional[str] = None
    additions: List[str] = field(default_factory=list)
    deletions: List[str] = field(default_factory=list)
    modified_new: List[str] = field(default_factory=list)
    modified_old: List[str] = field(default_factory=list)

    @property
    def is_full_tree(self) -> bool:
        """Check if this change set lists the whole tree"""
        return self.previous_ref is None

    @property
    def updates(self) -> List[str]:
        """Files to deploy: additions followed by new versions of modified files"""
        return self.additions + self.modified_new

    @property
    def previous_versions(self) -> List[str]:
        """Files whose previous content restores the old state"""
        return self.modified_old + self.deletions

    @property
    def is_empty(self) -> bool:
        return not (self.additions or self.deletions or self.modified_new)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'current_ref': self.current_ref,
            'previous_ref': self.previous_ref,
            'additions': self.additions,
            'deletions': self.deletions,
            'modified_new': self.modified_new,
            'modified_old': self.modified_old
        }
