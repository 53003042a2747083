"""Metadata type models"""

from dataclasses import dataclass
from typing import Dict, Any

from ..constants import COMPANION_MARKER, SENTINEL_TYPES


@dataclass(frozen=True)
class TypeRule:
    """Registry entry mapping a file extension to a declared type"""
    extension: str
    container: str
    declared_type: str
    destructible: bool

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'extension': self.extension,
            'container': self.container,
            'declared_type': self.declared_type,
            'destructible': self.destructible
        }


@dataclass(frozen=True)
class MetadataDescriptor:
    """Typed description of one repository file"""
    extension: str
    container: str
    member: str
    declared_type: str
    relative_path: str
    destructible: bool
    valid: bool
    path: str  # Repository-relative path as given

    @property
    def file_name(self) -> str:
        """Get file name (member plus extension)"""
        if self.extension:
            return f"{self.member}.{self.extension}"
        return self.member

    @property
    def is_companion(self) -> bool:
        """Check if this is a companion descriptor file (e.g. Foo.cls-meta.xml)"""
        return COMPANION_MARKER in self.file_name

    @property
    def is_sentinel(self) -> bool:
        """Check if the declared type is not a deployable type"""
        return self.declared_type in SENTINEL_TYPES

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'path': self.path,
            'extension': self.extension,
            'container': self.container,
            'member': self.member,
            'declared_type': self.declared_type,
            'relative_path': self.relative_path,
            'destructible': self.destructible,
            'valid': self.valid
        }
