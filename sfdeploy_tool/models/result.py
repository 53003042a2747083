"""Operation result models"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Any

from .manifest import Manifest
from .metadata import MetadataDescriptor
from ..constants import Phase


class OperationStatus(Enum):
    """Operation status"""
    SUCCESS = "success"
    FAILED = "failed"
    IN_PROGRESS = "in_progress"


@dataclass
class ErrorDetail:
    """Detailed error information"""

    code: str
    message: str
    context: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat()
        }


@dataclass
class Result:
    """Base result class"""

    status: OperationStatus
    message: str = ""
    errors: List[ErrorDetail] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    start_time: datetime = field(default_factory=datetime.now)
    end_time: Optional[datetime] = None

    @property
    def is_success(self) -> bool:
        """Check if operation was successful"""
        return self.status == OperationStatus.SUCCESS

    @property
    def is_failed(self) -> bool:
        """Check if operation failed"""
        return self.status == OperationStatus.FAILED

    @property
    def duration(self) -> Optional[float]:
        """Get operation duration in seconds"""
        if self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return None

    def add_error(self, code: str, message: str, **context) -> None:
        """Add an error"""
        self.errors.append(ErrorDetail(code=code, message=message, context=context))

    def complete(self, status: Optional[OperationStatus] = None) -> None:
        """Mark operation as complete"""
        self.end_time = datetime.now()
        if status:
            self.status = status


@dataclass
class ManifestBuildResult:
    """Result of folding a path list into a manifest"""

    manifest: Manifest
    destructive: bool = False
    accepted: List[MetadataDescriptor] = field(default_factory=list)
    skipped: List[MetadataDescriptor] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    path: Optional[Path] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "destructive": self.destructive,
            "path": str(self.path) if self.path else None,
            "types": self.manifest.to_dict(),
            "version": self.manifest.version,
            "accepted": [d.path for d in self.accepted],
            "skipped": [d.path for d in self.skipped],
            "warnings": self.warnings
        }


@dataclass
class ManifestSet:
    """Package manifest plus the optional destructive manifest"""

    package: ManifestBuildResult
    destructive: Optional[ManifestBuildResult] = None

    @property
    def accepted(self) -> List[MetadataDescriptor]:
        """Descriptors whose files belong in the staging directory"""
        return self.package.accepted

    @property
    def warnings(self) -> List[str]:
        warnings = list(self.package.warnings)
        if self.destructive:
            warnings.extend(self.destructive.warnings)
        return warnings


@dataclass
class DeploymentOutcome(Result):
    """Terminal result of one orchestration run"""

    deploy_stage: Optional[Path] = None
    package_manifest: Optional[Path] = None
    destructive_manifest: Optional[Path] = None
    rollback_archive: Optional[Path] = None
    replicated_count: int = 0
    registry_updated: bool = False
    full_build: bool = False
    failed_phase: Optional[Phase] = None
    completed_phases: List[Phase] = field(default_factory=list)
    outputs: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "status": self.status.value,
            "message": self.message,
            "deploy_stage": str(self.deploy_stage) if self.deploy_stage else None,
            "package_manifest": str(self.package_manifest) if self.package_manifest else None,
            "destructive_manifest": str(self.destructive_manifest) if self.destructive_manifest else None,
            "rollback_archive": str(self.rollback_archive) if self.rollback_archive else None,
            "replicated_count": self.replicated_count,
            "registry_updated": self.registry_updated,
            "full_build": self.full_build,
            "failed_phase": self.failed_phase.value if self.failed_phase else None,
            "completed_phases": [p.value for p in self.completed_phases],
            "outputs": self.outputs,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": self.warnings,
            "duration": self.duration
        }
