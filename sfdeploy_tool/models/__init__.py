# sfdeploy_tool/models/__init__.py
"""Data models for sfdeploy-tool"""

from .metadata import TypeRule, MetadataDescriptor
from .manifest import Manifest
from .changeset import ChangeSet
from .result import (
    OperationStatus,
    ErrorDetail,
    Result,
    ManifestBuildResult,
    ManifestSet,
    DeploymentOutcome,
)
from .config import BuildEnvironment, BuildOptions

__all__ = [
    # Metadata models
    "TypeRule",
    "MetadataDescriptor",

    # Manifest models
    "Manifest",
    "ChangeSet",

    # Result models
    "OperationStatus",
    "ErrorDetail",
    "Result",
    "ManifestBuildResult",
    "ManifestSet",
    "DeploymentOutcome",

    # Config models
    "BuildEnvironment",
    "BuildOptions",
]
