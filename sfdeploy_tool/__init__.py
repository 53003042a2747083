"""sfdeploy-tool - Salesforce deployment manifests from git changes.

This tool works out which metadata components changed between two commits,
writes the package and destructive manifests, stages the changed files for a
deploy step and can package a rollback of the same change.
"""

from .__version__ import __version__, __version_info__, __author__, __email__, __license__

# Core API
from .core import TypeRegistry, Classifier, ManifestEngine, PathResolver
from .services import DeployService, ConfigService

# Data models
from .models import (
    TypeRule,
    MetadataDescriptor,
    Manifest,
    ChangeSet,
    BuildEnvironment,
    BuildOptions,
    DeploymentOutcome,
    ManifestBuildResult,
)

# Exceptions
from .api.exceptions import (
    SfDeployError,
    RegistryError,
    ConfigError,
    VcsError,
    ManifestWriteError,
    ReplicationError,
    ArchiveError,
    PhaseError,
)

# Collaborators
from .utils import GitRepository

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__author__",
    "__email__",
    "__license__",

    # Main classes
    "TypeRegistry",
    "Classifier",
    "ManifestEngine",
    "PathResolver",
    "DeployService",
    "ConfigService",
    "GitRepository",

    # Data models
    "TypeRule",
    "MetadataDescriptor",
    "Manifest",
    "ChangeSet",
    "BuildEnvironment",
    "BuildOptions",
    "DeploymentOutcome",
    "ManifestBuildResult",

    # Exceptions
    "SfDeployError",
    "RegistryError",
    "ConfigError",
    "VcsError",
    "ManifestWriteError",
    "ReplicationError",
    "ArchiveError",
    "PhaseError",
]
