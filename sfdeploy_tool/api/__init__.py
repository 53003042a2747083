# sfdeploy_tool/api/__init__.py
"""API layer for sfdeploy-tool"""

from .exceptions import (
    SfDeployError,
    RegistryError,
    ConfigError,
    MissingParameterError,
    VcsError,
    ManifestWriteError,
    ReplicationError,
    ArchiveError,
    PhaseError,
)

__all__ = [
    "SfDeployError",
    "RegistryError",
    "ConfigError",
    "MissingParameterError",
    "VcsError",
    "ManifestWriteError",
    "ReplicationError",
    "ArchiveError",
    "PhaseError",
]
