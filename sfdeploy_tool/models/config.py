"""Configuration data models"""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Mapping, Optional, Any

from ..constants import (
    DEFAULT_ARTIFACTS_DIR,
    DEFAULT_BUILD_NUMBER,
    DEFAULT_JOB_NAME,
    DEFAULT_SOURCE_DIR,
    DEFAULT_STAGE_DIR,
    ENV_BUILD_NUMBER,
    ENV_BUILD_TAG,
    ENV_COMMIT,
    ENV_COMMITTER_EMAIL,
    ENV_COMMITTER_NAME,
    ENV_JOB_NAME,
    ENV_PREVIOUS_COMMIT,
    ENV_WORKSPACE,
    PACKAGE_MANIFEST_FILE,
)


@dataclass
class BuildEnvironment:
    """Values supplied by the job runner for one build"""

    commit: str
    workspace: Path
    previous_commit: Optional[str] = None
    job_name: str = DEFAULT_JOB_NAME
    build_number: str = DEFAULT_BUILD_NUMBER
    build_tag: Optional[str] = None
    committer_name: Optional[str] = None
    committer_email: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.workspace, str):
            self.workspace = Path(self.workspace)

        # Blank values from the job runner mean "not set"
        if not self.previous_commit:
            self.previous_commit = None

        if not self.build_tag:
            self.build_tag = f"{self.job_name}-{self.build_number}"

    @property
    def has_previous_commit(self) -> bool:
        return self.previous_commit is not None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'BuildEnvironment':
        """Create from job runner environment variables"""
        environ = os.environ if environ is None else environ

        return cls(
            commit=environ.get(ENV_COMMIT, ''),
            workspace=Path(environ.get(ENV_WORKSPACE) or os.getcwd()),
            previous_commit=environ.get(ENV_PREVIOUS_COMMIT),
            job_name=environ.get(ENV_JOB_NAME) or DEFAULT_JOB_NAME,
            build_number=environ.get(ENV_BUILD_NUMBER) or DEFAULT_BUILD_NUMBER,
            build_tag=environ.get(ENV_BUILD_TAG),
            committer_name=environ.get(ENV_COMMITTER_NAME),
            committer_email=environ.get(ENV_COMMITTER_EMAIL)
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'commit': self.commit,
            'previous_commit': self.previous_commit,
            'workspace': str(self.workspace),
            'job_name': self.job_name,
            'build_number': self.build_number,
            'build_tag': self.build_tag,
            'committer_name': self.committer_name,
            'committer_email': self.committer_email
        }


@dataclass
class BuildOptions:
    """Behaviour switches and layout for a build"""

    force_initial_build: bool = False
    rollback_enabled: bool = False
    update_package_enabled: bool = False
    repository_dir: str = "."  # Relative to the workspace
    source_dir: str = DEFAULT_SOURCE_DIR  # Relative to the repository
    stage_dir: str = DEFAULT_STAGE_DIR  # Relative to the workspace
    artifacts_dir: str = DEFAULT_ARTIFACTS_DIR  # Relative to the workspace
    package_xml: str = PACKAGE_MANIFEST_FILE  # Relative to the repository
    registry_path: Optional[str] = None

    @classmethod
    def field_names(cls):
        return [f.name for f in fields(cls)]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BuildOptions':
        """Create from dictionary

        Raises:
            ValueError: If the dictionary contains an unknown key
        """
        known = set(cls.field_names())
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown option(s): {', '.join(unknown)}")

        return cls(**data)

    def merged(self, overrides: Dict[str, Any]) -> 'BuildOptions':
        """Return a copy with non-None overrides applied"""
        data = self.to_dict()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return BuildOptions.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {name: getattr(self, name) for name in self.field_names()}
