"""Path resolution module for sfdeploy-tool"""

import os
from pathlib import Path
from typing import Optional, Union

from ..constants import OUTPUTS_FILE, PROJECT_CONFIG_FILE, ROLLBACK_DIR
from ..models.config import BuildOptions


class PathResolver:
    """Resolves build paths within a job workspace"""

    def __init__(self, workspace: Union[str, Path], options: Optional[BuildOptions] = None):
        """Initialize path resolver

        Args:
            workspace: Root directory of the job workspace
            options: Layout options (defaults if None)
        """
        self.workspace = Path(workspace).resolve()
        self.options = options or BuildOptions()

    def resolve(self, path: Union[str, Path]) -> Path:
        """Resolve a path relative to the workspace

        Args:
            path: Path to resolve (can be relative or absolute)

        Returns:
            Resolved absolute path
        """
        path = Path(self.expand_path(str(path)))

        if path.is_absolute():
            return path

        # Resolve relative to workspace
        return (self.workspace / path).resolve()

    def get_repository_dir(self) -> Path:
        """Get git working copy path"""
        return self.resolve(self.options.repository_dir)

    def get_stage_dir(self) -> Path:
        """Get deployment staging directory path"""
        return self.resolve(self.options.stage_dir)

    def get_stage_source_dir(self) -> Path:
        """Get the metadata root inside the staging directory

        This is where the manifests go and what the deploy step consumes.
        """
        return self.get_stage_dir() / self.options.source_dir

    def get_build_dir(self, job_name: str, build_number: str) -> Path:
        """Get per-build artifact directory path

        Args:
            job_name: Job name (may contain '/' for folders)
            build_number: Build number
        """
        return self.resolve(self.options.artifacts_dir) / job_name / build_number

    def get_rollback_dir(self, job_name: str, build_number: str) -> Path:
        """Get rollback staging directory path"""
        return self.get_build_dir(job_name, build_number) / ROLLBACK_DIR

    def get_rollback_archive(self, job_name: str, build_number: str, build_tag: str) -> Path:
        """Get rollback archive path"""
        return self.get_build_dir(job_name, build_number) / f"{build_tag}.zip"

    def get_package_xml(self) -> Path:
        """Get the repository's own package.xml path"""
        return self.get_repository_dir() / self.options.package_xml

    def get_outputs_file(self) -> Path:
        """Get path of the published outputs file"""
        return self.get_stage_dir() / OUTPUTS_FILE

    def get_config_path(self) -> Path:
        """Get project configuration file path"""
        return self.workspace / PROJECT_CONFIG_FILE

    def expand_path(self, path: str) -> str:
        """Expand environment variables and user home in a path"""
        return os.path.expanduser(os.path.expandvars(path))
