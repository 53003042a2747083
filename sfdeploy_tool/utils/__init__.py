# sfdeploy_tool/utils/__init__.py
"""Utility functions for sfdeploy-tool"""

from .file_utils import (
    atomic_write,
    create_archive,
    ensure_parent_dir,
    remove_directory,
    replicate_members,
    reset_directory,
    write_properties,
)

from .git_utils import (
    GitRepository,
    is_git_repository,
    run_git,
)

__all__ = [
    # File utilities
    "atomic_write",
    "create_archive",
    "ensure_parent_dir",
    "remove_directory",
    "replicate_members",
    "reset_directory",
    "write_properties",

    # Git utilities
    "GitRepository",
    "is_git_repository",
    "run_git",
]
