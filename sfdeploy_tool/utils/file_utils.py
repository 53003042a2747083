# sfdeploy_tool/utils/file_utils.py
"""File operation utilities"""

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Dict, Iterable, Union

from ..api.exceptions import ArchiveError, ReplicationError
from ..models.metadata import MetadataDescriptor

logger = logging.getLogger(__name__)


def ensure_parent_dir(file_path: Path) -> Path:
    """
    Ensure parent directory exists

    Args:
        file_path: File path

    Returns:
        Parent directory path
    """
    parent = file_path.parent
    parent.mkdir(parents=True, exist_ok=True)
    return parent


def reset_directory(directory: Path) -> Path:
    """
    Remove a directory if present and create it empty

    Args:
        directory: Directory path

    Returns:
        The directory path
    """
    if directory.exists():
        logger.debug(f"Removing existing directory {directory}")
        shutil.rmtree(directory)
    directory.mkdir(parents=True)
    return directory


def remove_directory(directory: Path) -> None:
    """
    Remove a directory tree

    Raises:
        OSError: If the directory cannot be removed
    """
    shutil.rmtree(directory)


def replicate_members(members: Iterable[MetadataDescriptor],
                      source_dir: Path,
                      dest_dir: Path) -> int:
    """
    Copy member files keeping their repository-relative paths

    Args:
        members: Descriptors of the files to copy
        source_dir: Repository root
        dest_dir: Staging directory

    Returns:
        Number of files copied

    Raises:
        ReplicationError: If a file cannot be copied
    """
    copied = 0

    for member in members:
        src = source_dir / member.path
        dst = dest_dir / member.path

        try:
            ensure_parent_dir(dst)
            shutil.copy2(src, dst)
        except OSError as e:
            raise ReplicationError(f"Failed to copy {member.path}: {e}", member.path) from e

        logger.debug(f"Copied {member.path}")
        copied += 1

    return copied


def create_archive(source_dir: Path,
                   output_file: Path,
                   format: str = 'zip') -> Path:
    """
    Create archive from directory

    Args:
        source_dir: Source directory
        output_file: Output archive path
        format: Archive format (zip, gztar, bztar, xztar, tar)

    Returns:
        Path to created archive

    Raises:
        ArchiveError: If the archive cannot be written
    """

    # Remove extension from output_file as shutil.make_archive adds it
    base_name = str(output_file.with_suffix(''))

    try:
        ensure_parent_dir(output_file)
        archive_path = shutil.make_archive(
            base_name=base_name,
            format=format,
            root_dir=source_dir
        )
    except (OSError, ValueError) as e:
        raise ArchiveError(f"Failed to archive {source_dir}: {e}", str(output_file)) from e

    return Path(archive_path)


def write_properties(file_path: Path, values: Dict[str, str]) -> Path:
    """
    Write KEY=VALUE lines for a downstream job

    Args:
        file_path: Target file path
        values: Properties to write

    Returns:
        The file path
    """
    content = ''.join(f"{key}={value}\n" for key, value in values.items())
    ensure_parent_dir(file_path)
    atomic_write(file_path, content)
    return file_path


def atomic_write(file_path: Path,
                 content: Union[str, bytes],
                 mode: str = 'w') -> None:
    """
    Write file atomically

    Args:
        file_path: Target file path
        content: Content to write
        mode: Write mode
    """
    # Write to temporary file first
    temp_fd, temp_path = tempfile.mkstemp(dir=file_path.parent)

    try:
        with os.fdopen(temp_fd, mode) as f:
            f.write(content)

        # Atomic rename
        os.replace(temp_path, file_path)

    except Exception:
        # Clean up temp file on error
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise
