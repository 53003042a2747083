"""Git operation utilities"""

import logging
import subprocess
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .file_utils import atomic_write, ensure_parent_dir
from ..api.exceptions import VcsError
from ..constants import PACKAGE_UPDATE_COMMIT_MESSAGE
from ..models.changeset import ChangeSet
from ..models.manifest import Manifest, add_missing_types_to_document
from ..models.metadata import MetadataDescriptor

logger = logging.getLogger(__name__)


def run_git(path: Path, args: Sequence[str], text: bool = True) -> subprocess.CompletedProcess:
    """
    Run a git command

    Args:
        path: Repository path
        args: Arguments after 'git'
        text: Decode output as text

    Returns:
        Completed process

    Raises:
        VcsError: If git is missing or exits with an error
    """
    command = ['git'] + list(args)
    try:
        return subprocess.run(
            command,
            cwd=path,
            capture_output=True,
            text=text,
            check=True
        )
    except FileNotFoundError as e:
        raise VcsError(f"git executable not found: {e}", ' '.join(command)) from e
    except subprocess.CalledProcessError as e:
        stderr = e.stderr.decode('utf-8', 'replace') if isinstance(e.stderr, bytes) else e.stderr
        raise VcsError(
            f"'{' '.join(command)}' failed: {(stderr or '').strip()}",
            ' '.join(command)
        ) from e


def _split_nul(output: str) -> List[str]:
    return [item for item in output.split('\0') if item]


def is_git_repository(path: Path) -> bool:
    """
    Check if directory is a Git repository

    Args:
        path: Directory path

    Returns:
        True if it's a Git repository
    """
    try:
        result = subprocess.run(
            ['git', 'rev-parse', '--is-inside-work-tree'],
            cwd=path,
            capture_output=True,
            text=True
        )
        return result.returncode == 0
    except (FileNotFoundError, NotADirectoryError):
        return False


class GitRepository:
    """Change sets and file contents from a git working copy"""

    def __init__(self, path: Path):
        self.path = Path(path)

    def resolve(self, ref: str) -> str:
        """Resolve a reference to a full commit id

        Raises:
            VcsError: If the reference does not name a commit
        """
        result = run_git(self.path, ['rev-parse', '--verify', f"{ref}^{{commit}}"])
        return result.stdout.strip()

    def diff(self, previous_ref: str, current_ref: str) -> ChangeSet:
        """
        Get files changed between two commits

        Renames are reported as a deletion plus an addition.

        Args:
            previous_ref: Older commit
            current_ref: Newer commit

        Returns:
            ChangeSet between the commits
        """
        result = run_git(self.path, [
            'diff', '--name-status', '--no-renames', '-z', previous_ref, current_ref
        ])

        change_set = ChangeSet(current_ref=current_ref, previous_ref=previous_ref)
        items = _split_nul(result.stdout)

        for status, path in zip(items[0::2], items[1::2]):
            kind = status[0]
            if kind == 'A':
                change_set.additions.append(path)
            elif kind == 'D':
                change_set.deletions.append(path)
            elif kind in ('M', 'T'):
                change_set.modified_new.append(path)
                change_set.modified_old.append(path)
            else:
                logger.warning(f"Ignoring change '{status}' for {path}")

        logger.info(
            f"{len(change_set.additions)} added, {len(change_set.deletions)} deleted, "
            f"{len(change_set.modified_new)} modified between {previous_ref} and {current_ref}"
        )
        return change_set

    def list_all(self, ref: str) -> List[str]:
        """
        List every file at a commit

        Args:
            ref: Commit reference

        Returns:
            Repository-relative file paths
        """
        result = run_git(self.path, ['ls-tree', '-r', '--name-only', '-z', ref])
        return _split_nul(result.stdout)

    def change_set(self, current_ref: str, previous_ref: Optional[str] = None) -> ChangeSet:
        """
        Get the change set for a build

        Without a previous commit every file at the current commit counts
        as an addition.
        """
        if previous_ref is None:
            files = self.list_all(current_ref)
            logger.info(f"Full build: {len(files)} files at {current_ref}")
            return ChangeSet(current_ref=current_ref, additions=files)

        return self.diff(previous_ref, current_ref)

    def content_at(self, ref: str, path: str) -> bytes:
        """
        Get file content at a commit

        Args:
            ref: Commit reference
            path: Repository-relative file path

        Returns:
            Raw file content
        """
        result = run_git(self.path, ['cat-file', 'blob', f"{ref}:{path}"], text=False)
        return result.stdout

    def materialize(self,
                    ref: str,
                    members: Iterable[MetadataDescriptor],
                    dest_dir: Path) -> int:
        """
        Write files as they were at a commit into a directory

        Args:
            ref: Commit reference
            members: Descriptors of the files to write
            dest_dir: Target directory (repository-relative paths are kept)

        Returns:
            Number of files written
        """
        count = 0
        for member in members:
            target = dest_dir / member.path
            ensure_parent_dir(target)
            target.write_bytes(self.content_at(ref, member.path))
            count += 1
        return count

    def commit_file(self,
                    file_path: Path,
                    message: str,
                    author_name: Optional[str] = None,
                    author_email: Optional[str] = None) -> bool:
        """
        Commit a single file if it has changes

        Args:
            file_path: File inside the repository
            message: Commit message
            author_name: Author and committer name (git config if None)
            author_email: Author and committer email (git config if None)

        Returns:
            True if a commit was made
        """
        relative = str(Path(file_path).resolve().relative_to(self.path.resolve()))
        run_git(self.path, ['add', '--', relative])

        staged = subprocess.run(
            ['git', 'diff', '--cached', '--quiet', '--', relative],
            cwd=self.path
        )
        if staged.returncode == 0:
            return False

        identity = []
        if author_name:
            identity += ['-c', f"user.name={author_name}"]
        if author_email:
            identity += ['-c', f"user.email={author_email}"]

        run_git(self.path, identity + ['commit', '-m', message, '--', relative])
        return True

    def update_registry_file(self,
                             package_xml: Path,
                             declared_types: Iterable[str],
                             api_version: str,
                             author_name: Optional[str] = None,
                             author_email: Optional[str] = None) -> bool:
        """
        Make the repository manifest list every declared type and commit it

        Missing types are added with a wildcard member; everything else in an
        existing file is left untouched. A missing file is created.

        Args:
            package_xml: Repository manifest path
            declared_types: Types the manifest must list
            api_version: Version for a newly created manifest
            author_name: Commit identity name
            author_email: Commit identity email

        Returns:
            True if the manifest had to change
        """
        package_xml = Path(package_xml)

        if package_xml.exists():
            content, added = add_missing_types_to_document(
                package_xml.read_text(encoding='utf-8'), declared_types
            )
        else:
            manifest = Manifest(version=api_version)
            added = manifest.add_missing_types(declared_types)
            content = manifest.to_xml()

        if not added:
            logger.info(f"{package_xml} already lists every declared type")
            return False

        logger.info(f"Adding {len(added)} type(s) to {package_xml}: {', '.join(added)}")
        ensure_parent_dir(package_xml)
        atomic_write(package_xml, content.encode('utf-8'), mode='wb')

        self.commit_file(package_xml, PACKAGE_UPDATE_COMMIT_MESSAGE, author_name, author_email)
        return True
