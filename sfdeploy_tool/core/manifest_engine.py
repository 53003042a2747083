"""Manifest engine for building deployment manifests"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .classifier import Classifier
from .type_registry import TypeRegistry
from ..api.exceptions import ManifestWriteError
from ..constants import DESTRUCTIVE_MANIFEST_FILE, PACKAGE_MANIFEST_FILE
from ..models.manifest import Manifest
from ..models.result import ManifestBuildResult, ManifestSet
from ..utils.file_utils import atomic_write, ensure_parent_dir

logger = logging.getLogger(__name__)


class ManifestEngine:
    """Fold changed file paths into package manifests"""

    def __init__(self, registry: TypeRegistry, classifier: Optional[Classifier] = None):
        """Initialize manifest engine

        Args:
            registry: Metadata type registry
            classifier: Classifier to use (one over the registry if None)
        """
        self.registry = registry
        self.classifier = classifier or Classifier(registry)

    def build(self, paths: Iterable[str], destructive: bool = False) -> ManifestBuildResult:
        """Build a manifest from repository paths

        Each path is classified in order. Companion '-meta' files are accepted
        without a manifest entry, other unknown or plain XML files are
        dropped, and for a destructive manifest members whose type cannot be
        deleted are dropped with a warning.

        Args:
            paths: Repository-relative file paths
            destructive: Whether the manifest lists deletions

        Returns:
            ManifestBuildResult with the manifest and accepted descriptors
        """
        result = ManifestBuildResult(
            manifest=Manifest(version=self.registry.api_version),
            destructive=destructive
        )

        for path in paths:
            metadata = self.classifier.classify(path)

            # Type validity is checked before destructibility
            if metadata.is_sentinel:
                if metadata.is_companion:
                    logger.debug(f"{metadata.file_name} is a valid member, but unnecessary for manifest")
                    result.accepted.append(metadata)
                else:
                    message = f"{metadata.file_name} is not a valid member of the API"
                    logger.warning(message)
                    result.warnings.append(message)
                    result.skipped.append(metadata)
                continue

            if destructive and not metadata.destructible:
                message = f"{metadata.file_name} cannot be deleted via the API"
                logger.warning(message)
                result.warnings.append(message)
                result.skipped.append(metadata)
                continue

            if not result.manifest.add_member(metadata.declared_type, metadata.member):
                logger.debug(f"{metadata.member} already listed under {metadata.declared_type}")
            result.accepted.append(metadata)

        return result

    def write(self, manifest: Manifest, location: Union[str, Path]) -> Path:
        """Write a manifest atomically

        Raises:
            ManifestWriteError: If the manifest cannot be serialized or written;
                no file is left at the location in that case
        """
        location = Path(location)

        try:
            content = manifest.to_xml()
            ensure_parent_dir(location)
            atomic_write(location, content.encode('utf-8'), mode='wb')
        except (OSError, ValueError, TypeError) as e:
            raise ManifestWriteError(f"Failed to write manifest {location}: {e}", str(location)) from e

        logger.info(f"Saved manifest to {location}")
        return location

    def generate(self,
                 paths: Iterable[str],
                 location: Union[str, Path],
                 destructive: bool = False) -> ManifestBuildResult:
        """Build a manifest and write it to a file"""
        result = self.build(paths, destructive=destructive)
        result.path = self.write(result.manifest, location)
        return result

    def generate_manifests(self,
                           destructions: List[str],
                           updates: List[str],
                           destination: Union[str, Path]) -> ManifestSet:
        """Write destructiveChanges.xml (when anything is deleted) and package.xml

        Args:
            destructions: Paths removed by the change
            updates: Paths added or changed
            destination: Directory receiving the manifests

        Returns:
            ManifestSet with both build results
        """
        destination = Path(destination)
        destructive = None

        if destructions:
            destructive = self.generate(
                destructions, destination / DESTRUCTIVE_MANIFEST_FILE, destructive=True
            )

        package = self.generate(updates, destination / PACKAGE_MANIFEST_FILE)
        return ManifestSet(package=package, destructive=destructive)

