"""Classify repository files by metadata type"""

import logging
import posixpath

from .type_registry import TypeRegistry
from ..constants import EMPTY_CONTAINER, INVALID_TYPE
from ..models.metadata import MetadataDescriptor

logger = logging.getLogger(__name__)


def split_path(path: str):
    """Split a repository path into (directory, member, extension)

    The extension is whatever follows the last dot of the file name, so
    'classes/Foo.cls-meta.xml' gives ('classes', 'Foo.cls-meta', 'xml').
    """
    normalized = path.replace('\\', '/')
    directory, file_name = posixpath.split(normalized)

    if '.' in file_name:
        member, _, extension = file_name.rpartition('.')
    else:
        member, extension = file_name, ''

    return directory, member, extension


class Classifier:
    """Map file paths to metadata descriptors using a type registry"""

    def __init__(self, registry: TypeRegistry):
        self.registry = registry

    def classify(self, path: str) -> MetadataDescriptor:
        """Describe a file

        Unknown extensions give an invalid descriptor rather than an error.
        """
        directory, member, extension = split_path(path)
        rule = self.registry.lookup(extension)

        if rule is None:
            logger.debug(f"No metadata type for '{path}' (extension '{extension}')")
            return MetadataDescriptor(
                extension=extension,
                container=EMPTY_CONTAINER,
                member=member,
                declared_type=INVALID_TYPE,
                relative_path=directory,
                destructible=False,
                valid=False,
                path=path
            )

        logger.debug(f"{path} -> {rule.declared_type} ({rule.container})")
        return MetadataDescriptor(
            extension=extension,
            container=rule.container,
            member=member,
            declared_type=rule.declared_type,
            relative_path=directory,
            destructible=rule.destructible,
            valid=True,
            path=path
        )
