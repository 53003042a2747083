"""Metadata type registry loaded from the extension mapping document"""

import logging
import xml.etree.ElementTree as ET
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, List, Optional, Union

from ..api.exceptions import RegistryError
from ..constants import (
    REGISTRY_EXTENSION_TAG,
    REGISTRY_RESOURCE,
    REGISTRY_VERSION_ATTRIBUTE,
    SENTINEL_TYPES,
)
from ..models.metadata import TypeRule

logger = logging.getLogger(__name__)


def _parse_bool(text: Optional[str]) -> bool:
    """Only a case-insensitive 'true' is true"""
    return (text or '').strip().lower() == 'true'


def default_registry_path() -> Path:
    """Get the path of the registry document bundled with the package"""
    return Path(str(resources.files('sfdeploy_tool') / 'resources' / REGISTRY_RESOURCE))


class TypeRegistry:
    """Read-only lookup from file extension to metadata type rule

    Build one with load() or from_string() and pass it to the classes that
    need it; nothing can be added or changed once it is built.
    """

    def __init__(self, rules: Dict[str, TypeRule], api_version: str, source: Optional[str] = None):
        """Initialize registry

        Args:
            rules: Rules keyed by extension
            api_version: Deployment API version declared by the document
            source: Where the rules were loaded from (for messages)
        """
        self._rules = MappingProxyType(dict(rules))
        self._api_version = api_version
        self.source = source

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> 'TypeRegistry':
        """Load registry from an XML document

        Args:
            path: Registry document (bundled document if None)

        Returns:
            Loaded registry

        Raises:
            RegistryError: If the document is missing or malformed
        """
        path = Path(path) if path else default_registry_path()

        try:
            text = path.read_text(encoding='utf-8')
        except OSError as e:
            raise RegistryError(f"Cannot read metadata registry {path}: {e}") from e

        return cls.from_string(text, source=str(path))

    @classmethod
    def from_string(cls, text: str, source: Optional[str] = None) -> 'TypeRegistry':
        """Parse registry from XML text

        Raises:
            RegistryError: If the document is malformed
        """
        source = source or '<string>'

        try:
            root = ET.fromstring(text)
        except ET.ParseError as e:
            raise RegistryError(f"Malformed metadata registry {source}: {e}") from e

        api_version = None
        for element in root.iter():
            if REGISTRY_VERSION_ATTRIBUTE in element.attrib:
                api_version = element.attrib[REGISTRY_VERSION_ATTRIBUTE].strip()
                break

        if not api_version:
            raise RegistryError(
                f"Metadata registry {source} does not declare an {REGISTRY_VERSION_ATTRIBUTE} version"
            )

        rules = {}
        for element in root.iter(REGISTRY_EXTENSION_TAG):
            extension = element.get('name')
            if not extension:
                raise RegistryError(f"Extension without a name in metadata registry {source}")
            if extension in rules:
                raise RegistryError(f"Duplicate extension '{extension}' in metadata registry {source}")

            values = {}
            for tag in ('container', 'metadata', 'destructible'):
                child = element.find(tag)
                if child is None:
                    raise RegistryError(
                        f"Extension '{extension}' has no <{tag}> in metadata registry {source}"
                    )
                values[tag] = (child.text or '').strip()

            rules[extension] = TypeRule(
                extension=extension,
                container=values['container'],
                declared_type=values['metadata'],
                destructible=_parse_bool(values['destructible'])
            )

        logger.debug(f"Loaded {len(rules)} metadata types from {source} (API {api_version})")
        return cls(rules, api_version, source=source)

    @property
    def api_version(self) -> str:
        """Get deployment API version"""
        return self._api_version

    def lookup(self, extension: str) -> Optional[TypeRule]:
        """Find the rule for an extension (case-sensitive)"""
        return self._rules.get(extension)

    def rules(self) -> List[TypeRule]:
        """Get all rules in document order"""
        return list(self._rules.values())

    def declared_types(self) -> List[str]:
        """Get every deployable declared type, in document order, without repeats"""
        seen = {}
        for rule in self._rules.values():
            if rule.declared_type not in SENTINEL_TYPES:
                seen.setdefault(rule.declared_type, None)
        return list(seen)

    def __contains__(self, extension: str) -> bool:
        return extension in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[TypeRule]:
        return iter(self._rules.values())
