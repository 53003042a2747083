# sfdeploy_tool/models/manifest.py
"""Manifest models"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from ..constants import METADATA_NAMESPACE, MANIFEST_ENCODING, MANIFEST_INDENT, WILDCARD_MEMBER

XML_DECLARATION = f'<?xml version="1.0" encoding="{MANIFEST_ENCODING}"?>'


def _local_name(tag: str) -> str:
    """Strip the '{namespace}' prefix ElementTree puts on parsed tags"""
    return tag.rsplit('}', 1)[-1]


@dataclass
class Manifest:
    """Deployment manifest: declared type -> ordered member names

    Types keep the order in which they were first added, members keep their
    first-occurrence order within a type and are never repeated.
    """
    version: str
    _types: Dict[str, Dict[str, None]] = field(default_factory=dict, repr=False)

    def add_member(self, declared_type: str, member: str) -> bool:
        """Add a member under a type

        Returns:
            True if the member was new for that type
        """
        members = self._types.setdefault(declared_type, {})
        if member in members:
            return False
        members[member] = None
        return True

    @property
    def types(self) -> List[str]:
        """Get declared types in first-occurrence order"""
        return list(self._types)

    def members(self, declared_type: str) -> List[str]:
        """Get members of a type (empty if the type is absent)"""
        return list(self._types.get(declared_type, {}))

    def has_type(self, declared_type: str) -> bool:
        return declared_type in self._types

    @property
    def is_empty(self) -> bool:
        return not self._types

    @property
    def member_count(self) -> int:
        return sum(len(members) for members in self._types.values())

    def to_dict(self) -> Dict[str, List[str]]:
        """Convert to dictionary"""
        return {name: list(members) for name, members in self._types.items()}

    def to_element(self) -> ET.Element:
        """Build the Package element tree"""
        root = ET.Element('Package', {'xmlns': METADATA_NAMESPACE})

        for declared_type, members in self._types.items():
            types_element = ET.SubElement(root, 'types')
            ET.SubElement(types_element, 'name').text = declared_type
            for member in members:
                ET.SubElement(types_element, 'members').text = member

        ET.SubElement(root, 'version').text = self.version
        return root

    def to_xml(self) -> str:
        """Serialize to an indented XML document"""
        root = self.to_element()
        ET.indent(root, space=MANIFEST_INDENT)
        body = ET.tostring(root, encoding='unicode')
        return f"{XML_DECLARATION}\n{body}\n"

    @classmethod
    def from_xml(cls, text: str) -> 'Manifest':
        """Parse a Package document

        Raises:
            ET.ParseError: If the document is not well-formed XML
            ValueError: If the root element is not a Package
        """
        root = ET.fromstring(text)
        if _local_name(root.tag) != 'Package':
            raise ValueError(f"Expected a Package document, found <{_local_name(root.tag)}>")

        manifest = cls(version='')
        for child in root:
            name = _local_name(child.tag)
            if name == 'version':
                manifest.version = (child.text or '').strip()
            elif name == 'types':
                declared_type = None
                members = []
                for item in child:
                    item_name = _local_name(item.tag)
                    if item_name == 'name':
                        declared_type = (item.text or '').strip()
                    elif item_name == 'members':
                        members.append((item.text or '').strip())
                if declared_type:
                    for member in members:
                        manifest.add_member(declared_type, member)

        return manifest

    def add_missing_types(self, declared_types: Iterable[str]) -> List[str]:
        """Add a wildcard member for every declared type not yet listed

        Returns:
            Names of the types that were added
        """
        added = []
        for declared_type in declared_types:
            if not self.has_type(declared_type):
                self.add_member(declared_type, WILDCARD_MEMBER)
                added.append(declared_type)
        return added


def _parse_document(text: str) -> ET.Element:
    """Parse XML text keeping comments"""
    parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
    return ET.fromstring(text, parser=parser)


def add_missing_types_to_document(text: str, declared_types: Iterable[str]) -> Tuple[Optional[str], List[str]]:
    """Add a wildcard types group for each declared type a Package document lacks

    The groups go right before <version> (at the end if there is none).
    Every other node of the document, comments included, is kept as it is.

    Args:
        text: Existing Package document
        declared_types: Types the document must list

    Returns:
        (updated document or None when nothing was missing, added type names)

    Raises:
        ET.ParseError: If the document is not well-formed XML
        ValueError: If the root element is not a Package
    """
    root = _parse_document(text)
    if _local_name(root.tag) != 'Package':
        raise ValueError(f"Expected a Package document, found <{_local_name(root.tag)}>")

    namespace = root.tag[1:].split('}', 1)[0] if root.tag.startswith('{') else ''

    def qualified(name: str) -> str:
        return f"{{{namespace}}}{name}" if namespace else name

    listed = set()
    for types_element in root.findall(qualified('types')):
        name = types_element.find(qualified('name'))
        if name is not None and name.text:
            listed.add(name.text.strip())

    added = [t for t in dict.fromkeys(declared_types) if t not in listed]
    if not added:
        return None, []

    children = list(root)
    version = root.find(qualified('version'))
    if version is not None:
        position = children.index(version)
        tail = children[position - 1].tail if position else root.text
    elif children:
        position = len(children)
        tail = children[-1].tail
        children[-1].tail = root.text
    else:
        position = 0
        tail = '\n'
        root.text = '\n' + MANIFEST_INDENT

    for offset, declared_type in enumerate(added):
        element = ET.Element(qualified('types'))
        ET.SubElement(element, qualified('name')).text = declared_type
        ET.SubElement(element, qualified('members')).text = WILDCARD_MEMBER
        ET.indent(element, space=MANIFEST_INDENT, level=1)
        element.tail = tail
        root.insert(position + offset, element)

    if namespace:
        body = ET.tostring(root, encoding='unicode', default_namespace=namespace)
    else:
        body = ET.tostring(root, encoding='unicode')
    return f"{XML_DECLARATION}\n{body}\n", added
