# tests/test_type_registry.py

import pytest

from sfdeploy_tool.api.exceptions import RegistryError
from sfdeploy_tool.core.type_registry import TypeRegistry, default_registry_path


def test_lookup_known_extension(registry):
    rule = registry.lookup("cls")

    assert rule.declared_type == "ApexClass"
    assert rule.container == "Classes"
    assert rule.destructible is True


def test_lookup_is_case_sensitive(registry):
    assert registry.lookup("CLS") is None
    assert "cls" in registry
    assert "Cls" not in registry


def test_lookup_unknown_extension(registry):
    assert registry.lookup("md") is None


def test_destructible_only_true_when_text_is_true(registry):
    assert registry.lookup("trigger").destructible is True  # "TRUE"
    assert registry.lookup("profile").destructible is False


def test_api_version(registry):
    assert registry.api_version == "37.0"


def test_declared_types_skip_sentinels(registry):
    assert registry.declared_types() == ["ApexClass", "CustomObject", "ApexTrigger", "Profile"]


def test_declared_types_without_repeats():
    registry = TypeRegistry.from_string("""
        <salesforceMetadata>
            <version API="40.0"/>
            <extension name="cmp"><container>aura</container><metadata>AuraDefinitionBundle</metadata><destructible>true</destructible></extension>
            <extension name="app"><container>aura</container><metadata>AuraDefinitionBundle</metadata><destructible>true</destructible></extension>
        </salesforceMetadata>
    """)

    assert registry.declared_types() == ["AuraDefinitionBundle"]
    assert len(registry) == 2


def test_rules_keep_document_order(registry):
    assert [rule.extension for rule in registry] == ["cls", "object", "trigger", "profile", "xml"]


def test_load_from_file(registry_file):
    registry = TypeRegistry.load(registry_file)

    assert registry.source == str(registry_file)
    assert registry.lookup("object").declared_type == "CustomObject"


def test_load_bundled_registry():
    registry = TypeRegistry.load()

    assert default_registry_path().name == "salesforce_metadata.xml"
    assert registry.lookup("cls").declared_type == "ApexClass"
    assert registry.lookup("xml").declared_type == "XML"
    assert registry.api_version


def test_load_missing_file(tmp_path):
    with pytest.raises(RegistryError, match="Cannot read"):
        TypeRegistry.load(tmp_path / "missing.xml")


def test_malformed_document():
    with pytest.raises(RegistryError, match="Malformed"):
        TypeRegistry.from_string("<salesforceMetadata><version")


def test_missing_version():
    with pytest.raises(RegistryError, match="API"):
        TypeRegistry.from_string("<salesforceMetadata></salesforceMetadata>")


def test_duplicate_extension():
    text = """
        <salesforceMetadata>
            <version API="37.0"/>
            <extension name="cls"><container>c</container><metadata>ApexClass</metadata><destructible>true</destructible></extension>
            <extension name="cls"><container>c</container><metadata>ApexClass</metadata><destructible>true</destructible></extension>
        </salesforceMetadata>
    """
    with pytest.raises(RegistryError, match="Duplicate"):
        TypeRegistry.from_string(text)


def test_extension_missing_child():
    text = """
        <salesforceMetadata>
            <version API="37.0"/>
            <extension name="cls"><container>c</container><destructible>true</destructible></extension>
        </salesforceMetadata>
    """
    with pytest.raises(RegistryError, match="<metadata>"):
        TypeRegistry.from_string(text)


def test_registry_error_code():
    with pytest.raises(RegistryError) as exc_info:
        TypeRegistry.from_string("not xml")

    assert exc_info.value.error_code == "SD001"
