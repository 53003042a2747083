# tests/conftest.py
"""
Shared fixtures for the sfdeploy-tool tests.

The fixture registry is small and fixed so expectations stay readable:
Apex classes and objects can be deleted, profiles cannot, and '.xml'
files map to the XML placeholder type.
"""

import logging
import shutil
import subprocess
from pathlib import Path

import pytest

from sfdeploy_tool.core.type_registry import TypeRegistry
from sfdeploy_tool.models.changeset import ChangeSet


REGISTRY_XML = """\
<?xml version="1.0" encoding="UTF-8"?>
<salesforceMetadata>
    <version API="37.0"/>
    <extension name="cls">
        <container>Classes</container>
        <metadata>ApexClass</metadata>
        <destructible>true</destructible>
    </extension>
    <extension name="object">
        <container>Objects</container>
        <metadata>CustomObject</metadata>
        <destructible>true</destructible>
    </extension>
    <extension name="trigger">
        <container>triggers</container>
        <metadata>ApexTrigger</metadata>
        <destructible>TRUE</destructible>
    </extension>
    <extension name="profile">
        <container>profiles</container>
        <metadata>Profile</metadata>
        <destructible>false</destructible>
    </extension>
    <extension name="xml">
        <container>empty</container>
        <metadata>XML</metadata>
        <destructible>false</destructible>
    </extension>
</salesforceMetadata>
"""


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo logging changes made by CLI invocations"""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    logging.disable(logging.NOTSET)
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def registry_xml() -> str:
    return REGISTRY_XML


@pytest.fixture
def registry() -> TypeRegistry:
    return TypeRegistry.from_string(REGISTRY_XML, source="fixture")


@pytest.fixture
def registry_file(tmp_path) -> Path:
    path = tmp_path / "registry.xml"
    path.write_text(REGISTRY_XML, encoding="utf-8")
    return path


def write_files(root: Path, files: dict) -> None:
    """Create files under root from {relative path: content}"""
    for rel_path, content in files.items():
        target = root / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")


class FakeChangeSource:
    """In-memory stand-in for the git working copy"""

    def __init__(self, diff=None, tree=None, history=None, error=None, registry_changed=True):
        self.diff = diff or ChangeSet(current_ref="cur")
        self.tree = tree or []
        self.history = history or {}
        self.error = error
        self.registry_changed = registry_changed
        self.change_set_calls = []
        self.materialized = []
        self.registry_updates = []

    def change_set(self, current_ref, previous_ref=None):
        self.change_set_calls.append((current_ref, previous_ref))
        if self.error:
            raise self.error
        if previous_ref is None:
            return ChangeSet(current_ref=current_ref, additions=list(self.tree))
        return self.diff

    def materialize(self, ref, members, dest_dir):
        count = 0
        for member in members:
            target = dest_dir / member.path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(self.history[member.path], encoding="utf-8")
            self.materialized.append((ref, member.path))
            count += 1
        return count

    def update_registry_file(self, package_xml, declared_types, api_version,
                             author_name=None, author_email=None):
        self.registry_updates.append(
            (package_xml, list(declared_types), api_version, author_name, author_email)
        )
        return self.registry_changed


@pytest.fixture
def fake_source_factory():
    return FakeChangeSource


requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")


def git(repo: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args], cwd=repo, capture_output=True, text=True, check=True
    )
    return result.stdout.strip()


@pytest.fixture
def git_repo(tmp_path):
    """Repository with two commits

    First commit: Foo.cls, Old.cls (+ meta), Account.object, Admin.profile.
    Second commit: Foo.cls changed, Old.cls and its meta deleted, Admin.profile
    deleted, New.cls and Lead.object added.
    """
    repo = tmp_path / "workspace"
    repo.mkdir()
    git(repo, "init", "-q")
    git(repo, "config", "user.name", "Test User")
    git(repo, "config", "user.email", "test@example.com")
    git(repo, "config", "commit.gpgsign", "false")

    write_files(repo, {
        "src/classes/Foo.cls": "public class Foo {}",
        "src/classes/Foo.cls-meta.xml": "<ApexClass/>",
        "src/classes/Old.cls": "public class Old {}",
        "src/classes/Old.cls-meta.xml": "<ApexClass/>",
        "src/objects/Account.object": "<CustomObject/>",
        "src/profiles/Admin.profile": "<Profile/>",
        "README.md": "readme",
    })
    git(repo, "add", "-A")
    git(repo, "commit", "-q", "-m", "initial")
    first = git(repo, "rev-parse", "HEAD")

    write_files(repo, {
        "src/classes/Foo.cls": "public class Foo { Integer x; }",
        "src/classes/New.cls": "public class New {}",
        "src/classes/New.cls-meta.xml": "<ApexClass/>",
        "src/objects/Lead.object": "<CustomObject/>",
    })
    (repo / "src/classes/Old.cls").unlink()
    (repo / "src/classes/Old.cls-meta.xml").unlink()
    (repo / "src/profiles/Admin.profile").unlink()
    git(repo, "add", "-A")
    git(repo, "commit", "-q", "-m", "second")
    second = git(repo, "rev-parse", "HEAD")

    return repo, first, second
