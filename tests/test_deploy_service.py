# tests/test_deploy_service.py

import zipfile

import pytest

from sfdeploy_tool.api.exceptions import ArchiveError, ManifestWriteError, VcsError
from sfdeploy_tool.constants import Phase
from sfdeploy_tool.models import BuildEnvironment, BuildOptions, ChangeSet
from sfdeploy_tool.services.deploy_service import DeployService, FileReplicator

from .conftest import write_files, requires_git, git


WORKSPACE_FILES = {
    "src/classes/Foo.cls": "public class Foo { Integer x; }",
    "src/classes/Foo.cls-meta.xml": "<ApexClass/>",
    "src/classes/New.cls": "public class New {}",
    "src/objects/Lead.object": "<CustomObject/>",
    "README.md": "readme",
}

DIFF = ChangeSet(
    current_ref="cur",
    previous_ref="prev",
    additions=["src/classes/New.cls", "src/objects/Lead.object"],
    deletions=["src/classes/Old.cls", "src/profiles/Admin.profile"],
    modified_new=["src/classes/Foo.cls"],
    modified_old=["src/classes/Foo.cls"],
)

HISTORY = {
    "src/classes/Foo.cls": "public class Foo {}",
    "src/classes/Old.cls": "public class Old {}",
    "src/profiles/Admin.profile": "<Profile/>",
}


class RecordingReplicator(FileReplicator):

    def __init__(self):
        self.copied = []

    def copy(self, members, source_dir, dest_dir):
        self.copied.extend(member.path for member in members)
        return super().copy(members, source_dir, dest_dir)


@pytest.fixture
def workspace(tmp_path):
    root = tmp_path / "ws"
    write_files(root, WORKSPACE_FILES)
    return root


def make_environment(workspace, **kwargs):
    values = dict(commit="cur", workspace=workspace, job_name="deploy", build_number="5")
    values.update(kwargs)
    return BuildEnvironment(**values)


def make_service(registry, environment, source, **option_values):
    replicator = RecordingReplicator()
    service = DeployService(
        registry,
        environment,
        BuildOptions(**option_values),
        change_source=source,
        replicator=replicator
    )
    return service, replicator


def test_full_build_without_previous_commit(registry, workspace, fake_source_factory):
    source = fake_source_factory(tree=list(WORKSPACE_FILES))
    service, replicator = make_service(registry, make_environment(workspace), source)

    outcome = service.run()

    assert outcome.is_success, outcome.errors
    assert outcome.full_build
    assert source.change_set_calls == [("cur", None)]
    assert outcome.destructive_manifest is None
    assert outcome.completed_phases == list(Phase)

    stage = workspace / "sfdeploy"
    assert outcome.deploy_stage == (stage / "src").resolve()
    assert (stage / "src" / "package.xml").exists()
    assert not (stage / "src" / "destructiveChanges.xml").exists()
    assert (stage / "src/classes/Foo.cls").read_text() == WORKSPACE_FILES["src/classes/Foo.cls"]
    assert (stage / "src/classes/Foo.cls-meta.xml").exists()
    assert not (stage / "README.md").exists()
    assert outcome.replicated_count == 4
    assert "README.md is not a valid member of the API" in outcome.warnings


def test_force_initial_build_ignores_previous_commit(registry, workspace, fake_source_factory):
    source = fake_source_factory(diff=DIFF, tree=list(WORKSPACE_FILES))
    environment = make_environment(workspace, previous_commit="prev")
    service, _ = make_service(registry, environment, source, force_initial_build=True)

    outcome = service.run()

    assert outcome.is_success
    assert outcome.full_build
    assert source.change_set_calls == [("cur", None)]


def test_incremental_build(registry, workspace, fake_source_factory):
    source = fake_source_factory(diff=DIFF)
    environment = make_environment(workspace, previous_commit="prev")
    service, replicator = make_service(registry, environment, source)

    outcome = service.run()

    assert outcome.is_success, outcome.errors
    assert not outcome.full_build
    assert source.change_set_calls == [("cur", "prev")]
    assert outcome.destructive_manifest.name == "destructiveChanges.xml"
    assert outcome.destructive_manifest.exists()
    assert replicator.copied == ["src/classes/New.cls", "src/objects/Lead.object", "src/classes/Foo.cls"]
    assert "Admin.profile cannot be deleted via the API" in outcome.warnings
    assert outcome.rollback_archive is None
    assert source.registry_updates == []


def test_stage_directory_is_reset(registry, workspace, fake_source_factory):
    stale = workspace / "sfdeploy" / "src" / "classes" / "Stale.cls"
    write_files(workspace, {"sfdeploy/src/classes/Stale.cls": "old"})
    source = fake_source_factory(diff=DIFF)
    service, _ = make_service(registry, make_environment(workspace, previous_commit="prev"), source)

    outcome = service.run()

    assert outcome.is_success
    assert not stale.exists()


def test_outputs_are_published(registry, workspace, fake_source_factory):
    source = fake_source_factory(diff=DIFF, history=HISTORY)
    service, _ = make_service(
        registry, make_environment(workspace, previous_commit="prev"), source, rollback_enabled=True
    )

    outcome = service.run()

    properties = (workspace / "sfdeploy" / "sfdeploy.properties").read_text()
    assert f"SFDEPLOY_DEPLOY={outcome.deploy_stage}\n" in properties
    assert f"SFDEPLOY_ROLLBACK={outcome.rollback_archive}\n" in properties
    assert outcome.outputs["SFDEPLOY_DEPLOY"] == str(outcome.deploy_stage)


def test_rollback_package(registry, workspace, fake_source_factory):
    source = fake_source_factory(diff=DIFF, history=HISTORY)
    environment = make_environment(workspace, previous_commit="prev", build_tag="deploy-tag-5")
    service, _ = make_service(registry, environment, source, rollback_enabled=True)

    outcome = service.run()

    assert outcome.is_success, outcome.errors
    build_dir = workspace / ".sfdeploy" / "builds" / "deploy" / "5"
    assert outcome.rollback_archive == (build_dir / "deploy-tag-5.zip").resolve()
    assert not (build_dir / "rollback").exists()
    assert ("prev", "src/classes/Old.cls") in source.materialized

    with zipfile.ZipFile(outcome.rollback_archive) as archive:
        names = set(archive.namelist())
        package = archive.read("src/package.xml").decode("utf-8")
        destructive = archive.read("src/destructiveChanges.xml").decode("utf-8")
        old_foo = archive.read("src/classes/Foo.cls").decode("utf-8")

    assert "src/classes/Old.cls" in names
    assert "src/profiles/Admin.profile" in names
    assert "<members>Old</members>" in package
    assert "<members>Admin</members>" in package
    assert "<members>New</members>" in destructive
    assert "<members>Lead</members>" in destructive
    assert old_foo == HISTORY["src/classes/Foo.cls"]


def test_rollback_skipped_without_previous_commit(registry, workspace, fake_source_factory):
    source = fake_source_factory(tree=list(WORKSPACE_FILES))
    service, _ = make_service(registry, make_environment(workspace), source, rollback_enabled=True)

    outcome = service.run()

    assert outcome.is_success
    assert outcome.rollback_archive is None
    assert source.materialized == []
    assert "SFDEPLOY_ROLLBACK" not in outcome.outputs


def test_registry_update(registry, workspace, fake_source_factory):
    source = fake_source_factory(diff=DIFF)
    environment = make_environment(
        workspace, previous_commit="prev", committer_name="CI", committer_email="ci@example.com"
    )
    service, _ = make_service(registry, environment, source, update_package_enabled=True)

    outcome = service.run()

    assert outcome.is_success
    assert outcome.registry_updated
    package_xml, declared_types, api_version, name, email = source.registry_updates[0]
    assert package_xml == (workspace / "package.xml").resolve()
    assert declared_types == ["ApexClass", "CustomObject", "ApexTrigger", "Profile"]
    assert api_version == "37.0"
    assert (name, email) == ("CI", "ci@example.com")


def test_missing_commit_fails_first_phase(registry, workspace, fake_source_factory):
    source = fake_source_factory()
    service, _ = make_service(registry, make_environment(workspace, commit=""), source)

    outcome = service.run()

    assert outcome.is_failed
    assert outcome.failed_phase is Phase.RESOLVE_ENVIRONMENT
    assert outcome.errors[0].code == "SD003"
    assert "GIT_COMMIT" in outcome.message
    assert source.change_set_calls == []


def test_missing_workspace_fails(registry, tmp_path, fake_source_factory):
    source = fake_source_factory()
    service, _ = make_service(registry, make_environment(tmp_path / "missing"), source)

    outcome = service.run()

    assert outcome.failed_phase is Phase.RESOLVE_ENVIRONMENT
    assert outcome.errors[0].code == "SD002"


def test_change_set_failure_stops_the_run(registry, workspace, fake_source_factory):
    source = fake_source_factory(error=VcsError("bad revision 'prev'"))
    service, replicator = make_service(registry, make_environment(workspace, previous_commit="prev"), source)

    outcome = service.run()

    assert outcome.is_failed
    assert outcome.failed_phase is Phase.CHANGE_SET
    assert outcome.completed_phases == [Phase.RESOLVE_ENVIRONMENT, Phase.CHANGE_BASIS]
    assert outcome.errors[0].code == "SD004"
    assert outcome.errors[0].context["phase"] == "change_set"
    assert not (workspace / "sfdeploy").exists()
    assert replicator.copied == []


def test_replication_failure_reports_path(registry, workspace, fake_source_factory):
    diff = ChangeSet(current_ref="cur", previous_ref="prev", additions=["src/classes/Ghost.cls"])
    source = fake_source_factory(diff=diff)
    service, _ = make_service(registry, make_environment(workspace, previous_commit="prev"), source)

    outcome = service.run()

    assert outcome.failed_phase is Phase.REPLICATE
    assert outcome.errors[0].code == "SD005"
    assert outcome.errors[0].context["path"] == "src/classes/Ghost.cls"
    assert not (workspace / "sfdeploy" / "sfdeploy.properties").exists()


def test_outcome_to_dict(registry, workspace, fake_source_factory):
    source = fake_source_factory(diff=DIFF)
    service, _ = make_service(registry, make_environment(workspace, previous_commit="prev"), source)

    data = service.run().to_dict()

    assert data["status"] == "success"
    assert data["failed_phase"] is None
    assert data["completed_phases"][-1] == "publish"


class FailingArchiveReplicator(RecordingReplicator):

    def archive(self, directory, output_file):
        raise ArchiveError("No space left on device", str(output_file))


@pytest.mark.parametrize("layout", [
    {"stage_dir": "."},
    {"stage_dir": ".."},
    {"repository_dir": "sfdeploy"},
])
def test_stage_that_would_remove_the_checkout_is_rejected(registry, workspace, fake_source_factory, layout):
    source = fake_source_factory(diff=DIFF)
    service, replicator = make_service(
        registry, make_environment(workspace, previous_commit="prev"), source, **layout
    )

    outcome = service.run()

    assert outcome.failed_phase is Phase.RESOLVE_ENVIRONMENT
    assert outcome.errors[0].code == "SD002"
    assert source.change_set_calls == []
    assert (workspace / "src/classes/Foo.cls").exists()
    assert (workspace / "README.md").exists()


def test_manifest_write_failure_stops_the_run(registry, workspace, fake_source_factory, monkeypatch):
    source = fake_source_factory(diff=DIFF)
    service, replicator = make_service(
        registry, make_environment(workspace, previous_commit="prev"), source, update_package_enabled=True
    )

    def fail_write(manifest, location):
        raise ManifestWriteError(f"Failed to write manifest {location}: disk full", str(location))

    monkeypatch.setattr(service.manifest_engine, "write", fail_write)

    outcome = service.run()

    assert outcome.is_failed
    assert outcome.failed_phase is Phase.MANIFEST
    assert outcome.completed_phases == [Phase.RESOLVE_ENVIRONMENT, Phase.CHANGE_BASIS, Phase.CHANGE_SET]
    assert outcome.errors[0].code == "SD007"
    assert outcome.errors[0].context["path"].endswith("destructiveChanges.xml")
    assert replicator.copied == []
    assert source.registry_updates == []
    assert outcome.outputs == {}
    assert not (workspace / "sfdeploy" / "sfdeploy.properties").exists()


def test_archive_failure_stops_the_run(registry, workspace, fake_source_factory):
    source = fake_source_factory(diff=DIFF, history=HISTORY)
    service = DeployService(
        registry,
        make_environment(workspace, previous_commit="prev"),
        BuildOptions(rollback_enabled=True, update_package_enabled=True),
        change_source=source,
        replicator=FailingArchiveReplicator()
    )

    outcome = service.run()

    assert outcome.is_failed
    assert outcome.failed_phase is Phase.ROLLBACK
    assert outcome.completed_phases[-1] is Phase.REPLICATE
    assert outcome.errors[0].code == "SD006"
    assert outcome.errors[0].context["path"].endswith("deploy-5.zip")
    assert outcome.rollback_archive is None
    assert source.registry_updates == []
    assert outcome.outputs == {}
    assert not (workspace / "sfdeploy" / "sfdeploy.properties").exists()


@requires_git
def test_build_from_git_history(registry, git_repo):
    repo, first, second = git_repo
    environment = BuildEnvironment(
        commit=second,
        workspace=repo,
        previous_commit=first,
        job_name="deploy",
        build_number="2",
        committer_name="CI",
        committer_email="ci@example.com"
    )
    service = DeployService(
        registry,
        environment,
        BuildOptions(rollback_enabled=True, update_package_enabled=True)
    )

    outcome = service.run()

    assert outcome.is_success, outcome.errors
    stage = repo / "sfdeploy" / "src"
    package = (stage / "package.xml").read_text(encoding="utf-8")
    destructive = (stage / "destructiveChanges.xml").read_text(encoding="utf-8")
    assert "<members>New</members>" in package
    assert "<members>Foo</members>" in package
    assert "<members>Lead</members>" in package
    assert "<members>Old</members>" in destructive
    assert "Admin" not in destructive
    assert (stage / "classes" / "New.cls").exists()

    with zipfile.ZipFile(outcome.rollback_archive) as archive:
        assert archive.read("src/classes/Foo.cls").decode("utf-8") == "public class Foo {}"
        assert archive.read("src/classes/Old.cls").decode("utf-8") == "public class Old {}"

    assert outcome.registry_updated
    assert git(repo, "log", "-1", "--format=%an <%ae>") == "CI <ci@example.com>"
    assert "<members>*</members>" in (repo / "package.xml").read_text(encoding="utf-8")
