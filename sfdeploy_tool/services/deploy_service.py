"""Deploy service: change set to staged deployment package"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from ..api.exceptions import ConfigError, MissingParameterError, PhaseError, VcsError
from ..constants import (
    ENV_COMMIT,
    OUTPUT_DEPLOY_STAGE,
    OUTPUT_ROLLBACK_ARCHIVE,
    ROLLBACK_ARCHIVE_FORMAT,
    Phase,
)
from ..core.manifest_engine import ManifestEngine
from ..core.path_resolver import PathResolver
from ..core.type_registry import TypeRegistry
from ..models.changeset import ChangeSet
from ..models.config import BuildEnvironment, BuildOptions
from ..models.metadata import MetadataDescriptor
from ..models.result import DeploymentOutcome, ManifestSet, OperationStatus
from ..utils.file_utils import (
    create_archive,
    remove_directory,
    replicate_members,
    reset_directory,
    write_properties,
)
from ..utils.git_utils import GitRepository, is_git_repository

logger = logging.getLogger(__name__)


class FileReplicator:
    """Copies, archives and removes staging content on the local filesystem"""

    def copy(self, members: List[MetadataDescriptor], source_dir: Path, dest_dir: Path) -> int:
        return replicate_members(members, source_dir, dest_dir)

    def archive(self, directory: Path, output_file: Path) -> Path:
        return create_archive(directory, output_file, format=ROLLBACK_ARCHIVE_FORMAT)

    def remove_directory(self, directory: Path) -> None:
        remove_directory(directory)


@dataclass
class BuildState:
    """Values handed from one phase to the next"""
    previous_commit: Optional[str] = None
    change_set: Optional[ChangeSet] = None
    manifests: Optional[ManifestSet] = None


class DeployService:
    """Runs one build: change set, manifests, staging, rollback package,
    repository manifest update and published outputs

    Phases run in order and the first failure stops the run. run() never
    raises; the returned outcome names the phase that failed.
    """

    def __init__(self,
                 registry: TypeRegistry,
                 environment: BuildEnvironment,
                 options: Optional[BuildOptions] = None,
                 change_source=None,
                 replicator=None,
                 path_resolver: Optional[PathResolver] = None):
        """
        Initialize deploy service

        Args:
            registry: Metadata type registry
            environment: Job runner values for this build
            options: Build options (defaults if None)
            change_source: Provides change sets, historical content and the
                repository manifest update (git working copy if None)
            replicator: Copies, archives and removes files (local filesystem if None)
            path_resolver: Path resolver (built from the workspace if None)
        """
        self.registry = registry
        self.environment = environment
        self.options = options or BuildOptions()
        self.path_resolver = path_resolver or PathResolver(environment.workspace, self.options)
        self.change_source = change_source or GitRepository(self.path_resolver.get_repository_dir())
        self.replicator = replicator or FileReplicator()
        self.manifest_engine = ManifestEngine(registry)

    def run(self) -> DeploymentOutcome:
        """
        Execute the build

        Returns:
            DeploymentOutcome: success with the produced artifacts, or
            failure with the failed phase and its cause
        """
        outcome = DeploymentOutcome(status=OperationStatus.IN_PROGRESS)
        state = BuildState()

        for phase, handler in self._phases():
            try:
                self._run_phase(phase, handler, state, outcome)
            except PhaseError as e:
                logger.error(f"Build failed during {phase.value}: {e.cause}")
                outcome.failed_phase = e.phase
                outcome.message = str(e)
                context = {'phase': e.phase.value}
                if e.path:
                    context['path'] = e.path
                outcome.add_error(e.error_code, str(e.cause), **context)
                outcome.complete(OperationStatus.FAILED)
                return outcome

        outcome.message = "Deployment package created"
        outcome.complete(OperationStatus.SUCCESS)
        return outcome

    def _phases(self) -> List[Tuple[Phase, Callable]]:
        return [
            (Phase.RESOLVE_ENVIRONMENT, self._resolve_environment),
            (Phase.CHANGE_BASIS, self._determine_change_basis),
            (Phase.CHANGE_SET, self._obtain_change_set),
            (Phase.MANIFEST, self._generate_manifests),
            (Phase.REPLICATE, self._replicate),
            (Phase.ROLLBACK, self._package_rollback),
            (Phase.REGISTRY_UPDATE, self._update_registry),
            (Phase.PUBLISH, self._publish),
        ]

    def _run_phase(self,
                   phase: Phase,
                   handler: Callable,
                   state: BuildState,
                   outcome: DeploymentOutcome) -> None:
        logger.debug(f"Starting {phase.value}")
        try:
            handler(state, outcome)
        except PhaseError:
            raise
        except Exception as e:
            raise PhaseError(phase, e) from e
        outcome.completed_phases.append(phase)

    def _resolve_environment(self, state: BuildState, outcome: DeploymentOutcome) -> None:
        env = self.environment

        if not env.commit:
            raise MissingParameterError(ENV_COMMIT)

        if not env.workspace.is_dir():
            raise ConfigError(f"Workspace not found: {env.workspace}")

        if isinstance(self.change_source, GitRepository) and not is_git_repository(self.change_source.path):
            raise VcsError(f"Not a git repository: {self.change_source.path}")

        self._check_scratch_dirs()

        logger.info(f"Building {env.job_name} #{env.build_number} at commit {env.commit}")

    def _check_scratch_dirs(self) -> None:
        """Refuse directories whose reset would delete the repository or workspace"""
        env = self.environment
        protected = (
            self.path_resolver.get_repository_dir(),
            self.path_resolver.workspace,
        )
        scratch = {
            'stage_dir': self.path_resolver.get_stage_dir(),
            'artifacts_dir': self.path_resolver.get_rollback_dir(env.job_name, env.build_number),
        }

        for option, directory in scratch.items():
            for path in protected:
                if directory == path or directory in path.parents:
                    raise ConfigError(
                        f"{option} resolves to {directory}, which would remove {path} when reset"
                    )

    def _determine_change_basis(self, state: BuildState, outcome: DeploymentOutcome) -> None:
        env = self.environment

        if not env.has_previous_commit:
            logger.info("Did not find previous successful commit, building the full tree")
            state.previous_commit = None
        elif self.options.force_initial_build:
            logger.info("Initial build forced, building the full tree")
            state.previous_commit = None
        else:
            logger.info(f"Found previous successful commit: {env.previous_commit}")
            state.previous_commit = env.previous_commit

        outcome.full_build = state.previous_commit is None

    def _obtain_change_set(self, state: BuildState, outcome: DeploymentOutcome) -> None:
        state.change_set = self.change_source.change_set(self.environment.commit, state.previous_commit)

    def _generate_manifests(self, state: BuildState, outcome: DeploymentOutcome) -> None:
        stage_dir = reset_directory(self.path_resolver.get_stage_dir())
        outcome.deploy_stage = self.path_resolver.get_stage_source_dir()

        change_set = state.change_set
        state.manifests = self.manifest_engine.generate_manifests(
            change_set.deletions,
            change_set.updates,
            outcome.deploy_stage
        )

        outcome.package_manifest = state.manifests.package.path
        if state.manifests.destructive:
            outcome.destructive_manifest = state.manifests.destructive.path
        outcome.warnings.extend(state.manifests.warnings)

        logger.info(f"Created deployment package in {stage_dir}")

    def _replicate(self, state: BuildState, outcome: DeploymentOutcome) -> None:
        members = state.manifests.accepted
        logger.info(f"Copying changed files into the stage, # of changes: {len(members)}")

        outcome.replicated_count = self.replicator.copy(
            members,
            self.path_resolver.get_repository_dir(),
            self.path_resolver.get_stage_dir()
        )

    def _package_rollback(self, state: BuildState, outcome: DeploymentOutcome) -> None:
        if not self.options.rollback_enabled:
            return
        if state.previous_commit is None:
            logger.info("Skipping rollback package: no previous commit to roll back to")
            return

        env = self.environment
        rollback_dir = reset_directory(self.path_resolver.get_rollback_dir(env.job_name, env.build_number))
        change_set = state.change_set

        # Inverse roles: additions get deleted, old versions get redeployed
        rollback = self.manifest_engine.generate_manifests(
            change_set.additions,
            change_set.previous_versions,
            rollback_dir / self.options.source_dir
        )
        outcome.warnings.extend(rollback.warnings)

        self.change_source.materialize(state.previous_commit, rollback.accepted, rollback_dir)

        archive_path = self.path_resolver.get_rollback_archive(env.job_name, env.build_number, env.build_tag)
        outcome.rollback_archive = self.replicator.archive(rollback_dir, archive_path)
        self.replicator.remove_directory(rollback_dir)

        logger.info(f"Created rollback package at {outcome.rollback_archive}")

    def _update_registry(self, state: BuildState, outcome: DeploymentOutcome) -> None:
        if not self.options.update_package_enabled:
            return

        package_xml = self.path_resolver.get_package_xml()
        outcome.registry_updated = self.change_source.update_registry_file(
            package_xml,
            self.registry.declared_types(),
            self.registry.api_version,
            self.environment.committer_name,
            self.environment.committer_email
        )

        if outcome.registry_updated:
            logger.info(f"Updated repository package.xml file at {package_xml}")

    def _publish(self, state: BuildState, outcome: DeploymentOutcome) -> None:
        outcome.outputs[OUTPUT_DEPLOY_STAGE] = str(outcome.deploy_stage)
        if outcome.rollback_archive:
            outcome.outputs[OUTPUT_ROLLBACK_ARCHIVE] = str(outcome.rollback_archive)

        outputs_file = write_properties(self.path_resolver.get_outputs_file(), outcome.outputs)
        logger.info(f"Published outputs to {outputs_file}")
