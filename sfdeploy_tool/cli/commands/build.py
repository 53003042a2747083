"""Build command implementation"""

import json
from pathlib import Path

import click

from ..utils.output import console, format_outcome, print_error
from ...api.exceptions import ConfigError, RegistryError
from ...constants import (
    DEFAULT_BUILD_NUMBER,
    DEFAULT_JOB_NAME,
    EMOJI_PACKAGE,
    ENV_BUILD_NUMBER,
    ENV_BUILD_TAG,
    ENV_COMMIT,
    ENV_COMMITTER_EMAIL,
    ENV_COMMITTER_NAME,
    ENV_JOB_NAME,
    ENV_PREVIOUS_COMMIT,
    ENV_WORKSPACE,
)
from ...core.path_resolver import PathResolver
from ...models.config import BuildEnvironment
from ...services.config_service import ConfigService
from ...services.deploy_service import DeployService


@click.command()
@click.option(
    '--workspace', '-w',
    type=click.Path(path_type=Path, file_okay=False),
    envvar=ENV_WORKSPACE,
    default='.',
    show_default=True,
    help=f'Job workspace [env: {ENV_WORKSPACE}]'
)
@click.option('--commit', envvar=ENV_COMMIT, default='',
              help=f'Commit being built [env: {ENV_COMMIT}]')
@click.option('--previous-commit', envvar=ENV_PREVIOUS_COMMIT,
              help=f'Last successfully built commit [env: {ENV_PREVIOUS_COMMIT}]')
@click.option('--job-name', envvar=ENV_JOB_NAME, default=DEFAULT_JOB_NAME,
              help=f'Job name [env: {ENV_JOB_NAME}]')
@click.option('--build-number', envvar=ENV_BUILD_NUMBER, default=DEFAULT_BUILD_NUMBER,
              help=f'Build number [env: {ENV_BUILD_NUMBER}]')
@click.option('--build-tag', envvar=ENV_BUILD_TAG,
              help=f'Build tag, names the rollback archive [env: {ENV_BUILD_TAG}]')
@click.option('--committer-name', envvar=ENV_COMMITTER_NAME,
              help=f'Identity for the package.xml commit [env: {ENV_COMMITTER_NAME}]')
@click.option('--committer-email', envvar=ENV_COMMITTER_EMAIL,
              help=f'Identity for the package.xml commit [env: {ENV_COMMITTER_EMAIL}]')
@click.option('--force-initial-build/--no-force-initial-build', default=None,
              help='Build the full tree even when a previous commit is known')
@click.option('--rollback/--no-rollback', 'rollback_enabled', default=None,
              help='Create a rollback package')
@click.option('--update-package/--no-update-package', 'update_package_enabled', default=None,
              help="Add missing metadata types to the repository's package.xml")
@click.option('--source-dir', help='Metadata root inside the repository (default: src)')
@click.option(
    '--config', '-c', 'config_path',
    type=click.Path(path_type=Path, dir_okay=False),
    help='Configuration file (default: <workspace>/.sfdeploy.yaml)'
)
@click.option('--json', 'as_json', is_flag=True, help='Print the outcome as JSON')
@click.pass_context
def build(ctx, workspace, commit, previous_commit, job_name, build_number, build_tag,
          committer_name, committer_email, force_initial_build, rollback_enabled,
          update_package_enabled, source_dir, config_path, as_json):
    """Create the deployment package for a commit

    Reads the usual job runner variables, so inside a Jenkins job no
    options are needed.

    Examples:
        sfdeploy build --commit HEAD --previous-commit HEAD~3
        sfdeploy build --rollback --update-package
    """
    environment = BuildEnvironment(
        commit=commit,
        workspace=workspace,
        previous_commit=previous_commit,
        job_name=job_name,
        build_number=build_number,
        build_tag=build_tag,
        committer_name=committer_name,
        committer_email=committer_email
    )

    try:
        options = ConfigService(environment.workspace, config_path).resolve_options({
            'force_initial_build': force_initial_build,
            'rollback_enabled': rollback_enabled,
            'update_package_enabled': update_package_enabled,
            'source_dir': source_dir,
        })
    except ConfigError as e:
        print_error("Invalid configuration", e)
        ctx.exit(1)

    path_resolver = PathResolver(environment.workspace, options)
    if options.registry_path and ctx.obj.registry_path is None:
        ctx.obj.registry_path = path_resolver.resolve(options.registry_path)

    try:
        registry = ctx.obj.registry
    except RegistryError as e:
        print_error("Cannot load metadata registry", e)
        ctx.exit(1)

    if not as_json:
        console.print(f"\n{EMOJI_PACKAGE} Building deployment package for {environment.commit or '?'}...")

    service = DeployService(registry, environment, options, path_resolver=path_resolver)
    outcome = service.run()

    if as_json:
        click.echo(json.dumps(outcome.to_dict(), indent=2))
    else:
        format_outcome(outcome)

    ctx.exit(0 if outcome.is_success else 1)
