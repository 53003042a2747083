"""Manifest command implementation"""

from pathlib import Path

import click

from ..utils.output import format_manifest, print_error, print_success
from ...api.exceptions import ManifestWriteError, RegistryError
from ...core.manifest_engine import ManifestEngine


def _read_paths(from_file):
    """Read one path per line, skipping blanks"""
    return [line.strip() for line in from_file if line.strip()]


@click.command()
@click.argument('paths', nargs=-1)
@click.option('--from-file', '-f', type=click.File('r'),
              help="Read paths from a file, one per line ('-' for stdin)")
@click.option('--destructive', is_flag=True,
              help='Build a destructive manifest (drops types that cannot be deleted)')
@click.option('--output', '-o', type=click.Path(path_type=Path, dir_okay=False),
              help='Write the manifest to this file instead of printing it')
@click.pass_context
def manifest(ctx, paths, from_file, destructive, output):
    """Build a package manifest from repository paths

    Examples:
        sfdeploy manifest src/classes/Foo.cls src/objects/Bar.object
        git diff --name-only HEAD~1 | sfdeploy manifest -f - -o package.xml
    """
    paths = list(paths)
    if from_file:
        paths.extend(_read_paths(from_file))

    try:
        engine = ManifestEngine(ctx.obj.registry)
    except RegistryError as e:
        print_error("Cannot load metadata registry", e)
        ctx.exit(1)

    if output is None:
        result = engine.build(paths, destructive=destructive)
        click.echo(result.manifest.to_xml(), nl=False)
        return

    try:
        result = engine.generate(paths, output, destructive=destructive)
    except ManifestWriteError as e:
        print_error("Cannot write manifest", e)
        ctx.exit(1)

    format_manifest(result, show_xml=False)
    print_success(f"Manifest written to {result.path}")
