# sfdeploy_tool/cli/main.py
"""Main CLI entry point for sfdeploy-tool"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from ..__version__ import __version__
from ..constants import APP_NAME, ENV_LOG_LEVEL, LOG_FORMAT
from ..core.type_registry import TypeRegistry

# Import all commands
from .commands import build, manifest, classify, registry

console = Console(stderr=True)


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Setup logging configuration

    Args:
        verbose: Enable verbose output (INFO level)
        debug: Enable debug output (DEBUG level)
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.getLevelName(os.environ.get(ENV_LOG_LEVEL, 'WARNING').upper())
        if not isinstance(level, int):
            level = logging.WARNING

    # Configure rich handler
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            RichHandler(
                console=console,
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
                tracebacks_suppress=[click]
            )
        ],
        force=True
    )


class Context:
    """CLI context object with lazy registry loading

    The metadata registry is only parsed when a command asks for it.
    """

    def __init__(self, registry_path: Optional[Path] = None):
        """Initialize CLI context"""
        self.registry_path = registry_path
        self._registry: Optional[TypeRegistry] = None
        self.verbose: bool = False
        self.debug: bool = False

    @property
    def registry(self) -> TypeRegistry:
        """Get metadata registry (lazy loading)

        Raises:
            RegistryError: If the registry cannot be loaded
        """
        if self._registry is None:
            self._registry = TypeRegistry.load(self.registry_path)
        return self._registry


@click.group(name=APP_NAME)
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('-d', '--debug', is_flag=True, help='Enable debug output')
@click.option('-q', '--quiet', is_flag=True, help='Suppress all output except errors')
@click.option(
    '--registry', 'registry_path',
    type=click.Path(path_type=Path, dir_okay=False),
    envvar='SFDEPLOY_REGISTRY',
    help='Metadata type registry document (default: bundled registry)'
)
@click.version_option(__version__, prog_name=APP_NAME)
@click.pass_context
def cli(ctx, verbose, debug, quiet, registry_path):
    """sfdeploy - Salesforce deployment manifests from git changes

    Works out which metadata components a commit range touches, writes
    package.xml and destructiveChanges.xml, stages the changed files and
    optionally builds a rollback package.
    """
    # Setup logging
    if quiet:
        logging.disable(logging.CRITICAL)
    else:
        setup_logging(verbose=verbose, debug=debug)

    ctx.obj = Context(registry_path)
    ctx.obj.verbose = verbose
    ctx.obj.debug = debug


# Register commands
cli.add_command(build.build)
cli.add_command(manifest.manifest)
cli.add_command(classify.classify)
cli.add_command(registry.types)


def main():
    """Main entry point for the CLI application

    This function handles:
    - Keyboard interrupts
    - Unexpected exceptions with proper error display
    """
    try:
        cli(prog_name=APP_NAME)

    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)

    except Exception as e:
        console.print(f"[red]Unexpected error: {e}[/red]")
        if '--debug' in sys.argv or '-d' in sys.argv:
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
