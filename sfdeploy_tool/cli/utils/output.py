# sfdeploy_tool/cli/utils/output.py
"""Output formatting utilities"""

from typing import List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from ...constants import EMOJI_ERROR, EMOJI_SUCCESS
from ...core.type_registry import TypeRegistry
from ...models import DeploymentOutcome, ManifestBuildResult, MetadataDescriptor

console = Console()


def format_outcome(outcome: DeploymentOutcome) -> None:
    """Format and display a build outcome"""
    if outcome.is_success:
        lines = [
            f"[green]{EMOJI_SUCCESS}[/green] Deployment package created!",
            "",
            f"[bold]Build:[/bold] {'full tree' if outcome.full_build else 'changes since previous commit'}",
            f"[bold]Stage:[/bold] {outcome.deploy_stage}",
            f"[bold]Files staged:[/bold] {outcome.replicated_count}",
            f"[bold]Manifest:[/bold] {outcome.package_manifest}",
        ]

        if outcome.destructive_manifest:
            lines.append(f"[bold]Destructive manifest:[/bold] {outcome.destructive_manifest}")

        if outcome.rollback_archive:
            lines.append(f"[bold]Rollback package:[/bold] {outcome.rollback_archive}")

        if outcome.registry_updated:
            lines.append("[bold]Repository package.xml:[/bold] updated")

        if outcome.duration is not None:
            lines.append(f"[bold]Duration:[/bold] {outcome.duration:.2f}s")

        panel = Panel(
            "\n".join(lines),
            title="Build Result",
            border_style="green"
        )
        console.print(panel)

    else:
        lines = [f"[red]{EMOJI_ERROR} Build failed:[/red] {outcome.message}"]
        for error in outcome.errors:
            context = ", ".join(f"{k}={v}" for k, v in error.context.items())
            lines.append(f"  • [{error.code}] {error.message}" + (f" ({context})" if context else ""))

        panel = Panel(
            "\n".join(lines),
            title="Build Error",
            border_style="red"
        )
        console.print(panel)

    if outcome.warnings:
        console.print("\n[bold yellow]Warnings:[/bold yellow]")
        for warning in outcome.warnings:
            console.print(f"  • {warning}")


def format_manifest(result: ManifestBuildResult, show_xml: bool = True) -> None:
    """Display a built manifest"""
    if show_xml:
        console.print(Syntax(result.manifest.to_xml(), "xml", theme="ansi_dark"))

    console.print(
        f"[bold]{len(result.manifest.types)}[/bold] type(s), "
        f"[bold]{result.manifest.member_count}[/bold] member(s), "
        f"[bold]{len(result.accepted)}[/bold] file(s) accepted"
    )

    for warning in result.warnings:
        print_warning(warning)


def format_descriptors(descriptors: List[MetadataDescriptor]) -> None:
    """Display classification results as a table"""
    table = Table(box=box.SIMPLE)
    table.add_column("Path", style="cyan")
    table.add_column("Member")
    table.add_column("Extension")
    table.add_column("Type", style="bold")
    table.add_column("Container")
    table.add_column("Destructible")
    table.add_column("Valid")

    for d in descriptors:
        table.add_row(
            d.path,
            d.member,
            d.extension,
            d.declared_type,
            d.container,
            "yes" if d.destructible else "no",
            "[green]yes[/green]" if d.valid else "[red]no[/red]"
        )

    console.print(table)


def format_registry(registry: TypeRegistry) -> None:
    """Display the registry rules"""
    table = Table(title=f"Metadata types (API {registry.api_version})", box=box.SIMPLE)
    table.add_column("Extension", style="cyan")
    table.add_column("Type", style="bold")
    table.add_column("Container")
    table.add_column("Destructible")

    for rule in registry.rules():
        table.add_row(
            rule.extension,
            rule.declared_type,
            rule.container,
            "yes" if rule.destructible else "no"
        )

    console.print(table)


def print_error(message: str, error: Optional[Exception] = None) -> None:
    """Print error message"""
    if error:
        console.print(f"[red]Error:[/red] {message}: {str(error)}")
    else:
        console.print(f"[red]Error:[/red] {message}")


def print_warning(message: str) -> None:
    """Print warning message"""
    console.print(f"[yellow]Warning:[/yellow] {message}")


def print_success(message: str) -> None:
    """Print success message"""
    console.print(f"[green]{EMOJI_SUCCESS}[/green] {message}")
