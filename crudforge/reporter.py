"""Rich console presentation for the crudforge CLI.

Provides the generation plan panel, the dry-run tree, the manifest table, the
template listing, the manual follow-up steps and coloured status lines.  Only
the CLI calls these; the generation pipeline itself never prints.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from crudforge.models import (
    GenerationPlan,
    Manifest,
    PreviewTree,
    WriteStatus,
)

console = Console()

STATUS_STYLES: dict[WriteStatus, str] = {
    WriteStatus.WRITTEN: "green",
    WriteStatus.PREVIEWED: "cyan",
    WriteStatus.FAILED: "bold red",
    WriteStatus.NOT_ATTEMPTED: "dim",
}


def _yes_no(value: bool) -> str:
    return "Yes" if value else "No"


# ---------------------------------------------------------------------------
# Plan
# ---------------------------------------------------------------------------


def print_plan(plan: GenerationPlan) -> None:
    """Print the resolved generation plan in a rounded panel."""
    flags = plan.flags
    operations = ", ".join(op.value for op in plan.ordered_operations)
    body = (
        f"[bold]Entity:[/bold] {plan.entity.singular_name} ({plan.entity.plural_name})\n"
        f"[bold]Operations:[/bold] {operations}\n"
        f"[bold]Entity Type:[/bold] {plan.entity_tier.value}\n"
        f"[bold]Generate Tests:[/bold] {_yes_no(flags.generate_tests)}\n"
        f"[bold]Generate Permissions:[/bold] {_yes_no(flags.generate_permissions)}\n"
        f"[bold]Generate Events:[/bold] {_yes_no(plan.emits_events)}\n"
        f"[bold]Generate Mapping Profile:[/bold] {_yes_no(flags.generate_mapping_profiles)}\n"
        f"[bold]Template:[/bold] {plan.template_id}\n"
        f"[bold]Output:[/bold] {escape(str(plan.output_root))}"
    )
    console.print(Panel(body, title=" Generation Plan ", border_style="blue"))
    console.print()


# ---------------------------------------------------------------------------
# Artifacts
# ---------------------------------------------------------------------------


def print_preview(entity_name: str, tree_data: PreviewTree) -> None:
    """Print the files a dry run would generate, grouped by category."""
    console.print("[yellow]Dry run - files that would be generated:[/yellow]")
    console.print()

    tree = Tree(f"[green]{escape(entity_name)} CRUD Generation[/green]")
    for category, artifacts in tree_data.items():
        node = tree.add(f"[yellow]{category.value}[/yellow]")
        for artifact in artifacts:
            lines = artifact.content.count("\n")
            node.add(f"[dim]{escape(artifact.path)}[/dim] ({lines} lines)")

    console.print(tree)
    console.print()
    console.print("[dim]Run without --dry-run to generate these files.[/dim]")


def print_manifest(manifest: Manifest, title: str = "Generated Artifacts") -> None:
    """Print a per-artifact status table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Category", style="dim", no_wrap=True)
    table.add_column("Path")
    table.add_column("Status", no_wrap=True)

    for entry in manifest.entries:
        style = STATUS_STYLES.get(entry.status, "white")
        status = f"[{style}]{entry.status.value}[/{style}]"
        path = escape(entry.relative_path)
        if entry.error:
            path = f"{path}\n[red]{escape(entry.error)}[/red]"
        table.add_row(entry.category.value, path, status)

    console.print(table)
    console.print()


def print_next_steps(plan: GenerationPlan) -> None:
    """Print the wiring the generator leaves to the developer."""
    s, p = plan.entity.singular_name, plan.entity.plural_name
    steps = [
        f"Add DbSet<{s}> {p} to ITenantDbContext and TenantDbContext",
        f"Apply {s}EntityConfiguration in TenantDbContext.OnModelCreating",
    ]
    if plan.flags.generate_permissions:
        steps.append(f"Add {p}Permissions to PermissionsProvider")
    steps.append(f"Run database migration: dotnet ef migrations add Add{s}Entity")

    body = "\n".join(f"{i}. {escape(step)}" for i, step in enumerate(steps, start=1))
    console.print(Panel(body, title=" Manual steps required ", border_style="yellow"))


def print_templates(template_id: str, paths: list[str]) -> None:
    """Print the skeleton files that make up a template set."""
    tree = Tree(f"[green]{escape(template_id)}[/green]")
    for path in paths:
        tree.add(f"[dim]{escape(path)}[/dim]")
    console.print(tree)
    console.print(f"[dim]{len(paths)} templates[/dim]")


# ---------------------------------------------------------------------------
# Status lines
# ---------------------------------------------------------------------------


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")
