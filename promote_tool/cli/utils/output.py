# promote_tool/cli/utils/output.py
"""Output formatting utilities"""

from typing import List

import yaml
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from ...constants import EMOJI_ERROR, EMOJI_SUCCESS, EMOJI_WARNING, STATUS_MARKERS
from ...models import (
    ChangeSet,
    MirrorResult,
    PromoteConfig,
    PromotionOutcome,
    RequirementResult,
    RequirementStatus,
    SetupResult,
)
from ...services.status_service import TreeStatus

console = Console()

REQUIREMENT_STYLES = {
    RequirementStatus.PASS: "[green]✓ PASS[/green]",
    RequirementStatus.WARNING: "[yellow]⚠ WARN[/yellow]",
    RequirementStatus.FAIL: "[red]✗ FAIL[/red]",
}

MASK = "********"


def format_change_set(change_set: ChangeSet, title: str = "Changes") -> None:
    """Display a change set as a table followed by a summary line"""
    if change_set.is_empty:
        console.print("[dim]No changes[/dim]")
        return

    table = Table(title=title, box=box.ROUNDED)
    table.add_column("", justify="center")
    table.add_column("Status", style="cyan")
    table.add_column("Path")

    for change in change_set.files:
        path = change.path
        if change.old_path:
            path = f"{change.old_path} → {change.path}"
        table.add_row(STATUS_MARKERS[change.status.value], change.status.value.title(), path)

    console.print(table)
    counts = ", ".join(
        f"{count} {status}" for status, count in change_set.counts().items() if status != "total"
    )
    console.print(f"[bold]Total:[/bold] {change_set.total} ({counts})")


def format_requirements(results: List[RequirementResult]) -> None:
    """Display environment checks"""
    table = Table(title="Requirement Checks", box=box.ROUNDED)
    table.add_column("Check", style="cyan")
    table.add_column("Status", justify="center")
    table.add_column("Details")

    for result in results:
        table.add_row(result.name, REQUIREMENT_STYLES[result.status], result.message)

    console.print(table)


def format_outcome(outcome: PromotionOutcome, title: str = "Promotion") -> None:
    """Display the terminal state of a promotion run"""
    if outcome.is_success:
        lines = [f"[green]{EMOJI_SUCCESS}[/green] {outcome.message}", ""]
        if outcome.change_set is not None:
            counts = outcome.change_set.counts()
            lines.append(
                f"[bold]Changes:[/bold] {counts['added']} added, {counts['modified']} modified, "
                f"{counts['deleted']} deleted, {counts['moved']} moved"
            )
        if outcome.report_id:
            lines.append(f"[bold]Report:[/bold] {outcome.report_id}")
        if outcome.merge_request_url:
            lines.append(f"[bold]Merge request:[/bold] {outcome.merge_request_url}")
        if outcome.duration is not None:
            lines.append(f"[bold]Duration:[/bold] {outcome.duration:.1f}s")
        console.print(Panel("\n".join(lines), title=f"{title} Result", border_style="green"))

    elif outcome.is_neutral:
        console.print(Panel(
            f"[yellow]{EMOJI_WARNING}[/yellow] {outcome.message}",
            title=f"{title} Result",
            border_style="yellow"
        ))

    else:
        lines = [
            f"[red]{EMOJI_ERROR} {title} failed:[/red] {outcome.message}",
            "",
            f"[bold]Phase:[/bold] {outcome.phase.value}",
        ]
        if outcome.error_kind is not None:
            lines.append(f"[bold]Kind:[/bold] {outcome.error_kind.value}")
        for error in outcome.errors:
            if error.code:
                lines.append(f"  • [{error.code}] {error.message}")
        failed = [r for r in outcome.requirements if r.failed]
        if failed:
            lines.append("")
            lines.append("[bold]Unmet requirements:[/bold]")
            for requirement in failed:
                lines.append(f"  • {requirement.name}: {requirement.message}")
        console.print(Panel("\n".join(lines), title=f"{title} Error", border_style="red"))

    for warning in outcome.warnings:
        console.print(f"[yellow]{EMOJI_WARNING}[/yellow] {warning}")


def format_mirror_result(result: MirrorResult) -> None:
    """Display mirror operation result"""
    if result.is_success:
        lines = [
            f"[green]{EMOJI_SUCCESS}[/green] {result.message}",
            "",
            f"[bold]Copied:[/bold] {len(result.sync.copied)}",
            f"[bold]Deleted:[/bold] {len(result.sync.deleted)}",
            f"[bold]Directories created:[/bold] {len(result.sync.created_dirs)}",
        ]
        console.print(Panel("\n".join(lines), title="Mirror Result", border_style="green"))
    else:
        console.print(Panel(
            f"[red]{EMOJI_ERROR} Mirror failed:[/red] {result.message}",
            title="Mirror Error",
            border_style="red"
        ))


def format_setup_result(result: SetupResult) -> None:
    """Display the steps taken by repository setup"""
    for step in result.steps:
        console.print(f"  [green]{EMOJI_SUCCESS}[/green] {step}")
    for warning in result.warnings:
        console.print(f"  [yellow]{EMOJI_WARNING}[/yellow] {warning}")

    if result.is_success:
        console.print(f"\n[green]{result.message}[/green]")
    else:
        console.print(f"\n[red]{EMOJI_ERROR} Setup failed:[/red] {result.message}")


def format_tree_status(statuses: List[TreeStatus]) -> None:
    """Display one panel per tree"""
    for status in statuses:
        if not status.exists:
            console.print(Panel(
                f"[red]{EMOJI_ERROR} Directory not found:[/red] {status.path}",
                title=status.label,
                border_style="red"
            ))
            continue

        lines = [f"[bold]Path:[/bold] {status.path}"]
        if status.is_repository:
            lines.append(f"[bold]Branch:[/bold] {status.branch or '(detached)'}")
            lines.append(f"[bold]Remote:[/bold] {status.remote_url or '(none)'}")
            lines.append(f"[bold]Last commit:[/bold] {status.last_commit or '(none)'}")
            lines.append(f"[bold]Uncommitted:[/bold] {len(status.changes)}")
        else:
            lines.append(f"[yellow]{EMOJI_WARNING} Not a Git repository[/yellow]")

        lines.append(f"[bold]Entries:[/bold] {len(status.entries)}")
        for entry in status.entry_sample:
            lines.append(f"  • {entry}")
        if len(status.entries) > len(status.entry_sample):
            lines.append(f"  … {len(status.entries) - len(status.entry_sample)} more")

        console.print(Panel("\n".join(lines), title=status.label, border_style="cyan"))


def format_config(config: PromoteConfig) -> None:
    """Display configuration as YAML with the token masked"""
    data = config.to_dict()
    if data["remote"].get("token"):
        data["remote"]["token"] = MASK
    text = yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)
    console.print(Syntax(text, "yaml", theme="ansi_dark", background_color="default"))