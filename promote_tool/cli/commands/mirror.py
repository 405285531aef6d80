# promote_tool/cli/commands/mirror.py
"""Mirror command implementation"""

import sys

import click
from rich.prompt import Confirm

from ..decorators import require_config
from ..utils.output import console, format_mirror_result


@click.command()
@click.option('-y', '--yes', is_flag=True, help='Do not ask for confirmation')
@click.pass_context
@require_config
def mirror(ctx, yes):
    """Copy the working tree onto the production tree

    Files are copied directly and everything is staged in the production
    repository. Files missing from the working tree are deleted from the
    production tree, except protected folders.
    """
    promoter = ctx.obj.promoter
    config = promoter.config

    if not yes:
        console.print(f"[bold]Source:[/bold] {config.working_root}")
        console.print(f"[bold]Target:[/bold] {config.production_root}")
        if not Confirm.ask("Overwrite the production tree?", default=False, console=console):
            console.print("[yellow]Mirror cancelled[/yellow]")
            return

    result = promoter.mirror()

    format_mirror_result(result)
    if result.is_failed:
        sys.exit(1)
