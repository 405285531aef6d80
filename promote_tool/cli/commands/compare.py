# promote_tool/cli/commands/compare.py
"""Compare command implementation"""

import sys

import click

from ..decorators import require_config
from ..utils.output import console, format_change_set, format_outcome


@click.command()
@click.pass_context
@require_config
def compare(ctx):
    """Show what a promotion would change

    Publishes the working branch and lists the classified difference
    against the production branch. Nothing is merged.
    """
    promoter = ctx.obj.promoter

    outcome = promoter.compare()

    if outcome.is_failed:
        format_outcome(outcome, title="Compare")
        sys.exit(1)

    if outcome.change_set is None or outcome.change_set.is_empty:
        console.print("[green]Working and production branches are identical[/green]")
        return

    format_change_set(outcome.change_set, title="Differences")
