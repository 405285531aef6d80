# promote_tool/cli/commands/report.py
"""Report command implementation"""

import sys

import click

from ..decorators import require_config
from ..utils.output import console, format_outcome


@click.command()
@click.pass_context
@require_config
def report(ctx):
    """Write a change report without promoting

    Publishes the working branch, compares it with the production branch
    and saves the report in the production tree. The report links point
    at the comparison view instead of a merge.
    """
    promoter = ctx.obj.promoter

    console.print("Generating change report...")
    outcome = promoter.generate_report()

    format_outcome(outcome, title="Report")
    if outcome.is_failed:
        sys.exit(1)
