# promote_tool/cli/commands/status.py
"""Status command implementation"""

import sys

import click

from ..decorators import require_config
from ..utils.output import console, format_tree_status
from ...api.exceptions import PromoteToolError
from ...constants import EMOJI_ERROR


@click.command()
@click.pass_context
@require_config
def status(ctx):
    """Show branch and content status of both trees"""
    promoter = ctx.obj.promoter

    try:
        statuses = promoter.status()
    except PromoteToolError as e:
        console.print(f"{EMOJI_ERROR} {e.message}")
        sys.exit(1)

    format_tree_status(statuses)
