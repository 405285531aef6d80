# promote_tool/cli/commands/setup.py
"""Setup command implementation"""

import sys

import click
from rich.prompt import Confirm

from ..decorators import require_config
from ..utils.interactive import prompt_identity
from ..utils.output import console, format_setup_result
from ...constants import EMOJI_ERROR
from ...core.git_runner import redact


@click.command()
@click.option('-y', '--yes', is_flag=True, help='Do not ask for confirmation')
@click.pass_context
@require_config
def setup(ctx, yes):
    """Connect both trees to the remote repository

    Initializes a repository in each tree, force-publishes the working
    tree to the working branch and creates the production branch from it.
    Existing history on both remote branches is overwritten.
    """
    promoter = ctx.obj.promoter
    remote = promoter.config.remote

    if not (remote.has_repository or remote.remote_url):
        console.print(f"{EMOJI_ERROR} Remote repository is not configured; set remote.owner and remote.repo")
        sys.exit(1)

    if not yes:
        console.print(f"[bold]Remote:[/bold] {redact(remote.clone_url())}")
        if not Confirm.ask("Force-publish both branches to this repository?",
                           default=False, console=console):
            console.print("[yellow]Setup cancelled[/yellow]")
            return

    result = promoter.setup(identity=None if yes else prompt_identity)

    format_setup_result(result)
    if result.is_failed:
        sys.exit(1)
