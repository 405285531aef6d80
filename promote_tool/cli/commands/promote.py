# promote_tool/cli/commands/promote.py
"""Promote command implementation"""

import sys

import click
from rich.prompt import Confirm

from ..decorators import require_config
from ..utils.interactive import confirm_changes, prompt_identity
from ..utils.output import console, format_outcome
from ...constants import EMOJI_ROCKET


@click.command()
@click.option('-y', '--yes', is_flag=True, help='Promote without asking for confirmation')
@click.option('--no-resume', is_flag=True, help='Do not offer to resume a failed promotion')
@click.pass_context
@require_config
def promote(ctx, yes, no_resume):
    """Promote working tree changes to the production tree

    Commits and publishes the working branch, shows the classified
    difference against production, merges after confirmation, refreshes
    the production tree and writes a change report into it.

    Examples:

        # Review changes before promoting
        promote-tool promote

        # Promote without confirmation
        promote-tool promote --yes
    """
    promoter = ctx.obj.promoter
    branch = promoter.config.branches.production

    def confirm(change_set):
        if yes:
            return True
        return confirm_changes(change_set, branch)

    identity = None if yes else prompt_identity

    console.print(f"{EMOJI_ROCKET} Promoting [cyan]{promoter.config.branches.working}[/cyan] "
                  f"to [cyan]{branch}[/cyan]...")
    outcome = promoter.promote(confirm=confirm, identity=identity)

    while outcome.is_failed and outcome.is_resumable and not (yes or no_resume):
        format_outcome(outcome)
        if not Confirm.ask(f"Resume from phase '{outcome.phase.value}'?", default=False, console=console):
            sys.exit(1)
        outcome = promoter.promote(confirm=confirm, identity=identity, resume_from=outcome)

    format_outcome(outcome)
    if outcome.is_failed:
        sys.exit(1)
