"""Interactive utilities for CLI commands"""

from typing import Optional

from rich.prompt import Confirm, Prompt

from ...constants import PROMPT_CONFIRM_PROMOTION, PROMPT_IDENTITY_EMAIL, PROMPT_IDENTITY_NAME
from ...models import ChangeSet, GitIdentity
from .output import console, format_change_set


def confirm_changes(change_set: ChangeSet, branch: str) -> bool:
    """Show the pending changes and ask for approval

    Args:
        change_set: Classified changes awaiting promotion
        branch: Production branch name, shown in the question

    Returns:
        True when the user approves
    """
    console.print()
    format_change_set(change_set, title="Pending Changes")
    console.print()
    return Confirm.ask(
        PROMPT_CONFIRM_PROMOTION.format(total=change_set.total, branch=branch),
        default=False,
        console=console
    )


def prompt_identity(name: str = "", email: str = "") -> Optional[GitIdentity]:
    """Ask for the commit identity, offering the known parts as defaults

    Returns:
        The identity, or None when either part was left empty
    """
    console.print("\n[bold cyan]Git identity is not configured[/bold cyan]")
    console.print("[dim]It is saved to the application settings and used for commits.[/dim]\n")

    name = Prompt.ask(PROMPT_IDENTITY_NAME, default=name or None, console=console)
    email = Prompt.ask(PROMPT_IDENTITY_EMAIL, default=email or None, console=console)

    identity = GitIdentity(name=(name or "").strip(), email=(email or "").strip())
    if not identity.is_complete:
        return None
    return identity
