# promote_tool/cli/commands/doctor.py
"""System diagnostic command"""

import sys

import click

from ..decorators import require_config
from ..utils.interactive import prompt_identity
from ..utils.output import console, format_requirements
from ...api.exceptions import PromoteToolError
from ...constants import EMOJI_ERROR, EMOJI_SUCCESS
from ...models import RequirementCheck, all_passed, failures

FIX_HINTS = {
    RequirementCheck.TOOL: "Install Git or set git.path to its executable",
    RequirementCheck.WORKING_PATH: "Set paths.working to an existing directory",
    RequirementCheck.PRODUCTION_PATH: "Set paths.production to an existing directory",
    RequirementCheck.CREDENTIAL: "Set remote.token or the GITHUB_TOKEN environment variable",
    RequirementCheck.REPOSITORY: "Set remote.owner and remote.repo",
}


def fix_requirement(ctx, result) -> bool:
    """Attempt to repair one failing check

    Returns:
        True if the check was repaired
    """
    promoter = ctx.obj.promoter
    config_service = ctx.obj.config_service

    if result.check == RequirementCheck.TOOL and result.detail:
        promoter.config = config_service.set_value("git.path", result.detail)
        return True

    if result.check == RequirementCheck.IDENTITY:
        config = promoter.config
        identity = prompt_identity(config.git.user_name, config.git.user_email)
        if identity is None:
            return False
        config_service.set_value("git.user_name", identity.name)
        promoter.config = config_service.set_value("git.user_email", identity.email)
        return True

    return False


@click.command()
@click.option('--fix', is_flag=True, help='Attempt to fix issues automatically')
@click.option('--validate-token', is_flag=True, help='Check the access token against the hosting API')
@click.pass_context
@require_config
def doctor(ctx, fix, validate_token):
    """Run environment diagnostics

    Checks the Git executable, commit identity, both tree paths, the access
    token and the remote repository settings.

    Examples:

        # Run all checks
        promote-tool doctor

        # Also verify the token with the hosting API
        promote-tool doctor --validate-token

        # Persist a discovered Git path and ask for a missing identity
        promote-tool doctor --fix
    """
    promoter = ctx.obj.promoter
    console.print("[bold]Promote Tool Diagnostics[/bold]\n")

    results = promoter.check_requirements()
    format_requirements(results)

    if fix and not all_passed(results):
        repairable = [r for r in results if not r.passed]
        console.print("\n[yellow]Attempting automatic fixes...[/yellow]\n")

        for result in repairable:
            if fix_requirement(ctx, result):
                console.print(f"[green]{EMOJI_SUCCESS}[/green] Fixed: {result.name}")
            elif result.failed:
                console.print(f"[red]{EMOJI_ERROR}[/red] Could not fix: {result.name}")

        results = promoter.check_requirements()
        console.print()
        format_requirements(results)

    failed = failures(results)

    if validate_token:
        try:
            login = promoter.validate_token()
            console.print(f"\n[green]{EMOJI_SUCCESS}[/green] Token belongs to [cyan]{login}[/cyan]")
        except PromoteToolError as e:
            console.print(f"\n[red]{EMOJI_ERROR}[/red] Token validation failed: {e.message}")
            sys.exit(1)

    # Exit code based on results
    if failed:
        console.print(f"\n[red]{len(failed)} check(s) failed[/red]")
        for result in failed:
            hint = FIX_HINTS.get(result.check)
            if hint:
                console.print(f"  • {result.name}: {hint}")
        if not fix:
            console.print("Run with --fix to attempt automatic fixes")
        sys.exit(1)
    else:
        console.print("\n[green]All checks passed![/green]")
