# promote_tool/cli/commands/config.py
"""Configuration management commands"""

import sys

import click
from rich.prompt import Prompt

from ..utils.output import console, format_config
from ...api.exceptions import ConfigError
from ...constants import DEFAULT_PRODUCTION_BRANCH, DEFAULT_WORKING_BRANCH, EMOJI_ERROR, EMOJI_SUCCESS
from ...models import BranchConfig, PromoteConfig, RemoteConfig


@click.group()
def config():
    """Manage promote-tool configuration"""
    pass


@config.command()
@click.pass_context
def show(ctx):
    """Show the current configuration"""
    config_service = ctx.obj.config_service

    try:
        current = config_service.config
    except ConfigError as e:
        console.print(f"{EMOJI_ERROR} {e.message}")
        sys.exit(1)

    console.print(f"[dim]{config_service.config_path}[/dim]\n")
    format_config(current)


@config.command()
@click.option('--working', 'working_path', help='Working tree directory')
@click.option('--production', 'production_path', help='Production tree directory')
@click.option('--owner', help='Remote repository owner')
@click.option('--repo', help='Remote repository name')
@click.option('--token', help='Access token (GITHUB_TOKEN is used when empty)')
@click.option('--working-branch', default=DEFAULT_WORKING_BRANCH, show_default=True,
              help='Working branch name')
@click.option('--production-branch', default=DEFAULT_PRODUCTION_BRANCH, show_default=True,
              help='Production branch name')
@click.option('--force', is_flag=True, help='Overwrite an existing configuration file')
@click.option('--no-input', is_flag=True, help='Do not prompt for missing values')
@click.pass_context
def init(ctx, working_path, production_path, owner, repo, token,
         working_branch, production_branch, force, no_input):
    """Create a configuration file

    Missing values are asked for interactively unless --no-input is given.

    Examples:

        promote-tool config init --working ~/vault --production ~/site \\
            --owner acme --repo notes
    """
    config_service = ctx.obj.config_service

    if config_service.exists and not force:
        console.print(f"{EMOJI_ERROR} Configuration file already exists: {config_service.config_path}")
        console.print("Use --force to overwrite it")
        sys.exit(1)

    if not no_input:
        working_path = working_path or Prompt.ask("Working tree directory", console=console)
        production_path = production_path or Prompt.ask("Production tree directory", console=console)
        owner = owner or Prompt.ask("Remote repository owner", default="", console=console)
        repo = repo or Prompt.ask("Remote repository name", default="", console=console)
        if token is None:
            token = Prompt.ask("Access token (leave empty to use GITHUB_TOKEN)",
                               default="", password=True, console=console)

    new_config = PromoteConfig(
        working_path=working_path or "",
        production_path=production_path or "",
        remote=RemoteConfig(token=token or "", owner=owner or "", repo=repo or ""),
        branches=BranchConfig(working=working_branch, production=production_branch),
    )

    try:
        config_service.init_config(new_config, force=force)
    except ConfigError as e:
        console.print(f"{EMOJI_ERROR} {e.message}")
        sys.exit(1)

    console.print(f"{EMOJI_SUCCESS} Configuration written to {config_service.config_path}")
    for issue in new_config.validate():
        console.print(f"  - {issue}")


@config.command(name="set")
@click.argument('key')
@click.argument('value')
@click.pass_context
def set_value(ctx, key, value):
    """Set a configuration value by dotted KEY

    Examples:

        promote-tool config set remote.owner acme

        promote-tool config set merge_strategy pull_request
    """
    config_service = ctx.obj.config_service

    try:
        config_service.set_value(key, value)
    except ConfigError as e:
        console.print(f"{EMOJI_ERROR} {e.message}")
        sys.exit(1)

    shown = "********" if key == "remote.token" else value
    console.print(f"{EMOJI_SUCCESS} Set {key} = {shown}")
