# promote_tool/cli/main.py
"""Main CLI entry point for promote-tool"""

import logging
import os
import sys
from typing import Optional

import click
from rich.logging import RichHandler

from ..__version__ import __version__
from ..api.promoter import Promoter
from ..constants import APP_NAME, ENV_LOG_LEVEL, LOG_FORMAT
from ..services.config_service import ConfigService
from .utils.output import console

# Import all commands
from .commands import (
    compare,
    config,
    doctor,
    mirror,
    promote,
    report,
    setup,
    status,
)


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Setup logging configuration

    Args:
        verbose: Enable verbose output (INFO level)
        debug: Enable debug output (DEBUG level)
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    forced = os.environ.get(ENV_LOG_LEVEL)
    if forced:
        level = logging.getLevelName(forced.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    # Configure rich handler
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            RichHandler(
                console=console,
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
                tracebacks_suppress=[click]
            )
        ]
    )

    # Adjust third-party loggers
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


class Context:
    """CLI context object with lazy configuration loading

    The configuration file is only read when a command asks for the
    promoter, so ``config init`` works before any file exists.
    """

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path
        self.verbose: bool = False
        self.debug: bool = False
        self._promoter: Optional[Promoter] = None
        self._config_service: Optional[ConfigService] = None

    @property
    def promoter(self) -> Promoter:
        """Promoter bound to the loaded configuration

        Raises:
            ConfigError: If the configuration file is missing or invalid
        """
        if self._promoter is None:
            self._promoter = Promoter(config_path=self.config_path)
        return self._promoter

    @property
    def config_service(self) -> ConfigService:
        if self._promoter is not None:
            return self._promoter.config_service
        if self._config_service is None:
            self._config_service = ConfigService(self.config_path)
        return self._config_service


@click.group(name=APP_NAME)
@click.version_option(__version__, prog_name=APP_NAME)
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('-d', '--debug', is_flag=True, help='Enable debug output')
@click.option('-q', '--quiet', is_flag=True, help='Suppress all output except errors')
@click.option('-c', '--config', 'config_path', type=click.Path(dir_okay=False),
              help='Configuration file (defaults to .promote-tool.yaml)')
@click.pass_context
def cli(ctx, verbose, debug, quiet, config_path):
    """Promote Tool - Publish a working tree to a production tree

    Changes made in the working tree are committed to the working branch,
    merged into the production branch of the shared remote repository and
    pulled into the production tree. Every promotion leaves a Markdown
    change report in the production tree.
    """
    # Setup logging
    if quiet:
        logging.disable(logging.CRITICAL)
    else:
        setup_logging(verbose=verbose, debug=debug)

    ctx.obj = Context(config_path)
    ctx.obj.verbose = verbose
    ctx.obj.debug = debug


# Register commands
cli.add_command(promote.promote)
cli.add_command(report.report)
cli.add_command(compare.compare)
cli.add_command(mirror.mirror)
cli.add_command(doctor.doctor)
cli.add_command(status.status)
cli.add_command(setup.setup)
cli.add_command(config.config)

# Commands that run without arguments
STANDALONE_COMMANDS = ['promote', 'report', 'compare', 'mirror', 'doctor', 'status', 'setup']


def main():
    """Main entry point for the CLI application

    This function handles:
    - Auto-help for incomplete command groups
    - Keyboard interrupts
    - Unexpected exceptions with proper error display
    """
    try:
        # Handle help for incomplete command groups
        if len(sys.argv) == 2 and sys.argv[1] not in [
            '-h', '--help', '--version', '-v', '--verbose', '-d', '--debug', '-q', '--quiet'
        ] + STANDALONE_COMMANDS:
            sys.argv.append('--help')

        cli(prog_name=APP_NAME)

    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)

    except Exception as e:
        console.print(f"[red]Unexpected error: {e}[/red]")
        if '--debug' in sys.argv or '-d' in sys.argv:
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
