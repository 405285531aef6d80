"""Configuration context decorator for CLI commands"""

from functools import wraps
from typing import Callable

import click

from ..utils.output import console
from ...api.exceptions import ConfigError
from ...constants import APP_NAME, EMOJI_ERROR, EMOJI_WARNING


def require_config(func: Callable) -> Callable:
    """Decorator that ensures the command runs with a loaded configuration

    This decorator:
    1. Loads the configuration file through the CLI context
    2. Exits with status 1 when it is missing or invalid
    3. Prints configuration warnings before running the command

    Args:
        func: Command function to decorate

    Returns:
        Decorated function
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        ctx = click.get_current_context()

        try:
            promoter = ctx.obj.promoter
        except ConfigError as e:
            console.print(
                f"{EMOJI_ERROR} {e.message}\n"
                f"Run '{APP_NAME} config init' to create a configuration file."
            )
            ctx.exit(1)

        issues = promoter.config.validate()
        if issues:
            console.print(f"{EMOJI_WARNING} Configuration warnings:")
            for issue in issues:
                console.print(f"  - {issue}")
            console.print()

        return func(*args, **kwargs)

    return wrapper
