"""CLI utility functions"""

from .output import (
    console,
    format_change_set,
    format_config,
    format_mirror_result,
    format_outcome,
    format_requirements,
    format_setup_result,
    format_tree_status,
)
from .interactive import confirm_changes, prompt_identity

__all__ = [
    # Output
    'console',
    'format_change_set',
    'format_config',
    'format_mirror_result',
    'format_outcome',
    'format_requirements',
    'format_setup_result',
    'format_tree_status',

    # Interactive prompts
    'confirm_changes',
    'prompt_identity',
]
