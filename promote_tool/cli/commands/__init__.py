"""CLI commands"""

from . import promote
from . import report
from . import compare
from . import mirror
from . import doctor
from . import status
from . import setup
from . import config

__all__ = [
    "promote",
    "report",
    "compare",
    "mirror",
    "doctor",
    "status",
    "setup",
    "config",
]
