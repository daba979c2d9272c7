"""
Shared test infrastructure for whisker.

Modules:
- file_utils: Creating template, partial and data files
- cli_utils: Running the command line tool in a subprocess
"""

from .file_utils import write, write_templates
from .cli_utils import run_cli, jload

__all__ = ["write", "write_templates", "run_cli", "jload"]
