"""solarb CLI package that exposes the Typer application and command helpers."""

from __future__ import annotations

from solarb.config import settings

from .core import CLIApp, TyperOption, app, configure_logging, log
from .help_text import VERBOSE_COMMAND_HELP, VERBOSE_GLOBAL_OVERVIEW

# Import command modules for side-effect registration
from . import commands
from .commands.keys import keys_check
from .commands.pools import pools_list
from .commands.search import run_search

__all__ = [
    "CLIApp",
    "TyperOption",
    "VERBOSE_COMMAND_HELP",
    "VERBOSE_GLOBAL_OVERVIEW",
    "app",
    "commands",
    "configure_logging",
    "keys_check",
    "log",
    "pools_list",
    "run_search",
    "settings",
]
