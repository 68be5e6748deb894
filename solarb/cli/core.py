"""Core Typer application and logging bootstrap for the solarb CLI package."""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any

import typer
from typer import Option as TyperOption

from solarb.config import settings

from .help_text import VERBOSE_COMMAND_HELP, VERBOSE_GLOBAL_OVERVIEW


class CLIApp(typer.Typer):
    """Custom Typer application that prints usage on bad invocation."""

    # ------------------------------------------------------------------
    def _unique_commands(self) -> dict[str, dict[str, Any]]:
        """Return mapping of canonical command names to command/aliases."""

        mapping: dict[str, dict[str, Any]] = {}
        for cmd in self.registered_commands:
            name = cmd.name or cmd.callback.__name__
            canonical = name.replace("_", ":")
            info = mapping.setdefault(canonical, {"command": cmd, "aliases": []})
            info["aliases"].append(name)
        return mapping

    def _command_names(self) -> set[str]:
        names: set[str] = set()
        for info in self._unique_commands().values():
            names.update(info["aliases"])
        return names

    def main(self, args: list[str] | None = None, **kwargs: Any):
        """Run the CLI with *args*, handling help flags and bad input."""

        if args is None:
            args = sys.argv[1:]
        args = list(args)

        if args and "--help-verbose" in args:
            idx = args.index("--help-verbose")
            if idx == 0:
                self._print_verbose_help()
            else:
                target = args[0]
                canonical = None
                for cname, info in self._unique_commands().items():
                    if target == cname or target in info["aliases"]:
                        canonical = cname
                        break
                self._print_verbose_help(canonical or target)
            raise SystemExit(0)

        if args and args[0] == "--help":
            self._print_basic_help()
            raise SystemExit(0)

        if not args or args[0] not in self._command_names():
            typer.echo("Usage: solarb [COMMAND]")
            typer.echo("Commands:")
            for cname in sorted(self._unique_commands()):
                typer.echo(f"  {cname}")
            raise SystemExit(0 if not args else 1)
        return typer.main.get_command(self).main(args=args, **kwargs)

    # ------------------------------------------------------------------
    def _print_basic_help(self) -> None:
        """Print a short summary of available commands."""

        typer.echo("Usage: solarb [--help | --help-verbose] COMMAND [ARGS]")
        typer.echo("\nAvailable commands:")
        for cname, info in sorted(self._unique_commands().items()):
            doc = info["command"].callback.__doc__ or ""
            lines = doc.strip().splitlines()
            desc = lines[0] if lines else ""
            aliases = [
                a.replace("_", ":")
                for a in info["aliases"]
                if a != cname and a.replace("_", ":") != cname
            ]
            alias_str = f" (aliases: {', '.join(sorted(aliases))})" if aliases else ""
            typer.echo(f"  {cname:<12} {desc}{alias_str}")
        typer.echo("\nClusters: localnet (simulate only) and mainnet (live send).")
        typer.echo(
            "\nTip: run --help-verbose for the full catalog or COMMAND --help-verbose"
            " for focused tips."
        )

    # ------------------------------------------------------------------
    def _print_verbose_help(self, command: str | None = None) -> None:
        """Print detailed command reference with optional command filtering."""

        typer.echo(VERBOSE_GLOBAL_OVERVIEW.strip())
        typer.echo()

        if command:
            text = VERBOSE_COMMAND_HELP.get(command)
            if text:
                typer.echo(text.rstrip())
            else:
                typer.echo(f"No verbose help available for '{command}'.")
            return

        for cname in sorted(self._unique_commands()):
            text = VERBOSE_COMMAND_HELP.get(cname)
            if text:
                typer.echo(text.rstrip())
                typer.echo()

    def print_verbose_help_for(self, command: str) -> None:
        """Expose verbose help rendering for command functions."""

        self._print_verbose_help(command)


app = CLIApp(add_completion=False)
log = logging.getLogger("solarb")


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach console and rotating file handlers to the ``solarb`` logger once."""

    if getattr(log, "_configured", False):
        return log
    log.setLevel(getattr(logging, str(level or settings.log_level).upper(), logging.INFO))
    log.propagate = False
    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    ch = logging.StreamHandler()
    ch.setLevel(log.level)
    ch.setFormatter(fmt)
    log.addHandler(ch)

    log_path = settings.log_file
    if log_path:
        try:
            directory = os.path.dirname(log_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            fh = RotatingFileHandler(
                log_path,
                maxBytes=int(settings.log_max_bytes or 1_000_000),
                backupCount=int(settings.log_backup_count or 3),
            )
        except OSError as exc:
            # Console logging still works without the file.
            log.warning("file logging disabled (%s): %s", log_path, exc)
        else:
            fh.setLevel(log.level)
            fh.setFormatter(fmt)
            log.addHandler(fh)
    setattr(log, "_configured", True)
    return log


configure_logging()

__all__ = ["CLIApp", "TyperOption", "app", "configure_logging", "log"]
