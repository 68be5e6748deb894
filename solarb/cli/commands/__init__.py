"""Grouped Typer command modules for the solarb CLI."""

from __future__ import annotations

from . import keys, pools, search

__all__ = ["keys", "pools", "search"]
