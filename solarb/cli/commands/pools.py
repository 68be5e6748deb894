"""Pool configuration inspection CLI commands."""

from __future__ import annotations

import json

import typer

from solarb.config import settings
from solarb.engine.graph import ExchangeGraph
from solarb.errors import SolarbError
from solarb.pools.loader import describe_pools

from ..core import TyperOption, app
from ..utils import _load_pools


@app.command("pools:list")
@app.command("pools_list")
def pools_list(
    as_json: bool = TyperOption(False, "--json/--no-json", help="Emit JSON."),
    help_verbose: bool = False,
) -> None:
    """List configured pools and the token graph they form."""

    if help_verbose:
        app.print_verbose_help_for("pools:list")
        raise SystemExit(0)

    try:
        pools = _load_pools(settings)
        graph = ExchangeGraph.from_pools(pools)
    except SolarbError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise SystemExit(1)

    rows = describe_pools(pools)
    if as_json:
        typer.echo(
            json.dumps(
                {"pools": rows, "mints": graph.mint_count, "pool_count": graph.pool_count}
            )
        )
        return
    for row in rows:
        mints = " / ".join(str(m) for m in row["mints"])
        typer.echo(f"{row['name']:<40} {row['type']:<18} {mints}")
    typer.echo(f"{graph.pool_count} pools across {graph.mint_count} mints")


__all__ = ["pools_list"]
