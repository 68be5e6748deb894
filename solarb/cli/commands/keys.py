"""Owner keypair validation CLI commands."""

from __future__ import annotations

import typer

from solarb.config import settings
from solarb.errors import SolarbError
from solarb.models import Cluster
from solarb.wallet import derive_token_address, load_keypair

from ..core import TyperOption, app, log
from ..utils import _program_ids


@app.command("keys:check")
@app.command("keys_check")
def keys_check(
    cluster: str = TyperOption(
        ..., "--cluster", help="Cluster whose keypair to check: localnet or mainnet."
    ),
    help_verbose: bool = False,
) -> None:
    """Load the owner keypair and print the start token account it trades from."""

    if help_verbose:
        app.print_verbose_help_for("keys:check")
        raise SystemExit(0)

    try:
        selected = Cluster.parse(cluster)
        _, start_mint = _program_ids(settings)
        owner = load_keypair(settings.keypair_path_for(selected)).pubkey()
    except SolarbError as exc:
        log.error("[%s] ERROR: %s", cluster, exc)
        typer.echo(f"error: {exc}", err=True)
        raise SystemExit(1)

    token_account = derive_token_address(owner, start_mint)
    typer.echo(
        f"owner={owner} start_mint={start_mint} token_account={token_account}"
    )


__all__ = ["keys_check"]
