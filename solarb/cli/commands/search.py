"""Arbitrage search CLI command."""

from __future__ import annotations

import json

import typer

from solarb.config import settings
from solarb.engine.driver import SearchDriver
from solarb.engine.executor import ArbitrageExecutor, TransactionSubmitter
from solarb.engine.graph import ExchangeGraph
from solarb.engine.ledger import DeduplicationLedger
from solarb.engine.search import ArbitrageSearch
from solarb.errors import SolarbError
from solarb.metrics.exporter import start_metrics_server
from solarb.models import Cluster, SearchReport
from solarb.wallet import derive_token_address, load_keypair

from ..core import TyperOption, app, log
from ..utils import (
    _build_client,
    _build_refresher,
    _cluster_urls,
    _load_pools,
    _program_ids,
    _start_index,
)


def run_search(
    cluster: Cluster,
    start_amount: int | None = None,
    passes: int | None = None,
) -> SearchReport:
    """Load, refresh and search; raises ``SolarbError`` on fatal problems."""

    program_id, start_mint = _program_ids(settings)
    owner = load_keypair(settings.keypair_path_for(cluster))
    pools = _load_pools(settings)

    read_url, send_url = _cluster_urls(cluster, settings)
    client = _build_client(read_url)
    send_client = client if send_url == read_url else _build_client(send_url)
    refresher = _build_refresher(client, settings)

    healthy, excluded = refresher.refresh(pools)
    graph = ExchangeGraph.from_pools(healthy)
    start_idx = _start_index(graph, start_mint)
    log.info(
        "graph ready: %d mints, %d pools (%d excluded)",
        graph.mint_count,
        graph.pool_count,
        len(excluded),
    )

    amount = start_amount or settings.start_amount
    if amount is None:
        token_account = derive_token_address(owner.pubkey(), start_mint)
        amount = refresher.fetch_token_balance(token_account)
        log.info("start token balance: %s", amount)

    submitter = TransactionSubmitter(client, owner, cluster, send_client=send_client)
    executor = ArbitrageExecutor(program_id, owner.pubkey(), graph.token_mints, submitter)
    search = ArbitrageSearch(graph, executor, max_path_len=settings.max_path_len)
    driver = SearchDriver(
        search,
        DeduplicationLedger(),
        min_swap_amount=settings.min_swap_amount,
        max_passes=passes or settings.max_search_passes,
        size_divisor=settings.size_divisor,
        refresher=refresher if settings.refresh_each_pass else None,
        pools=healthy,
    )
    report = driver.run(start_idx, amount)
    report.excluded_pools.update(excluded)
    return report


@app.command("search")
def search(
    cluster: str = TyperOption(
        ..., "--cluster", help="Cluster to run against: localnet or mainnet."
    ),
    start_amount: int | None = TyperOption(
        None,
        "--start-amount",
        help="Scaled trade size of the first pass. Overrides START_AMOUNT and the wallet balance.",
    ),
    passes: int | None = TyperOption(
        None, "--passes", help="Maximum number of decreasing-size passes."
    ),
    metrics: bool | None = TyperOption(
        None,
        "--metrics/--no-metrics",
        help="Serve Prometheus metrics on PROM_PORT. Overrides env.",
    ),
    help_verbose: bool = False,
) -> None:
    """Search for profitable cycles and submit each one as an atomic transaction."""

    if help_verbose:
        app.print_verbose_help_for("search")
        raise SystemExit(0)

    try:
        selected = Cluster.parse(cluster)
        if start_amount is not None and start_amount <= 0:
            raise SolarbError("--start-amount must be positive")
        if passes is not None and passes <= 0:
            raise SolarbError("--passes must be positive")
    except SolarbError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise SystemExit(1)

    serve_metrics = settings.metrics_enabled if metrics is None else metrics
    if serve_metrics:
        try:
            start_metrics_server(settings.prom_port)
        except OSError as exc:
            log.warning("metrics server unavailable on %s: %s", settings.prom_port, exc)

    log.info("search start cluster=%s dry_run=%s", selected.value, selected.dry_run)
    try:
        report = run_search(selected, start_amount=start_amount, passes=passes)
    except SolarbError as exc:
        log.error("fatal: %s", exc)
        typer.echo(f"error: {exc}", err=True)
        raise SystemExit(1)

    typer.echo(json.dumps(report.as_dict()))


__all__ = ["run_search", "search"]
