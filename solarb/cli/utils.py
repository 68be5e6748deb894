"""Shared helpers used across solarb CLI command modules."""

from __future__ import annotations

import logging
from typing import Any

from solana.rpc.api import Client
from solders.pubkey import Pubkey

from solarb.config import Settings, settings
from solarb.engine.graph import ExchangeGraph
from solarb.engine.refresh import AccountRefresher
from solarb.errors import ConfigurationError
from solarb.models import Cluster
from solarb.pools.base import Pool
from solarb.pools.layouts import to_pubkey
from solarb.pools.loader import load_pools

log = logging.getLogger("solarb")


def _build_client(url: str) -> Any:
    """Factory for RPC clients, kept separate so tests can substitute one."""

    return Client(url)


def _build_refresher(client: Any, _settings: Settings = settings) -> AccountRefresher:
    return AccountRefresher(
        client,
        chunk_size=_settings.account_chunk_size,
        max_retries=_settings.refresh_max_retries,
        backoff_secs=_settings.refresh_backoff_secs,
    )


def _program_ids(_settings: Settings = settings) -> tuple[Pubkey, Pubkey]:
    """Return ``(arb program id, start mint)`` parsed from settings."""

    return (
        to_pubkey(_settings.arb_program_id, "ARB_PROGRAM_ID"),
        to_pubkey(_settings.start_mint, "START_MINT"),
    )


def _load_pools(_settings: Settings = settings) -> list[Pool]:
    if not _settings.pool_dirs:
        raise ConfigurationError("POOL_DIRS is empty; nothing to search")
    pools = load_pools(_settings.pool_dirs)
    if not pools:
        raise ConfigurationError("no pools were loaded from POOL_DIRS")
    return pools


def _start_index(graph: ExchangeGraph, start_mint: Pubkey) -> int:
    """Return the graph index of *start_mint* or fail with a configuration error."""

    idx = graph.index_of(start_mint)
    if idx is None:
        raise ConfigurationError(
            f"start mint {start_mint} is not traded by any loaded pool",
            details={"mints": graph.mint_count, "pools": graph.pool_count},
        )
    return idx


def _cluster_urls(cluster: Cluster, _settings: Settings = settings) -> tuple[str, str]:
    return _settings.rpc_url_for(cluster), _settings.send_rpc_url_for(cluster)


__all__ = [
    "_build_client",
    "_build_refresher",
    "_cluster_urls",
    "_load_pools",
    "_program_ids",
    "_start_index",
]
