"""Cyclic arbitrage search and submission for Solana liquidity pools."""

from __future__ import annotations

from .config import Settings
from .engine import ArbitrageSearch, DeduplicationLedger, ExchangeGraph, SearchDriver
from .models import Cluster, Opportunity, SearchReport, SubmissionResult, TransactionPlan
from .pools import Pool

__version__ = "0.1.0"

__all__ = [
    "ArbitrageSearch",
    "Cluster",
    "DeduplicationLedger",
    "ExchangeGraph",
    "Opportunity",
    "Pool",
    "SearchDriver",
    "SearchReport",
    "Settings",
    "SubmissionResult",
    "TransactionPlan",
]
