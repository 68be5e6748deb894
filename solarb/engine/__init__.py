"""Search engine: exchange graph, cycle search, assembly and submission."""

from .assembler import build_transaction_plan
from .driver import SearchDriver
from .executor import ArbitrageExecutor, TransactionSubmitter
from .graph import ExchangeGraph
from .ledger import DeduplicationLedger, opportunity_signature
from .refresh import AccountRefresher
from .search import ArbitrageSearch

__all__ = [
    "AccountRefresher",
    "ArbitrageExecutor",
    "ArbitrageSearch",
    "DeduplicationLedger",
    "ExchangeGraph",
    "SearchDriver",
    "TransactionSubmitter",
    "build_transaction_plan",
    "opportunity_signature",
]
