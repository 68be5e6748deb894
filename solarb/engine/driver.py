"""Multi-pass search at decreasing trade sizes."""

from __future__ import annotations

import logging
import time
from typing import Iterable, Optional

from ..metrics.exporter import SEARCH_PASS_LATENCY
from ..models import SearchReport
from ..pools.base import Pool
from .ledger import DeduplicationLedger
from .refresh import AccountRefresher
from .search import ArbitrageSearch

log = logging.getLogger(__name__)


class SearchDriver:
    """Run :class:`ArbitrageSearch` repeatedly, shrinking the trade size.

    Pricing curves are non-linear, so a cycle that loses money at one size
    can pay at a smaller one. The first pass uses the start amount; each
    later pass divides it by ``size_divisor`` and runs only while the amount
    stays at or above ``min_swap_amount``. One ledger is shared by every pass
    so a cycle is submitted at most once per run.

    When a ``refresher`` is given, ``pools`` are refreshed between passes
    and pools that fail to refresh are skipped for that pass. The first pass
    uses the state the caller loaded the graph with.
    """

    def __init__(
        self,
        search: ArbitrageSearch,
        ledger: Optional[DeduplicationLedger] = None,
        min_swap_amount: int = 10**6,
        max_passes: int = 4,
        size_divisor: int = 2,
        refresher: Optional[AccountRefresher] = None,
        pools: Iterable[Pool] = (),
    ):
        if size_divisor < 2:
            raise ValueError("size_divisor must be at least 2")
        if max_passes <= 0:
            raise ValueError("max_passes must be positive")
        self.search = search
        self.ledger = ledger if ledger is not None else DeduplicationLedger()
        self.min_swap_amount = min_swap_amount
        self.max_passes = max_passes
        self.size_divisor = size_divisor
        self.refresher = refresher
        self.pools = list(pools)

    def schedule(self, start_amount: int) -> list[int]:
        """Return the trade sizes a run starting at *start_amount* searches."""

        amounts: list[int] = []
        amount = int(start_amount)
        if amount <= 0:
            return amounts
        while len(amounts) < self.max_passes:
            amounts.append(amount)
            amount //= self.size_divisor
            if amount < self.min_swap_amount:
                break
        return amounts

    def run(self, start_idx: int, start_amount: int) -> SearchReport:
        """Search from *start_idx* at every scheduled size and report the result."""

        report = SearchReport()
        amounts = self.schedule(start_amount)
        if not amounts:
            log.warning("nothing to search: start amount %s", start_amount)
            return report

        for pass_no, amount in enumerate(amounts, start=1):
            excluded: set[str] = set()
            if pass_no > 1 and self.refresher is not None and self.pools:
                _, excluded = self.refresher.refresh(self.pools)
                report.excluded_pools.update(excluded)

            log.info("pass %d/%d: searching with %s", pass_no, len(amounts), amount)
            started = time.perf_counter()
            found = self.search.search(start_idx, amount, self.ledger, excluded)
            SEARCH_PASS_LATENCY.observe(time.perf_counter() - started)

            report.amounts.append(amount)
            report.opportunities.extend(found)
            log.info("pass %d: %d new opportunities", pass_no, len(found))

        return report
