"""Bounded depth-first search for profitable cycles.

The search walks the exchange graph from a start token, quoting every pool
on every edge, and reports each cycle that returns to the start token with a
strictly larger balance. Paths hold at most ``max_path_len`` token entries
(start plus three hops by default) and never revisit a token except to close
the cycle at the start. Balances are integers throughout.
"""

from __future__ import annotations

import logging
from typing import Callable, Collection, Iterator

from ..constants import MAX_PATH_LEN
from ..errors import QuoteError
from ..metrics.exporter import DUPLICATES_TOTAL, LAST_PROFIT, OPPORTUNITIES_TOTAL, QUOTE_ERRORS_TOTAL
from ..models import Opportunity
from ..pools.base import Pool
from .graph import ExchangeGraph
from .ledger import DeduplicationLedger, opportunity_signature

log = logging.getLogger(__name__)

OpportunityHandler = Callable[[Opportunity], object]


class ArbitrageSearch:
    """Enumerate simple cycles through *graph* and hand profitable ones off.

    Parameters
    ----------
    graph:
        Exchange graph whose pool state is treated as a snapshot for the
        duration of one pass.
    on_opportunity:
        Called once per newly claimed opportunity, typically an
        :class:`~solarb.engine.executor.ArbitrageExecutor`.
    max_path_len:
        Maximum number of token entries in a path, including the start.
    """

    def __init__(
        self,
        graph: ExchangeGraph,
        on_opportunity: OpportunityHandler,
        max_path_len: int = MAX_PATH_LEN,
    ):
        self.graph = graph
        self.on_opportunity = on_opportunity
        self.max_path_len = max_path_len

    # ------------------------------------------------------------------
    def search(
        self,
        start_idx: int,
        init_balance: int,
        ledger: DeduplicationLedger,
        excluded: Collection[str] = (),
    ) -> list[Opportunity]:
        """Run one pass from *start_idx* and submit every new opportunity.

        Returns the opportunities handed to ``on_opportunity`` during this
        pass. Opportunities whose signature is already in *ledger* are
        skipped.
        """

        sent: list[Opportunity] = []
        for opp in self.iter_cycles(start_idx, init_balance, excluded):
            log.info("found arbitrage: %s -> %s", opp.init_balance, opp.final_balance)
            if not ledger.claim(opp.signature):
                log.info("arb already sent... %s", opp.signature)
                DUPLICATES_TOTAL.inc()
                continue
            OPPORTUNITIES_TOTAL.inc()
            LAST_PROFIT.set(opp.profit)
            self.on_opportunity(opp)
            sent.append(opp)
        return sent

    def iter_cycles(
        self,
        start_idx: int,
        init_balance: int,
        excluded: Collection[str] = (),
    ) -> Iterator[Opportunity]:
        """Yield every profitable cycle from *start_idx*, as it is found."""

        # Validate the start vertex up front; a bad index is a caller bug.
        self.graph.mint(start_idx)
        yield from self._walk(
            start_idx, init_balance, init_balance, [start_idx], [], excluded
        )

    # ------------------------------------------------------------------
    def _walk(
        self,
        start_idx: int,
        init_balance: int,
        curr_balance: int,
        path: list[int],
        pool_path: list[Pool],
        excluded: Collection[str],
    ) -> Iterator[Opportunity]:
        if len(path) >= self.max_path_len:
            return

        src_idx = path[-1]
        src_mint = self.graph.mint(src_idx)

        for dst_idx in self.graph.neighbors(src_idx):
            # Cycle-closing is the only revisit allowed.
            if dst_idx in path and dst_idx != start_idx:
                continue

            pools = self.graph.pools_between(src_idx, dst_idx)
            dst_mint = self.graph.mint(dst_idx)

            for pool in pools:
                if excluded and pool.name() in excluded:
                    continue
                try:
                    new_balance = pool.quote(curr_balance, src_mint, dst_mint)
                except QuoteError as exc:
                    log.debug("quote failed on %s: %s", pool.name(), exc)
                    QUOTE_ERRORS_TOTAL.labels(pool=pool.name()).inc()
                    continue

                new_path = path + [dst_idx]
                new_pool_path = pool_path + [pool]

                if dst_idx == start_idx:
                    if new_balance > init_balance:
                        yield Opportunity(
                            path=tuple(new_path),
                            pools=tuple(new_pool_path),
                            init_balance=init_balance,
                            final_balance=new_balance,
                            signature=opportunity_signature(new_path, new_pool_path),
                        )
                else:
                    yield from self._walk(
                        start_idx,
                        init_balance,
                        new_balance,
                        new_path,
                        new_pool_path,
                        excluded,
                    )
