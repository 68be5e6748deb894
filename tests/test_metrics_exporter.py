import pytest

pytest.importorskip("prometheus_client")

from solarb.metrics import exporter
from solarb.engine.graph import ExchangeGraph
from solarb.engine.ledger import DeduplicationLedger
from solarb.engine.search import ArbitrageSearch
from tests.doubles import FixedRatePool, triangle


def test_search_updates_counters_and_gauge():
    (x, y, z), pools = triangle()
    broken = FixedRatePool("metrics-broken", x, y, fail=True)
    graph = ExchangeGraph.from_pools(pools + [broken])
    ledger = DeduplicationLedger()
    search = ArbitrageSearch(graph, lambda _opp: None)

    before_opps = exporter.OPPORTUNITIES_TOTAL._value.get()
    before_dups = exporter.DUPLICATES_TOTAL._value.get()
    search.search(0, 1_000_000, ledger)
    search.search(0, 1_000_000, ledger)

    assert exporter.OPPORTUNITIES_TOTAL._value.get() == before_opps + 1
    assert exporter.DUPLICATES_TOTAL._value.get() == before_dups + 1
    assert exporter.LAST_PROFIT._value.get() == 30_000
    errors = exporter.QUOTE_ERRORS_TOTAL.labels(pool="metrics-broken")._value.get()
    assert errors > 0


def test_metrics_server_starts():
    exporter.start_metrics_server("8011")
