"""Cycle search tests."""

from solders.pubkey import Pubkey

from solarb.engine.graph import ExchangeGraph
from solarb.engine.ledger import DeduplicationLedger
from solarb.engine.search import ArbitrageSearch
from tests.doubles import FixedRatePool, triangle


def _run(pools, start_mint, balance=1_000_000, max_path_len=4, ledger=None):
    graph = ExchangeGraph.from_pools(pools)
    found = []
    search = ArbitrageSearch(graph, found.append, max_path_len=max_path_len)
    if ledger is None:
        ledger = DeduplicationLedger()
    search.search(graph.index_of(start_mint), balance, ledger)
    return graph, found


def test_triangular_profit_found_once():
    (x, y, z), pools = triangle()
    graph, found = _run(pools, x)
    assert len(found) == 1
    opp = found[0]
    assert opp.path == (0, 1, 2, 0)
    assert [p.name() for p in opp.pools] == ["xy", "yz", "zx"]
    assert opp.init_balance == 1_000_000
    assert opp.final_balance == 1_030_000
    assert opp.profit == 30_000


def test_flat_rates_yield_nothing():
    (x, y, z), pools = triangle(rates=((1, 1), (1, 1), (1, 1)))
    _, found = _run(pools, x)
    assert found == []


def test_same_signature_submitted_once():
    (x, y, z), pools = triangle()
    twin = FixedRatePool("yz", y, z)
    _, found = _run(pools + [twin], x)
    assert len(found) == 1


def test_distinct_pool_names_are_distinct_opportunities():
    (x, y, z), pools = triangle()
    other = FixedRatePool("yz-2", y, z)
    _, found = _run(pools + [other], x)
    assert len(found) == 2
    assert len({o.signature for o in found}) == 2


def _ring(n):
    mints = [Pubkey.new_unique() for _ in range(n)]
    pools = []
    for i in range(n):
        num, den = (103, 100) if i == n - 1 else (1, 1)
        pools.append(FixedRatePool(f"r{i}", mints[i], mints[(i + 1) % n], num, den))
    return mints, pools


def test_five_hop_cycle_is_beyond_depth_bound():
    mints, pools = _ring(5)
    _, found = _run(pools, mints[0])
    assert found == []


def test_five_hop_cycle_found_when_bound_allows():
    mints, pools = _ring(5)
    _, found = _run(pools, mints[0], max_path_len=6)
    assert [len(o.path) for o in found] == [6]


def test_paths_are_simple_and_bounded():
    mints = [Pubkey.new_unique() for _ in range(4)]
    pools = []
    for i in range(4):
        for j in range(i + 1, 4):
            pools.append(FixedRatePool(f"p{i}{j}", mints[i], mints[j], 101, 100))
    graph = ExchangeGraph.from_pools(pools)
    search = ArbitrageSearch(graph, lambda _: None)
    cycles = list(search.iter_cycles(0, 1_000_000))
    assert cycles
    for opp in cycles:
        assert opp.path[0] == opp.path[-1] == 0
        assert len(opp.path) <= 4
        inner = opp.path[1:-1]
        assert 0 not in inner
        assert len(set(inner)) == len(inner)
        assert opp.final_balance > opp.init_balance


def test_second_run_with_same_ledger_submits_nothing():
    (x, y, z), pools = triangle()
    ledger = DeduplicationLedger()
    _, first = _run(pools, x, ledger=ledger)
    _, second = _run(pools, x, ledger=ledger)
    assert len(first) == 1
    assert second == []


def test_quote_error_abandons_only_that_branch():
    (x, y, z), pools = triangle()
    broken = FixedRatePool("broken", x, y, fail=True)
    _, found = _run([broken] + pools, x)
    assert len(found) == 1
    assert broken.quotes > 0


def test_excluded_pools_are_not_quoted():
    (x, y, z), pools = triangle()
    graph = ExchangeGraph.from_pools(pools)
    found = []
    search = ArbitrageSearch(graph, found.append)
    search.search(0, 1_000_000, DeduplicationLedger(), excluded={"yz"})
    assert found == []
    assert pools[1].quotes == 0
