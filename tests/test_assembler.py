"""Transaction plan assembly tests."""

import pytest
from solders.pubkey import Pubkey

from solarb.engine.assembler import build_transaction_plan
from solarb.engine.graph import ExchangeGraph
from solarb.engine.search import ArbitrageSearch
from solarb.errors import GraphConsistencyError, SubmissionError
from solarb.instructions import sighash
from solarb.models import Opportunity
from tests.doubles import triangle

PROGRAM_ID = Pubkey.new_unique()
OWNER = Pubkey.new_unique()


def _opportunity():
    (x, y, z), pools = triangle()
    graph = ExchangeGraph.from_pools(pools)
    opps = list(ArbitrageSearch(graph, lambda _: None).iter_cycles(0, 1_000_000))
    return graph, opps[0]


def test_plan_has_hops_plus_two_instructions():
    graph, opp = _opportunity()
    plan = build_transaction_plan(PROGRAM_ID, OWNER, opp, graph.token_mints)
    assert len(plan) == opp.hops + 2 == 5
    assert plan.swap_input == 1_000_000
    assert plan.signature == opp.signature


def test_plan_is_bracketed_by_start_and_profit_check():
    graph, opp = _opportunity()
    plan = build_transaction_plan(PROGRAM_ID, OWNER, opp, graph.token_mints)
    first, *hops, last = plan.instructions
    assert bytes(first.data) == sighash("start_swap") + (1_000_000).to_bytes(8, "little")
    assert bytes(last.data) == sighash("profit_or_revert")
    assert all(bytes(ix.data) == sighash("fixed_swap") for ix in hops)
    assert all(ix.program_id == PROGRAM_ID for ix in plan.instructions)


def test_plan_is_consumed_once():
    graph, opp = _opportunity()
    plan = build_transaction_plan(PROGRAM_ID, OWNER, opp, graph.token_mints)
    assert len(plan.consume()) == 5
    with pytest.raises(SubmissionError):
        plan.consume()


def test_open_path_is_rejected():
    graph, opp = _opportunity()
    broken = Opportunity(
        path=(0, 1, 2),
        pools=opp.pools,
        init_balance=1,
        final_balance=2,
        signature="bad",
    )
    with pytest.raises(GraphConsistencyError):
        build_transaction_plan(PROGRAM_ID, OWNER, broken, graph.token_mints)
