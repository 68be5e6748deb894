"""Submission tests using a recording RPC client."""

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from solarb.engine.assembler import build_transaction_plan
from solarb.engine.executor import ArbitrageExecutor, TransactionSubmitter
from solarb.engine.graph import ExchangeGraph
from solarb.engine.ledger import DeduplicationLedger
from solarb.engine.search import ArbitrageSearch
from solarb.models import Cluster
from tests.doubles import FakeRpcClient, triangle

PROGRAM_ID = Pubkey.new_unique()


def _setup(cluster, client):
    owner = Keypair()
    (x, y, z), pools = triangle()
    graph = ExchangeGraph.from_pools(pools)
    submitter = TransactionSubmitter(client, owner, cluster)
    executor = ArbitrageExecutor(PROGRAM_ID, owner.pubkey(), graph.token_mints, submitter)
    return owner, graph, executor


def test_localnet_simulates_and_never_sends():
    client = FakeRpcClient()
    _, graph, executor = _setup(Cluster.LOCALNET, client)
    ArbitrageSearch(graph, executor).search(0, 1_000_000, DeduplicationLedger())

    assert len(executor.results) == 1
    result = executor.results[0]
    assert result.ok and result.simulated
    assert result.units_consumed == 1234
    assert len(client.simulated) == 1
    assert client.sent == []


def test_mainnet_sends_with_preflight_skipped():
    client = FakeRpcClient()
    _, graph, executor = _setup("mainnet", client)
    ArbitrageSearch(graph, executor).search(0, 1_000_000, DeduplicationLedger())

    result = executor.results[0]
    assert result.ok and not result.simulated
    assert result.tx_signature == "5igSentSignature"
    assert client.simulated == []
    (raw, opts), = client.sent
    assert isinstance(raw, bytes)
    assert opts.skip_preflight is True


def test_simulation_error_is_reported_not_raised():
    client = FakeRpcClient(sim_err="InstructionError(4, Custom(0))")
    _, graph, executor = _setup(Cluster.LOCALNET, client)
    ArbitrageSearch(graph, executor).search(0, 1_000_000, DeduplicationLedger())

    result = executor.results[0]
    assert not result.ok
    assert "Custom(0)" in result.error


def test_transport_failure_is_reported_and_search_continues():
    class BrokenClient(FakeRpcClient):
        def send_raw_transaction(self, raw, opts=None):
            raise ConnectionError("connection reset")

    client = BrokenClient()
    owner, graph, executor = _setup(Cluster.MAINNET, client)
    ArbitrageSearch(graph, executor).search(0, 1_000_000, DeduplicationLedger())

    result = executor.results[0]
    assert not result.ok
    assert "connection reset" in result.error


def test_blockhash_failure_is_reported():
    class NoBlockhash(FakeRpcClient):
        def get_latest_blockhash(self):
            raise TimeoutError("timed out")

    client = NoBlockhash()
    owner, graph, executor = _setup(Cluster.LOCALNET, client)
    opp = next(ArbitrageSearch(graph, executor).iter_cycles(0, 1_000_000))
    plan = build_transaction_plan(PROGRAM_ID, owner.pubkey(), opp, graph.token_mints)
    result = executor.submitter.submit(plan)
    assert not result.ok
    assert "blockhash" in result.error
    assert client.simulated == []


def test_amount_beyond_u64_is_reported_without_submitting():
    client = FakeRpcClient()
    _, graph, executor = _setup(Cluster.LOCALNET, client)
    ArbitrageSearch(graph, executor).search(0, 2**64, DeduplicationLedger())

    result = executor.results[0]
    assert not result.ok
    assert "u64" in result.error
    assert client.simulated == []
