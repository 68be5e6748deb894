"""Sign, simulate or send arbitrage transactions.

On localnet every plan is only simulated; on mainnet it is sent with
preflight checks skipped so the on-chain profit check is the single gate.
Submission failures are logged, counted and returned as failed results;
they never stop the search.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from solana.rpc.types import TxOpts
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.transaction import Transaction

from ..errors import QuoteError, SubmissionError
from ..metrics.exporter import SUBMISSION_ERRORS_TOTAL, SUBMISSIONS_TOTAL
from ..models import Cluster, Opportunity, SubmissionResult, TransactionPlan
from .assembler import build_transaction_plan

log = logging.getLogger(__name__)


class TransactionSubmitter:
    """Turn a :class:`TransactionPlan` into a signed transaction and submit it.

    Parameters
    ----------
    client:
        ``solana.rpc.api.Client`` used for blockhashes and simulation.
    owner:
        Fee payer and sole signer.
    cluster:
        Selects dry-run simulation (localnet) or live send (mainnet).
    send_client:
        Optional separate client for live sends; defaults to *client*.
    """

    def __init__(
        self,
        client: Any,
        owner: Keypair,
        cluster: Cluster | str,
        send_client: Any | None = None,
    ):
        self.client = client
        self.send_client = send_client or client
        self.owner = owner
        self.cluster = Cluster.parse(cluster)

    @property
    def mode(self) -> str:
        return "simulate" if self.cluster.dry_run else "send"

    def sign(self, plan: TransactionPlan) -> Transaction:
        """Consume *plan* and return it signed against a fresh blockhash."""

        ixs = plan.consume()
        try:
            blockhash = self.client.get_latest_blockhash().value.blockhash
        except Exception as exc:
            raise SubmissionError(
                f"failed to fetch blockhash: {exc}",
                cluster=self.cluster.value,
                stage="blockhash",
            ) from exc
        try:
            return Transaction.new_signed_with_payer(
                ixs, self.owner.pubkey(), [self.owner], blockhash
            )
        except Exception as exc:
            raise SubmissionError(
                f"failed to sign transaction: {exc}",
                cluster=self.cluster.value,
                stage="sign",
            ) from exc

    def submit(self, plan: TransactionPlan) -> SubmissionResult:
        """Simulate or send *plan*; never raises for per-plan failures."""

        try:
            tx = self.sign(plan)
            if self.cluster.dry_run:
                result = self._simulate(plan.signature, tx)
            else:
                result = self._send(plan.signature, tx)
        except SubmissionError as exc:
            log.error("submission failed for %s: %s", plan.signature, exc)
            SUBMISSION_ERRORS_TOTAL.labels(stage=exc.stage or "unknown").inc()
            SUBMISSIONS_TOTAL.labels(mode=self.mode, result="error").inc()
            return SubmissionResult(
                signature=plan.signature,
                cluster=self.cluster.value,
                ok=False,
                simulated=self.cluster.dry_run,
                error=str(exc),
            )

        SUBMISSIONS_TOTAL.labels(
            mode=self.mode, result="ok" if result.ok else "failed"
        ).inc()
        return result

    # ------------------------------------------------------------------
    def _simulate(self, signature: str, tx: Transaction) -> SubmissionResult:
        try:
            resp = self.client.simulate_transaction(tx)
        except Exception as exc:
            raise SubmissionError(
                f"simulation request failed: {exc}",
                cluster=self.cluster.value,
                stage="simulate",
            ) from exc

        value = resp.value
        logs: Sequence[str] = tuple(getattr(value, "logs", None) or ())
        err = getattr(value, "err", None)
        for line in logs:
            log.info("sim: %s", line)
        if err is not None:
            log.warning("simulation of %s failed: %s", signature, err)
        return SubmissionResult(
            signature=signature,
            cluster=self.cluster.value,
            ok=err is None,
            simulated=True,
            error=None if err is None else str(err),
            logs=tuple(logs),
            units_consumed=getattr(value, "units_consumed", None),
        )

    def _send(self, signature: str, tx: Transaction) -> SubmissionResult:
        try:
            resp = self.send_client.send_raw_transaction(
                bytes(tx), opts=TxOpts(skip_preflight=True)
            )
        except Exception as exc:
            raise SubmissionError(
                f"send failed: {exc}",
                cluster=self.cluster.value,
                stage="send",
            ) from exc

        tx_sig = str(resp.value)
        log.info("sent %s as %s", signature, tx_sig)
        return SubmissionResult(
            signature=signature,
            cluster=self.cluster.value,
            ok=True,
            simulated=False,
            tx_signature=tx_sig,
        )


class ArbitrageExecutor:
    """Opportunity callback that assembles and submits a transaction.

    Instances are passed to :class:`~solarb.engine.search.ArbitrageSearch`
    as ``on_opportunity``. Every result is kept in :attr:`results`.
    """

    def __init__(
        self,
        program_id: Pubkey,
        owner: Pubkey,
        token_mints: Sequence[Pubkey],
        submitter: TransactionSubmitter,
    ):
        self.program_id = program_id
        self.owner = owner
        self.token_mints = token_mints
        self.submitter = submitter
        self.results: list[SubmissionResult] = []

    def __call__(self, opportunity: Opportunity) -> Optional[SubmissionResult]:
        log.info("submitting %s", opportunity.describe())
        try:
            plan = build_transaction_plan(
                self.program_id, self.owner, opportunity, self.token_mints
            )
        except QuoteError as exc:
            log.error("cannot assemble %s: %s", opportunity.signature, exc)
            SUBMISSION_ERRORS_TOTAL.labels(stage="assemble").inc()
            result = SubmissionResult(
                signature=opportunity.signature,
                cluster=self.submitter.cluster.value,
                ok=False,
                simulated=self.submitter.cluster.dry_run,
                error=str(exc),
            )
            self.results.append(result)
            return result
        result = self.submitter.submit(plan)
        self.results.append(result)
        return result
