"""Shared data models for arbitrage search and submission."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from .errors import ConfigurationError, SubmissionError

if TYPE_CHECKING:  # pragma: no cover - typing only
    from solders.instruction import Instruction

    from .pools.base import Pool


class Cluster(str, Enum):
    """Operating environment selecting dry-run or live submission."""

    LOCALNET = "localnet"
    MAINNET = "mainnet"

    @classmethod
    def parse(cls, value: str | "Cluster") -> "Cluster":
        """Return the cluster named by *value* or raise ``ConfigurationError``."""

        if isinstance(value, cls):
            return value
        raw = str(value or "").strip().lower()
        for member in cls:
            if member.value == raw:
                return member
        choices = ", ".join(m.value for m in cls)
        raise ConfigurationError(
            f"invalid cluster type {value!r} (expected one of: {choices})",
            details={"cluster": value},
        )

    @property
    def dry_run(self) -> bool:
        return self is Cluster.LOCALNET


@dataclass(frozen=True)
class Opportunity:
    """A profitable cycle discovered by the search engine.

    ``path`` holds token indices including the closing return to the start
    index, so a cycle of ``k`` hops has ``k + 1`` entries and ``k`` pools.
    """

    path: tuple[int, ...]
    pools: tuple["Pool", ...]
    init_balance: int
    final_balance: int
    signature: str

    @property
    def start_idx(self) -> int:
        return self.path[0]

    @property
    def hops(self) -> int:
        return len(self.pools)

    @property
    def profit(self) -> int:
        return self.final_balance - self.init_balance

    def describe(self) -> str:
        names = " -> ".join(p.name() for p in self.pools)
        route = "->".join(str(i) for i in self.path)
        return f"{route} via [{names}] {self.init_balance} -> {self.final_balance}"


@dataclass
class TransactionPlan:
    """Ordered instructions for one atomic arbitrage transaction.

    The plan is consumed exactly once by submission.
    """

    signature: str
    instructions: list["Instruction"]
    swap_input: int
    _consumed: bool = field(default=False, repr=False)

    def __len__(self) -> int:
        return len(self.instructions)

    @property
    def consumed(self) -> bool:
        return self._consumed

    def consume(self) -> list["Instruction"]:
        """Return the instructions, refusing to hand them out twice."""

        if self._consumed:
            raise SubmissionError(
                f"transaction plan {self.signature} already submitted",
                stage="plan",
            )
        self._consumed = True
        return list(self.instructions)


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of a dry-run simulation or a live send."""

    signature: str
    cluster: str
    ok: bool
    simulated: bool
    tx_signature: Optional[str] = None
    error: Optional[str] = None
    logs: tuple[str, ...] = ()
    units_consumed: Optional[int] = None


@dataclass
class SearchReport:
    """Summary of one driver run across all trade-size passes."""

    amounts: list[int] = field(default_factory=list)
    opportunities: list[Opportunity] = field(default_factory=list)
    excluded_pools: set[str] = field(default_factory=set)

    @property
    def passes(self) -> int:
        return len(self.amounts)

    def as_dict(self) -> dict[str, Any]:
        return {
            "passes": self.passes,
            "amounts": list(self.amounts),
            "opportunities": [o.signature for o in self.opportunities],
            "excluded_pools": sorted(self.excluded_pools),
        }
