"""Run-scoped record of opportunities already handed to submission."""

from __future__ import annotations

import threading
from typing import Iterable, Sequence

from ..pools.base import Pool


def opportunity_signature(path: Sequence[int], pools: Iterable[Pool]) -> str:
    """Return the ledger key for a cycle.

    The key concatenates the visited token indices and the traversed pool
    names. Separators keep ``[1, 23]`` and ``[12, 3]`` apart.
    """

    mint_keys = "-".join(str(i) for i in path)
    pool_keys = "|".join(p.name() for p in pools)
    return f"{mint_keys}|{pool_keys}"


class DeduplicationLedger:
    """Set of opportunity signatures, shared by every pass of one driver run.

    The ledger only grows. :meth:`claim` is an atomic check-and-insert so
    concurrent searches submit each signature at most once.
    """

    def __init__(self) -> None:
        self._seen: set[str] = set()
        self._lock = threading.Lock()

    def claim(self, signature: str) -> bool:
        """Record *signature*; return ``False`` when it was already present."""

        with self._lock:
            if signature in self._seen:
                return False
            self._seen.add(signature)
            return True

    def __contains__(self, signature: object) -> bool:
        with self._lock:
            return signature in self._seen

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)

    def __bool__(self) -> bool:
        # An empty ledger is still a ledger.
        return True

    def snapshot(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._seen)
