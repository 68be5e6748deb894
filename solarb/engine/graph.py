"""Token-index multi-graph of the pools connecting each token pair."""

from __future__ import annotations

from typing import Iterable

from solders.pubkey import Pubkey

from ..errors import GraphConsistencyError
from ..pools.base import Pool


class ExchangeGraph:
    """Directed multi-graph keyed by token index.

    ``edges[a][b]`` lists every pool trading token ``a`` into token ``b`` in
    insertion order. Each pool is inserted in both directions as the same
    object, so a refresh of its state is seen from either side. Dicts keep
    insertion order, which makes neighbor iteration and thus traversal order
    reproducible.
    """

    def __init__(self) -> None:
        self.token_mints: list[Pubkey] = []
        self._mint_idx: dict[Pubkey, int] = {}
        self.edges: dict[int, dict[int, list[Pool]]] = {}
        self._pools: list[Pool] = []

    @classmethod
    def from_pools(cls, pools: Iterable[Pool]) -> "ExchangeGraph":
        graph = cls()
        for pool in pools:
            graph.add_pool(pool)
        return graph

    # ------------------------------------------------------------------
    def add_mint(self, mint: Pubkey) -> int:
        """Return the index of *mint*, assigning the next free one on first sighting."""

        idx = self._mint_idx.get(mint)
        if idx is None:
            idx = len(self.token_mints)
            self._mint_idx[mint] = idx
            self.token_mints.append(mint)
            self.edges[idx] = {}
        return idx

    def add_pool(self, pool: Pool) -> tuple[int, int]:
        """Insert *pool* on both directed edges between its two mints."""

        mints = pool.mints()
        if len(mints) != 2 or mints[0] == mints[1]:
            raise GraphConsistencyError(
                f"pool {pool.name()} must connect exactly two distinct mints"
            )
        idx0 = self.add_mint(mints[0])
        idx1 = self.add_mint(mints[1])
        self.edges[idx0].setdefault(idx1, []).append(pool)
        self.edges[idx1].setdefault(idx0, []).append(pool)
        self._pools.append(pool)
        return idx0, idx1

    # ------------------------------------------------------------------
    def index_of(self, mint: Pubkey) -> int | None:
        return self._mint_idx.get(mint)

    def mint(self, idx: int) -> Pubkey:
        if not 0 <= idx < len(self.token_mints):
            raise GraphConsistencyError(f"unknown token index {idx}", src=idx)
        return self.token_mints[idx]

    def neighbors(self, idx: int) -> list[int]:
        """Return token indices reachable from *idx* in one hop."""

        try:
            return list(self.edges[idx])
        except KeyError as exc:
            raise GraphConsistencyError(f"no edge record for token {idx}", src=idx) from exc

    def pools_between(self, src: int, dst: int) -> list[Pool]:
        """Return the pools trading *src* into *dst*."""

        try:
            return self.edges[src][dst]
        except KeyError as exc:
            raise GraphConsistencyError(
                f"missing edge {src} -> {dst}", src=src, dst=dst
            ) from exc

    @property
    def pools(self) -> list[Pool]:
        return list(self._pools)

    @property
    def mint_count(self) -> int:
        return len(self.token_mints)

    @property
    def pool_count(self) -> int:
        return len(self._pools)

    def __repr__(self) -> str:
        return f"ExchangeGraph(mints={self.mint_count}, pools={self.pool_count})"
