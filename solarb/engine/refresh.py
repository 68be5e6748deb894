"""Batch account fetching that refreshes cached pool state.

Pool accounts are collected in pool order, fetched in chunks no larger than
the RPC limit and handed back to each pool. A pool whose accounts cannot be
fetched or decoded is excluded from searching instead of aborting the run.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Iterable, Optional, Sequence

from solders.account import Account
from solders.pubkey import Pubkey

from ..constants import MAX_ACCOUNTS_PER_REQUEST
from ..errors import RefreshError
from ..metrics.exporter import POOLS_EXCLUDED_TOTAL
from ..pools.base import Pool
from ..pools.layouts import token_account_amount

log = logging.getLogger(__name__)


def chunked(items: Sequence[Pubkey], size: int) -> list[list[Pubkey]]:
    """Split *items* into consecutive lists of at most *size* elements."""

    if size <= 0:
        raise ValueError("chunk size must be positive")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


class AccountRefresher:
    """Fetch pool accounts with ``getMultipleAccounts`` and apply them.

    Parameters
    ----------
    client:
        ``solana.rpc.api.Client`` (or anything with ``get_multiple_accounts``
        and ``get_account_info``).
    chunk_size:
        Accounts per request; capped at the RPC limit of 99.
    max_retries:
        Attempts per chunk before its pools are excluded.
    backoff_secs:
        Base delay; attempt ``n`` waits ``backoff_secs * 2 ** n``.
    """

    def __init__(
        self,
        client: Any,
        chunk_size: int = MAX_ACCOUNTS_PER_REQUEST,
        max_retries: int = 3,
        backoff_secs: float = 0.5,
    ):
        self.client = client
        self.chunk_size = max(1, min(int(chunk_size), MAX_ACCOUNTS_PER_REQUEST))
        self.max_retries = max(1, int(max_retries))
        if backoff_secs < 0:
            raise ValueError("backoff_secs cannot be negative")
        self.backoff_secs = backoff_secs

    # ------------------------------------------------------------------
    def fetch_accounts(self, keys: Sequence[Pubkey]) -> list[Optional[Account]]:
        """Return account data for *keys* in order, chunk by chunk.

        Raises ``RefreshError`` when a chunk still fails after all retries.
        """

        out: list[Optional[Account]] = []
        for chunk in chunked(keys, self.chunk_size):
            out.extend(self._fetch_chunk(chunk))
        return out

    def _fetch_chunk(self, chunk: list[Pubkey]) -> list[Optional[Account]]:
        last_exc: Exception | None = None
        for attempt in range(self.max_retries):
            try:
                resp = self.client.get_multiple_accounts(chunk)
                values = list(resp.value)
                if len(values) != len(chunk):
                    raise RefreshError(
                        f"expected {len(chunk)} accounts, got {len(values)}"
                    )
                return values
            except Exception as exc:
                last_exc = exc
                if attempt < self.max_retries - 1:
                    delay = self.backoff_secs * (2**attempt)
                    log.warning(
                        "account fetch failed (attempt %d/%d): %s; retrying in %.2fs",
                        attempt + 1,
                        self.max_retries,
                        exc,
                        delay,
                    )
                    time.sleep(delay)
        raise RefreshError(
            f"account fetch failed after {self.max_retries} attempts: {last_exc}",
            details={"accounts": [str(k) for k in chunk]},
        ) from last_exc

    # ------------------------------------------------------------------
    def refresh(self, pools: Iterable[Pool]) -> tuple[list[Pool], set[str]]:
        """Refresh every pool; return ``(healthy pools, excluded pool names)``.

        Chunks are fetched independently so a failing chunk only excludes
        the pools whose accounts it held.
        """

        pools = list(pools)
        keys: list[Pubkey] = []
        spans: list[tuple[Pool, int, int]] = []
        for pool in pools:
            accounts = pool.accounts_to_refresh()
            spans.append((pool, len(keys), len(keys) + len(accounts)))
            keys.extend(accounts)

        fetched: list[Optional[Account]] = []
        failed: set[int] = set()
        for chunk_no, chunk in enumerate(chunked(keys, self.chunk_size)):
            try:
                fetched.extend(self._fetch_chunk(chunk))
            except RefreshError as exc:
                log.error("%s", exc)
                start = chunk_no * self.chunk_size
                failed.update(range(start, start + len(chunk)))
                fetched.extend([None] * len(chunk))

        healthy: list[Pool] = []
        excluded: set[str] = set()
        for pool, lo, hi in spans:
            if any(i in failed for i in range(lo, hi)):
                log.warning("excluding pool %s: account fetch failed", pool.name())
                excluded.add(pool.name())
                continue
            try:
                pool.apply_refreshed(fetched[lo:hi])
            except RefreshError as exc:
                log.warning("excluding pool %s: %s", pool.name(), exc)
                excluded.add(pool.name())
                continue
            healthy.append(pool)

        if excluded:
            POOLS_EXCLUDED_TOTAL.inc(len(excluded))
        log.info(
            "refreshed %d pools (%d accounts), %d excluded",
            len(healthy),
            len(keys),
            len(excluded),
        )
        return healthy, excluded

    def fetch_token_balance(self, address: Pubkey) -> int:
        """Return the raw amount held by the token account at *address*."""

        try:
            resp = self.client.get_account_info(address)
        except Exception as exc:
            raise RefreshError(
                f"failed to fetch token account {address}: {exc}",
                account=str(address),
            ) from exc
        return token_account_amount(resp.value, address)
