"""StableSwap pool adapters for Saber and Mercurial.

Two-coin StableSwap invariant with an amplification coefficient. Token
amounts are normalized to the largest decimals in the pool before solving the
invariant, and the trade fee is taken from the output.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from solders.account import Account
from solders.instruction import Instruction
from solders.pubkey import Pubkey

from ..constants import MERCURIAL_PROGRAM_ID, SABER_PROGRAM_ID, U64_MAX
from ..errors import QuoteError
from ..instructions import readonly, signer, swap_hop_instruction, writable
from ..wallet import derive_token_address
from .base import Pool
from .layouts import StableSwapConfig, read_reserves, to_pubkey

log = logging.getLogger(__name__)

N_COINS = 2
MAX_ITERATIONS = 256


def compute_d(amp: int, x: int, y: int) -> int:
    """Return the StableSwap invariant ``D`` for balances *x* and *y*."""

    total = x + y
    if total == 0:
        return 0
    if x == 0 or y == 0:
        raise QuoteError("invariant undefined for an empty reserve")
    ann = amp * N_COINS
    d = total
    for _ in range(MAX_ITERATIONS):
        d_p = d
        d_p = d_p * d // (x * N_COINS)
        d_p = d_p * d // (y * N_COINS)
        d_prev = d
        denominator = (ann - 1) * d + (N_COINS + 1) * d_p
        if denominator <= 0:
            raise QuoteError("invariant iteration diverged")
        d = (ann * total + d_p * N_COINS) * d // denominator
        if abs(d - d_prev) <= 1:
            return d
    raise QuoteError("invariant did not converge")


def compute_y(amp: int, x: int, d: int) -> int:
    """Return the new balance of the other coin when one balance becomes *x*."""

    if x <= 0:
        raise QuoteError("balance must be positive")
    ann = amp * N_COINS
    c = d * d // (x * N_COINS) * d // (ann * N_COINS)
    b = x + d // ann
    y = d
    for _ in range(MAX_ITERATIONS):
        y_prev = y
        denominator = 2 * y + b - d
        if denominator <= 0:
            raise QuoteError("swap iteration diverged")
        y = (y * y + c) // denominator
        if abs(y - y_prev) <= 1:
            return y
    raise QuoteError("swap did not converge")


def stable_swap_out(
    amount_in: int,
    reserve_in: int,
    reserve_out: int,
    amp: int,
    fee_numerator: int,
    fee_denominator: int,
) -> int:
    """Return the output of a StableSwap trade, all values in common precision."""

    if amount_in < 0:
        raise QuoteError(f"amount_in {amount_in} is negative")
    if reserve_in <= 0 or reserve_out <= 0:
        raise QuoteError("pool has an empty reserve")
    if amount_in == 0:
        return 0

    d = compute_d(amp, reserve_in, reserve_out)
    new_out = compute_y(amp, reserve_in + amount_in, d)
    if new_out >= reserve_out:
        return 0
    dy = reserve_out - new_out
    fee = dy * fee_numerator // fee_denominator
    return dy - fee


class StableSwapPool(Pool):
    """Two-coin StableSwap pool configured from a JSON document."""

    protocol = "stable_swap"
    swap_ix_name = "saber_swap"
    swap_program_id = SABER_PROGRAM_ID

    def __init__(self, config: StableSwapConfig):
        self.config = config
        self.address = to_pubkey(config.address, "address")
        self.authority = to_pubkey(config.authority, "authority")
        self._mints = tuple(to_pubkey(t.mint, "tokens.mint") for t in config.tokens)
        self._vaults = {}
        self._fee_accounts = {}
        self._decimals = {}
        for mint, token in zip(self._mints, config.tokens):
            self._vaults[mint] = to_pubkey(token.vault, "tokens.vault")
            self._decimals[mint] = token.decimals
            if token.fee_account:
                self._fee_accounts[mint] = to_pubkey(token.fee_account, "tokens.feeAccount")
        self._precision = max(self._decimals.values(), default=0)
        self.reserves: dict[Pubkey, int] = {mint: 0 for mint in self._mints}
        self._name = config.name or f"{self.protocol}:{config.address}"

    @classmethod
    def from_json(cls, json_str: str) -> "StableSwapPool":
        return cls(StableSwapConfig.model_validate_json(json_str))

    def name(self) -> str:
        return self._name

    def mints(self) -> tuple[Pubkey, ...]:
        return self._mints

    def _multiplier(self, mint: Pubkey) -> int:
        return 10 ** (self._precision - self._decimals[mint])

    def quote(self, amount_in: int, mint_in: Pubkey, mint_out: Pubkey) -> int:
        if not self.supports(mint_in, mint_out):
            raise QuoteError(f"{self._name} cannot swap {mint_in} -> {mint_out}", pool=self._name)
        if amount_in < 0 or amount_in > U64_MAX:
            raise QuoteError(f"amount_in {amount_in} outside u64 range", pool=self._name)

        m_in = self._multiplier(mint_in)
        m_out = self._multiplier(mint_out)
        cfg = self.config
        try:
            out = stable_swap_out(
                amount_in * m_in,
                self.reserves[mint_in] * m_in,
                self.reserves[mint_out] * m_out,
                cfg.amp_factor,
                cfg.fee_numerator,
                cfg.fee_denominator,
            )
        except QuoteError as exc:
            exc.pool = self._name
            raise
        out //= m_out
        if out > U64_MAX:
            raise QuoteError(f"output {out} overflows u64", pool=self._name)
        return out

    def _hop_accounts(self, owner: Pubkey, mint_in: Pubkey, mint_out: Pubkey) -> list:
        accounts = [
            readonly(self.address),
            readonly(self.authority),
            signer(owner),
            writable(derive_token_address(owner, mint_in)),
            writable(self._vaults[mint_in]),
            writable(self._vaults[mint_out]),
            writable(derive_token_address(owner, mint_out)),
        ]
        fee_account = self._fee_accounts.get(mint_out)
        if fee_account is not None:
            accounts.append(writable(fee_account))
        return accounts

    def swap_instruction(
        self, program_id: Pubkey, owner: Pubkey, mint_in: Pubkey, mint_out: Pubkey
    ) -> Instruction:
        return swap_hop_instruction(
            program_id,
            self.swap_ix_name,
            self._hop_accounts(owner, mint_in, mint_out),
            self.swap_program_id,
        )

    def accounts_to_refresh(self) -> list[Pubkey]:
        return [self._vaults[mint] for mint in self._mints]

    def apply_refreshed(self, accounts: Sequence[Optional[Account]]) -> None:
        self.reserves = read_reserves(
            self._name, self._mints, self.accounts_to_refresh(), accounts
        )
        log.debug("%s reserves refreshed: %s", self._name, list(self.reserves.values()))


class SaberPool(StableSwapPool):
    protocol = "saber"
    swap_ix_name = "saber_swap"
    swap_program_id = SABER_PROGRAM_ID


class MercurialPool(StableSwapPool):
    """Mercurial stable pool; the program reads every vault of the pool."""

    protocol = "mercurial"
    swap_ix_name = "mercurial_swap"
    swap_program_id = MERCURIAL_PROGRAM_ID

    def _hop_accounts(self, owner: Pubkey, mint_in: Pubkey, mint_out: Pubkey) -> list:
        accounts = [
            readonly(self.address),
            readonly(self.authority),
            signer(owner),
        ]
        accounts.extend(writable(self._vaults[mint]) for mint in self._mints)
        accounts.append(writable(derive_token_address(owner, mint_in)))
        accounts.append(writable(derive_token_address(owner, mint_out)))
        return accounts
