"""Constant-product (x * y = k) pool adapters for Orca and Aldrin.

Quotes follow the SPL token-swap curve: trading and owner fees are taken from
the input, each at least 1 when its rate is nonzero, then ``out = r_out * in' // (r_in + in')``. All arithmetic is
integer and results outside the u64 range raise ``QuoteError``.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from solders.account import Account
from solders.instruction import Instruction
from solders.pubkey import Pubkey

from ..constants import ALDRIN_V1_PROGRAM_ID, ORCA_PROGRAM_ID, U64_MAX
from ..errors import QuoteError
from ..instructions import readonly, signer, swap_hop_instruction, writable
from ..wallet import derive_token_address
from .base import Pool
from .layouts import ConstantProductConfig, read_reserves, to_pubkey

log = logging.getLogger(__name__)


def swap_fee(amount: int, numerator: int, denominator: int) -> int:
    """Return the fee on *amount*, rounding a nonzero fee up to at least 1."""

    if amount == 0 or numerator == 0:
        return 0
    return max(1, amount * numerator // denominator)


def constant_product_out(
    amount_in: int,
    reserve_in: int,
    reserve_out: int,
    fee_numerator: int,
    fee_denominator: int,
    owner_fee_numerator: int = 0,
    owner_fee_denominator: int = 1,
) -> int:
    """Return the output of a constant-product swap of *amount_in*."""

    if amount_in < 0 or amount_in > U64_MAX:
        raise QuoteError(f"amount_in {amount_in} outside u64 range")
    if reserve_in <= 0 or reserve_out <= 0:
        raise QuoteError("pool has an empty reserve")
    if amount_in == 0:
        return 0

    trade_fee = swap_fee(amount_in, fee_numerator, fee_denominator)
    owner_fee = swap_fee(amount_in, owner_fee_numerator, owner_fee_denominator)
    net_in = amount_in - trade_fee - owner_fee
    if net_in <= 0:
        return 0

    out = reserve_out * net_in // (reserve_in + net_in)
    if out > U64_MAX:
        raise QuoteError(f"output {out} overflows u64")
    return out


class ConstantProductPool(Pool):
    """Two-token constant-product pool configured from a JSON document."""

    protocol = "constant_product"
    swap_ix_name = "orca_swap"
    swap_program_id = ORCA_PROGRAM_ID

    def __init__(self, config: ConstantProductConfig):
        self.config = config
        self.address = to_pubkey(config.address, "address")
        self.authority = to_pubkey(config.authority, "authority")
        self.pool_mint = to_pubkey(config.pool_mint, "poolMint")
        self.fee_account = to_pubkey(config.fee_account, "feeAccount")
        self._mints = tuple(to_pubkey(t.mint, "tokens.mint") for t in config.tokens)
        self._vaults = {
            mint: to_pubkey(t.vault, "tokens.vault")
            for mint, t in zip(self._mints, config.tokens)
        }
        self.reserves: dict[Pubkey, int] = {mint: 0 for mint in self._mints}
        self._name = config.name or f"{self.protocol}:{config.address}"

    @classmethod
    def from_json(cls, json_str: str) -> "ConstantProductPool":
        return cls(ConstantProductConfig.model_validate_json(json_str))

    def name(self) -> str:
        return self._name

    def mints(self) -> tuple[Pubkey, ...]:
        return self._mints

    def vault(self, mint: Pubkey) -> Pubkey:
        return self._vaults[mint]

    def quote(self, amount_in: int, mint_in: Pubkey, mint_out: Pubkey) -> int:
        if not self.supports(mint_in, mint_out):
            raise QuoteError(f"{self._name} cannot swap {mint_in} -> {mint_out}", pool=self._name)
        cfg = self.config
        try:
            return constant_product_out(
                amount_in,
                self.reserves[mint_in],
                self.reserves[mint_out],
                cfg.trade_fee_numerator,
                cfg.trade_fee_denominator,
                cfg.owner_trade_fee_numerator,
                cfg.owner_trade_fee_denominator,
            )
        except QuoteError as exc:
            exc.pool = self._name
            raise

    def swap_instruction(
        self, program_id: Pubkey, owner: Pubkey, mint_in: Pubkey, mint_out: Pubkey
    ) -> Instruction:
        accounts = [
            readonly(self.address),
            readonly(self.authority),
            signer(owner),
            writable(derive_token_address(owner, mint_in)),
            writable(self.vault(mint_in)),
            writable(self.vault(mint_out)),
            writable(derive_token_address(owner, mint_out)),
            writable(self.pool_mint),
            writable(self.fee_account),
        ]
        return swap_hop_instruction(
            program_id, self.swap_ix_name, accounts, self.swap_program_id
        )

    def accounts_to_refresh(self) -> list[Pubkey]:
        return [self._vaults[mint] for mint in self._mints]

    def apply_refreshed(self, accounts: Sequence[Optional[Account]]) -> None:
        self.reserves = read_reserves(
            self._name, self._mints, self.accounts_to_refresh(), accounts
        )
        log.debug("%s reserves refreshed: %s", self._name, list(self.reserves.values()))


class OrcaPool(ConstantProductPool):
    protocol = "orca"
    swap_ix_name = "orca_swap"
    swap_program_id = ORCA_PROGRAM_ID


class AldrinPool(ConstantProductPool):
    protocol = "aldrin"
    swap_ix_name = "aldrin_swap_v1"
    swap_program_id = ALDRIN_V1_PROGRAM_ID
