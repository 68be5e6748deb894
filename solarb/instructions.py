"""Instruction encoding for the on-chain arbitrage program.

The program follows the Anchor convention: instruction data starts with the
first eight bytes of ``sha256("global:<instruction name>")`` followed by the
little-endian encoded arguments.
"""

from __future__ import annotations

import hashlib
from typing import Sequence

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from .constants import TOKEN_PROGRAM_ID, U64_MAX
from .errors import QuoteError
from .wallet import derive_token_address, swap_state_address


def sighash(name: str) -> bytes:
    """Return the 8 byte Anchor discriminator for instruction *name*."""

    return hashlib.sha256(f"global:{name}".encode()).digest()[:8]


def encode_u64(value: int) -> bytes:
    if not 0 <= value <= U64_MAX:
        raise QuoteError(f"amount {value} does not fit in u64")
    return int(value).to_bytes(8, "little")


def readonly(pubkey: Pubkey) -> AccountMeta:
    return AccountMeta(pubkey=pubkey, is_signer=False, is_writable=False)


def writable(pubkey: Pubkey) -> AccountMeta:
    return AccountMeta(pubkey=pubkey, is_signer=False, is_writable=True)


def signer(pubkey: Pubkey) -> AccountMeta:
    return AccountMeta(pubkey=pubkey, is_signer=True, is_writable=False)


def anchor_instruction(
    program_id: Pubkey,
    name: str,
    accounts: Sequence[AccountMeta],
    args: bytes = b"",
) -> Instruction:
    """Build an instruction calling *name* on the arb program."""

    return Instruction(program_id, sighash(name) + args, list(accounts))


def _token_and_swap_state(program_id: Pubkey, owner: Pubkey, mint: Pubkey) -> list[AccountMeta]:
    return [
        writable(derive_token_address(owner, mint)),
        writable(swap_state_address(program_id)),
    ]


def start_swap_instruction(
    program_id: Pubkey, owner: Pubkey, start_mint: Pubkey, swap_input: int
) -> Instruction:
    """Record the pre-trade balance and the amount entering the first hop."""

    return anchor_instruction(
        program_id,
        "start_swap",
        _token_and_swap_state(program_id, owner, start_mint),
        encode_u64(swap_input),
    )


def profit_or_revert_instruction(
    program_id: Pubkey, owner: Pubkey, start_mint: Pubkey
) -> Instruction:
    """Fail the whole transaction unless the start balance grew."""

    return anchor_instruction(
        program_id,
        "profit_or_revert",
        _token_and_swap_state(program_id, owner, start_mint),
    )


def swap_hop_instruction(
    program_id: Pubkey,
    name: str,
    pool_accounts: Sequence[AccountMeta],
    swap_program_id: Pubkey,
) -> Instruction:
    """Wrap a protocol swap so the arb program feeds it the tracked amount.

    The token program, the protocol program and the swap state PDA are
    appended after the protocol specific accounts.
    """

    accounts = list(pool_accounts) + [
        readonly(TOKEN_PROGRAM_ID),
        readonly(swap_program_id),
        writable(swap_state_address(program_id)),
    ]
    return anchor_instruction(program_id, name, accounts)
