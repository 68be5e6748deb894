"""Owner keypair loading and token account address derivation."""

from __future__ import annotations

import json
from pathlib import Path

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from .constants import ASSOCIATED_TOKEN_PROGRAM_ID, SWAP_STATE_SEED, TOKEN_PROGRAM_ID
from .errors import ConfigurationError


def load_keypair(path: str | Path) -> Keypair:
    """Read a Solana CLI keypair file (JSON array of 64 bytes) from *path*."""

    key_path = Path(path).expanduser()
    try:
        raw = json.loads(key_path.read_text())
    except FileNotFoundError as exc:
        raise ConfigurationError(f"keypair file not found: {key_path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"keypair file is not valid JSON: {key_path}") from exc

    if not isinstance(raw, list) or len(raw) != 64:
        raise ConfigurationError(
            f"keypair file must hold a 64 byte array: {key_path}",
            details={"length": len(raw) if isinstance(raw, list) else None},
        )
    try:
        return Keypair.from_bytes(bytes(raw))
    except ValueError as exc:
        raise ConfigurationError(f"invalid keypair bytes in {key_path}: {exc}") from exc


def derive_token_address(owner: Pubkey, mint: Pubkey) -> Pubkey:
    """Return the associated token account of *owner* for *mint*."""

    address, _ = Pubkey.find_program_address(
        [bytes(owner), bytes(TOKEN_PROGRAM_ID), bytes(mint)],
        ASSOCIATED_TOKEN_PROGRAM_ID,
    )
    return address


def swap_state_address(program_id: Pubkey) -> Pubkey:
    """Return the arb program PDA recording the pre-trade balance."""

    address, _ = Pubkey.find_program_address([SWAP_STATE_SEED], program_id)
    return address
