"""Pool configuration schemas and SPL token account decoding."""

from __future__ import annotations

from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from solders.account import Account
from solders.pubkey import Pubkey

from ..errors import ConfigurationError, RefreshError

# SPL token account: mint (32) | owner (32) | amount (u64) | ...
TOKEN_ACCOUNT_AMOUNT_OFFSET = 64
TOKEN_ACCOUNT_MIN_LEN = 72


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class TokenConfig(_CamelModel):
    """One side of a pool: the mint, the pool vault and its decimals."""

    mint: str
    vault: str
    decimals: int = Field(default=6, ge=0, le=18)
    fee_account: Optional[str] = None


class PoolConfig(_CamelModel):
    """Fields shared by every protocol's pool file."""

    address: str
    authority: str
    name: Optional[str] = None
    tokens: list[TokenConfig]


class ConstantProductConfig(PoolConfig):
    pool_mint: str
    fee_account: str
    trade_fee_numerator: int = Field(ge=0)
    trade_fee_denominator: int = Field(gt=0)
    owner_trade_fee_numerator: int = Field(default=0, ge=0)
    owner_trade_fee_denominator: int = Field(default=1, gt=0)


class StableSwapConfig(PoolConfig):
    amp_factor: int = Field(gt=0)
    fee_numerator: int = Field(ge=0)
    fee_denominator: int = Field(gt=0)


def to_pubkey(value: str, field: str) -> Pubkey:
    """Parse *value* as a base58 public key or raise ``ConfigurationError``."""

    try:
        return Pubkey.from_string(value)
    except ValueError as exc:
        raise ConfigurationError(
            f"invalid public key for {field}: {value!r}", details={"field": field}
        ) from exc


def token_account_amount(account: Optional[Account], address: Pubkey | None = None) -> int:
    """Return the ``amount`` field of an SPL token account."""

    label = str(address) if address is not None else None
    if account is None:
        raise RefreshError("token account missing", account=label)
    data = bytes(account.data)
    if len(data) < TOKEN_ACCOUNT_MIN_LEN:
        raise RefreshError(
            f"token account data too short ({len(data)} bytes)", account=label
        )
    return int.from_bytes(
        data[TOKEN_ACCOUNT_AMOUNT_OFFSET:TOKEN_ACCOUNT_MIN_LEN], "little"
    )


def read_reserves(
    pool_name: str,
    mints: Sequence[Pubkey],
    addresses: Sequence[Pubkey],
    accounts: Sequence[Optional[Account]],
) -> dict[Pubkey, int]:
    """Decode vault balances for *mints* from refreshed *accounts*."""

    if len(accounts) != len(addresses):
        raise RefreshError(
            f"expected {len(addresses)} accounts, got {len(accounts)}", pool=pool_name
        )
    reserves = {}
    for mint, address, account in zip(mints, addresses, accounts):
        try:
            reserves[mint] = token_account_amount(account, address)
        except RefreshError as exc:
            exc.pool = pool_name
            raise
    return reserves
