"""Pool adapter quoting and refresh parsing tests."""

import json

import pytest
from solders.pubkey import Pubkey

from solarb.errors import QuoteError, RefreshError
from solarb.instructions import sighash
from solarb.pools.constant_product import OrcaPool, constant_product_out, swap_fee
from solarb.pools.layouts import token_account_amount
from solarb.pools.stable_swap import MercurialPool, SaberPool, compute_d, stable_swap_out
from tests.doubles import token_account


def _key() -> str:
    return str(Pubkey.new_unique())


def orca_json(**overrides) -> str:
    doc = {
        "address": _key(),
        "authority": _key(),
        "poolMint": _key(),
        "feeAccount": _key(),
        "tradeFeeNumerator": 25,
        "tradeFeeDenominator": 10000,
        "ownerTradeFeeNumerator": 5,
        "ownerTradeFeeDenominator": 10000,
        "tokens": [
            {"mint": _key(), "vault": _key()},
            {"mint": _key(), "vault": _key()},
        ],
    }
    doc.update(overrides)
    return json.dumps(doc)


def stable_json(decimals=(6, 6), **overrides) -> str:
    doc = {
        "address": _key(),
        "authority": _key(),
        "ampFactor": 100,
        "feeNumerator": 4,
        "feeDenominator": 10000,
        "tokens": [
            {"mint": _key(), "vault": _key(), "decimals": decimals[0]},
            {"mint": _key(), "vault": _key(), "decimals": decimals[1]},
        ],
    }
    doc.update(overrides)
    return json.dumps(doc)


def _refresh(pool, *amounts):
    pool.apply_refreshed([token_account(a) for a in amounts])


def test_constant_product_curve():
    assert constant_product_out(1000, 1000, 1000, 0, 1) == 500
    assert constant_product_out(1000, 10**6, 10**6, 25, 10000, 5, 10000) == 996
    assert constant_product_out(0, 10, 10, 0, 1) == 0


def test_nonzero_fee_rounds_up_to_one():
    assert swap_fee(10, 25, 10000) == 1
    assert swap_fee(10, 0, 10000) == 0
    assert swap_fee(0, 25, 10000) == 0
    assert swap_fee(10**6, 25, 10000) == 2500
    # 10 in, 1 fee, 9 net
    assert constant_product_out(10, 10**6, 10**6, 25, 10000) == 8


def test_constant_product_rejects_bad_input():
    with pytest.raises(QuoteError):
        constant_product_out(10, 0, 100, 0, 1)
    with pytest.raises(QuoteError):
        constant_product_out(2**64, 100, 100, 0, 1)
    with pytest.raises(QuoteError):
        constant_product_out(-1, 100, 100, 0, 1)


def test_orca_quotes_after_refresh():
    pool = OrcaPool.from_json(orca_json(name="orca-usdc-sol"))
    a, b = pool.mints()
    assert pool.name() == "orca-usdc-sol"
    with pytest.raises(QuoteError) as exc:
        pool.quote(1000, a, b)
    assert exc.value.pool == "orca-usdc-sol"

    _refresh(pool, 10**6, 10**6)
    assert pool.quote(1000, a, b) == 996
    assert pool.quote(1000, b, a) == 996


def test_orca_rejects_foreign_mint():
    pool = OrcaPool.from_json(orca_json())
    a, _ = pool.mints()
    _refresh(pool, 10**6, 10**6)
    with pytest.raises(QuoteError):
        pool.quote(1000, a, Pubkey.new_unique())
    with pytest.raises(QuoteError):
        pool.quote(1000, a, a)


def test_orca_swap_instruction_routes_through_program():
    pool = OrcaPool.from_json(orca_json())
    a, b = pool.mints()
    program_id, owner = Pubkey.new_unique(), Pubkey.new_unique()
    ix = pool.swap_instruction(program_id, owner, a, b)
    assert ix.program_id == program_id
    assert bytes(ix.data) == sighash("orca_swap")
    assert len(ix.accounts) == 12
    assert ix.accounts[2].pubkey == owner and ix.accounts[2].is_signer


def test_stable_swap_is_near_parity_for_balanced_pool():
    d = compute_d(100, 10**9, 10**9)
    assert abs(d - 2 * 10**9) <= 1
    out = stable_swap_out(10**6, 10**9, 10**9, 100, 0, 1)
    assert 999_000 < out <= 10**6


def test_saber_normalizes_decimals():
    pool = SaberPool.from_json(stable_json(decimals=(6, 9), feeNumerator=0))
    a, b = pool.mints()
    _refresh(pool, 10**9, 10**12)
    out = pool.quote(10**6, a, b)
    assert 999_000_000 < out <= 10**9
    back = pool.quote(10**9, b, a)
    assert 999_000 < back <= 10**6


def test_stable_fee_taken_from_output():
    free = SaberPool.from_json(stable_json(feeNumerator=0))
    paid = SaberPool.from_json(stable_json(feeNumerator=100))
    for pool in (free, paid):
        _refresh(pool, 10**9, 10**9)
    fa, fb = free.mints()
    pa, pb = paid.mints()
    assert paid.quote(10**6, pa, pb) < free.quote(10**6, fa, fb)


def test_mercurial_instruction_lists_all_vaults():
    pool = MercurialPool.from_json(stable_json())
    a, b = pool.mints()
    ix = pool.swap_instruction(Pubkey.new_unique(), Pubkey.new_unique(), a, b)
    assert bytes(ix.data) == sighash("mercurial_swap")
    vaults = set(pool.accounts_to_refresh())
    assert vaults <= {meta.pubkey for meta in ix.accounts}


def test_refresh_rejects_missing_or_short_accounts():
    pool = OrcaPool.from_json(orca_json(name="p"))
    with pytest.raises(RefreshError) as exc:
        pool.apply_refreshed([token_account(1), None])
    assert exc.value.pool == "p"
    with pytest.raises(RefreshError):
        pool.apply_refreshed([token_account(1)])


def test_token_account_amount_offset():
    assert token_account_amount(token_account(123456789)) == 123456789

    class Short:
        data = bytes(10)

    with pytest.raises(RefreshError):
        token_account_amount(Short())
