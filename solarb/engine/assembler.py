"""Build atomic swap transactions for discovered opportunities."""

from __future__ import annotations

import logging
from typing import Sequence

from solders.pubkey import Pubkey

from ..errors import GraphConsistencyError
from ..instructions import profit_or_revert_instruction, start_swap_instruction
from ..models import Opportunity, TransactionPlan

log = logging.getLogger(__name__)


def build_transaction_plan(
    program_id: Pubkey,
    owner: Pubkey,
    opportunity: Opportunity,
    token_mints: Sequence[Pubkey],
) -> TransactionPlan:
    """Return the instruction sequence executing *opportunity* atomically.

    The plan is ``start_swap(init_balance)``, one swap per hop in path order,
    then ``profit_or_revert``; a cycle of ``k`` hops yields ``k + 2``
    instructions. The start mint's token account is the one checked for
    profit.
    """

    path = opportunity.path
    if len(path) != len(opportunity.pools) + 1 or path[0] != path[-1]:
        raise GraphConsistencyError(
            f"opportunity path {list(path)} does not close over its pools",
            details={"signature": opportunity.signature},
        )

    def _mint(idx: int) -> Pubkey:
        try:
            return token_mints[idx]
        except IndexError as exc:
            raise GraphConsistencyError(f"unknown token index {idx}", src=idx) from exc

    start_mint = _mint(opportunity.start_idx)
    ixs = [start_swap_instruction(program_id, owner, start_mint, opportunity.init_balance)]
    for hop, pool in enumerate(opportunity.pools):
        mint_in = _mint(path[hop])
        mint_out = _mint(path[hop + 1])
        ixs.append(pool.swap_instruction(program_id, owner, mint_in, mint_out))
    ixs.append(profit_or_revert_instruction(program_id, owner, start_mint))

    log.debug("built %d instructions for %s", len(ixs), opportunity.signature)
    return TransactionPlan(
        signature=opportunity.signature,
        instructions=ixs,
        swap_input=opportunity.init_balance,
    )
