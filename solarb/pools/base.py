"""Abstract interface for liquidity pool adapters."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from solders.account import Account
from solders.instruction import Instruction
from solders.pubkey import Pubkey


class Pool(ABC):
    """Interface that all exchange-protocol pool adapters must implement.

    Pool objects are created once at load time and shared by both directed
    graph edges. Their cached state is replaced only through
    :meth:`apply_refreshed`, never during a search pass.
    """

    @abstractmethod
    def name(self) -> str:
        """Return the stable identifier used in signatures and logs."""

    @abstractmethod
    def mints(self) -> tuple[Pubkey, ...]:
        """Return the token mints traded by this pool."""

    @abstractmethod
    def quote(self, amount_in: int, mint_in: Pubkey, mint_out: Pubkey) -> int:
        """Return the output amount for an exact *amount_in* of *mint_in*.

        Raises ``QuoteError`` instead of returning a wrapped or negative value.
        """

    @abstractmethod
    def swap_instruction(
        self, program_id: Pubkey, owner: Pubkey, mint_in: Pubkey, mint_out: Pubkey
    ) -> Instruction:
        """Build the instruction performing one hop through this pool."""

    @abstractmethod
    def accounts_to_refresh(self) -> list[Pubkey]:
        """Return the accounts whose data backs the cached pool state."""

    @abstractmethod
    def apply_refreshed(self, accounts: Sequence[Optional[Account]]) -> None:
        """Update cached state from *accounts*, ordered as :meth:`accounts_to_refresh`."""

    def supports(self, mint_in: Pubkey, mint_out: Pubkey) -> bool:
        """Return ``True`` when this pool can swap *mint_in* into *mint_out*."""

        mints = self.mints()
        return mint_in != mint_out and mint_in in mints and mint_out in mints

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name()!r})"
