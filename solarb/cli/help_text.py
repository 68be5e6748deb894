"""Verbose help content for the solarb CLI package."""

from __future__ import annotations

from textwrap import dedent

VERBOSE_GLOBAL_OVERVIEW = dedent(
    """\
    Command reference

    Use ``--help`` for a compact summary of commands.
    Use ``--help-verbose`` either globally for the full catalog or after a command
    to drill into that command's flags, typical output, and operational tips.

    Clusters: localnet (transactions are simulated), mainnet (transactions are sent)
    """
)


VERBOSE_COMMAND_HELP: dict[str, str] = {
    "search": dedent(
        """\
        search
          Purpose:
            Load pool configurations, refresh reserves, and search for profitable
            cycles from the start token at decreasing trade sizes. Each new cycle is
            assembled into one atomic transaction guarded by profit_or_revert.
          Key flags:
            --cluster TEXT          localnet or mainnet (required).
            --start-amount INTEGER  Scaled trade size of the first pass; defaults to
                                    START_AMOUNT or the wallet's start token balance.
            --passes INTEGER        Maximum number of passes (default: MAX_SEARCH_PASSES).
            --metrics/--no-metrics  Serve Prometheus metrics on PROM_PORT.
          Usage tips:
            - Rehearse on localnet first; nothing is ever sent there.
            - Tune MIN_SWAP_AMOUNT and SIZE_DIVISOR to change the size schedule.
          Sample log lines:
            pass 1/4: searching with 10000000
            found arbitrage: 10000000 -> 10004210
            arb already sent... 0-2-1-0|orca:...|saber:...|orca:...
        """
    ),
    "pools:list": dedent(
        """\
        pools:list
          Purpose:
            Parse every configured pool directory and print each pool with its
            mints, followed by graph statistics. No network access.
          Key flags:
            --json/--no-json   Emit the listing as JSON.
          Usage tips:
            - Run after adding pool files to confirm they load and connect.
        """
    ),
    "keys:check": dedent(
        """\
        keys:check
          Purpose:
            Load the owner keypair for a cluster and print the owner address along
            with the start token account that profit is checked against.
          Key flags:
            --cluster TEXT   localnet or mainnet (required).
          Sample output:
            owner=9x... start_mint=EPjF... token_account=4k...
        """
    ),
}

__all__ = ["VERBOSE_COMMAND_HELP", "VERBOSE_GLOBAL_OVERVIEW"]
