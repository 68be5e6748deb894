"""On-chain program identifiers and numeric limits shared across modules."""

from solders.pubkey import Pubkey

TOKEN_PROGRAM_ID = Pubkey.from_string("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA")
ASSOCIATED_TOKEN_PROGRAM_ID = Pubkey.from_string(
    "ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL"
)

ORCA_PROGRAM_ID = Pubkey.from_string("9W959DqEETiGZocYWCQPaJ6sBmUzgfxXfqGeTEdp3aQP")
MERCURIAL_PROGRAM_ID = Pubkey.from_string("MERLuDFBMmsHnsBPZw2sDQZHvXFMwp8EdjudcU2HKky")
SABER_PROGRAM_ID = Pubkey.from_string("SSwpkEEcbUqx4vtoEByFjSkhKdCT862DNVb52nZg1UZ")
ALDRIN_V1_PROGRAM_ID = Pubkey.from_string("AMM55ShdkoGRB5jVYPjWziwk8m5MpwyDgsMWHaMSQWH6")

DEFAULT_ARB_PROGRAM_ID = "CRQXfRGq3wTkjt7JkqhojPLiKLYLjHPGLebnfiiQB46T"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"

SWAP_STATE_SEED = b"swap_state"

# Token amounts settle as u64 on chain.
U64_MAX = 2**64 - 1

# Start token plus three hops; larger cycles do not fit in one transaction.
MAX_PATH_LEN = 4

# getMultipleAccounts accepts at most 100 keys per request.
MAX_ACCOUNTS_PER_REQUEST = 99
