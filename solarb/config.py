"""Configuration management and per-cluster helpers.

Settings are read from environment variables and, when present, a local
``.env`` file. Values in the real environment take precedence over those in
the file. A module-level :data:`settings` singleton is created on import.
"""

import json
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_ARB_PROGRAM_ID, MAX_ACCOUNTS_PER_REQUEST, MAX_PATH_LEN, USDC_MINT
from .errors import ConfigurationError
from .models import Cluster


def _normalize_pool_dirs(data: Any) -> dict[str, str]:
    """Return a ``{protocol tag: directory}`` mapping derived from *data*.

    Accepts a mapping or a JSON object string (as supplied through the
    environment). Tags are lower-cased; blank entries are dropped.
    """

    if data is None:
        return {}
    if isinstance(data, str):
        raw = data.strip()
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ValueError(f"POOL_DIRS is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError("POOL_DIRS must be an object of {type: directory}")

    normalised: dict[str, str] = {}
    for tag, path in data.items():
        key = str(tag).strip().lower()
        value = str(path or "").strip()
        if key and value:
            normalised[key] = value
    return normalised


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    log_level: str = "INFO"
    # Optional log file path; when set, logs also write to this file.
    log_file: str | None = "data/solarb.log"
    log_max_bytes: int = 1_000_000
    log_backup_count: int = 3

    # RPC endpoints. Mainnet reads may go through a faster private node while
    # sends use ``mainnet_send_rpc_url`` when set.
    localnet_rpc_url: str = "http://127.0.0.1:8899"
    mainnet_rpc_url: str = "https://api.mainnet-beta.solana.com"
    mainnet_send_rpc_url: str | None = None

    localnet_keypair_path: str = "localnet_owner.key"
    mainnet_keypair_path: str = "~/.config/solana/id.json"

    arb_program_id: str = DEFAULT_ARB_PROGRAM_ID
    start_mint: str = USDC_MINT

    pool_dirs: dict[str, str] = {
        "orca": "pools/orca",
        "mercurial": "pools/mercurial",
        "saber": "pools/saber",
    }

    # Trade size schedule (scaled integer amounts of the start mint)
    start_amount: int | None = None  # overrides the wallet balance when set
    min_swap_amount: int = 10**6  # 1 USDC
    max_search_passes: int = 4
    size_divisor: int = 2
    max_path_len: int = MAX_PATH_LEN

    # Account refresh
    account_chunk_size: int = MAX_ACCOUNTS_PER_REQUEST
    refresh_max_retries: int = 3
    refresh_backoff_secs: float = 0.5
    refresh_each_pass: bool = False

    prom_port: int = 9109
    metrics_enabled: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        extra="ignore",
    )

    @field_validator("pool_dirs", mode="before")
    @classmethod
    def _validate_pool_dirs(cls, value: Any) -> dict[str, str]:
        return _normalize_pool_dirs(value)

    @field_validator("min_swap_amount", "max_search_passes", "account_chunk_size")
    @classmethod
    def _validate_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be a positive integer")
        return value

    @field_validator("size_divisor")
    @classmethod
    def _validate_divisor(cls, value: int) -> int:
        if value < 2:
            raise ValueError("size_divisor must be at least 2")
        return value

    @field_validator("max_path_len")
    @classmethod
    def _validate_path_len(cls, value: int) -> int:
        if not 3 <= value <= MAX_PATH_LEN:
            raise ValueError(f"max_path_len must be between 3 and {MAX_PATH_LEN}")
        return value

    @field_validator("account_chunk_size")
    @classmethod
    def _validate_chunk(cls, value: int) -> int:
        if value > MAX_ACCOUNTS_PER_REQUEST:
            raise ValueError(
                f"account_chunk_size cannot exceed {MAX_ACCOUNTS_PER_REQUEST}"
            )
        return value

    @field_validator("refresh_max_retries")
    @classmethod
    def _validate_retries(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("refresh_max_retries must be a positive integer")
        return value

    @field_validator("refresh_backoff_secs")
    @classmethod
    def _validate_backoff(cls, value: float) -> float:
        if value < 0:
            raise ValueError("refresh_backoff_secs cannot be negative")
        return value

    @field_validator("start_amount")
    @classmethod
    def _validate_start_amount(cls, value: int | None) -> int | None:
        if value is not None and value <= 0:
            raise ValueError("start_amount must be positive when set")
        return value

    def rpc_url_for(self, cluster: Cluster | str) -> str:
        """Return the RPC endpoint used to read state on *cluster*."""

        if Cluster.parse(cluster) is Cluster.MAINNET:
            return self.mainnet_rpc_url
        return self.localnet_rpc_url

    def send_rpc_url_for(self, cluster: Cluster | str) -> str:
        """Return the RPC endpoint used to submit transactions on *cluster*."""

        if Cluster.parse(cluster) is Cluster.MAINNET:
            return self.mainnet_send_rpc_url or self.mainnet_rpc_url
        return self.localnet_rpc_url

    def keypair_path_for(self, cluster: Cluster | str) -> str:
        """Return the owner keypair file configured for *cluster*."""

        if Cluster.parse(cluster) is Cluster.MAINNET:
            return self.mainnet_keypair_path
        return self.localnet_keypair_path


def load_settings(**overrides: Any) -> Settings:
    """Build a fresh :class:`Settings`, raising ``ConfigurationError`` on bad input."""

    try:
        return Settings(**overrides)
    except ValueError as exc:
        raise ConfigurationError(f"invalid settings: {exc}") from exc


# Singleton settings instance populated on import.
settings = Settings()
