"""Configuration model tests."""

from __future__ import annotations

import pytest

from solarb.config import load_settings
from solarb.errors import ConfigurationError
from solarb.models import Cluster


def test_defaults():
    cfg = load_settings()
    assert cfg.min_swap_amount == 10**6
    assert cfg.max_search_passes == 4
    assert cfg.size_divisor == 2
    assert cfg.account_chunk_size == 99
    assert set(cfg.pool_dirs) == {"orca", "mercurial", "saber"}


def test_pool_dirs_from_json_string():
    cfg = load_settings(pool_dirs='{"Orca": " pools/o ", "saber": ""}')
    assert cfg.pool_dirs == {"orca": "pools/o"}


def test_pool_dirs_from_env(monkeypatch):
    monkeypatch.setenv("POOL_DIRS", '{"aldrin": "pools/aldrin"}')
    assert load_settings().pool_dirs == {"aldrin": "pools/aldrin"}


def test_schedule_from_env(monkeypatch):
    monkeypatch.setenv("MIN_SWAP_AMOUNT", "500")
    monkeypatch.setenv("SIZE_DIVISOR", "4")
    cfg = load_settings()
    assert cfg.min_swap_amount == 500
    assert cfg.size_divisor == 4


@pytest.mark.parametrize(
    "overrides",
    [
        {"size_divisor": 1},
        {"min_swap_amount": 0},
        {"max_search_passes": -1},
        {"max_path_len": 5},
        {"account_chunk_size": 100},
        {"start_amount": 0},
        {"refresh_backoff_secs": -1.0},
        {"refresh_max_retries": 0},
    ],
)
def test_invalid_values_raise_configuration_error(overrides):
    with pytest.raises(ConfigurationError):
        load_settings(**overrides)


def test_per_cluster_selection():
    cfg = load_settings(
        mainnet_rpc_url="https://read.example",
        mainnet_send_rpc_url="https://send.example",
        mainnet_keypair_path="/keys/main.json",
    )
    assert cfg.rpc_url_for("mainnet") == "https://read.example"
    assert cfg.send_rpc_url_for(Cluster.MAINNET) == "https://send.example"
    assert cfg.rpc_url_for("localnet") == cfg.send_rpc_url_for("localnet")
    assert cfg.keypair_path_for("mainnet") == "/keys/main.json"
    with pytest.raises(ConfigurationError):
        cfg.rpc_url_for("devnet")
