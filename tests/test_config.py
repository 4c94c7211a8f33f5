"""Configuration tests."""

import pytest

from statement_registry.config import (
    ARC_TESTNET_CHAIN_ID,
    DEFAULT_GAS_LIMIT,
    DEFAULT_LOOKBACK_BLOCKS,
    RegistryConfig,
)
from statement_registry.exceptions import ConfigurationError
from statement_registry.retry import DEFAULT_RETRY_CONFIG


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ("RPC_URL", "CHAIN_ID", "CONTRACT", "EXPLORER_URL", "EXPLORER_API_URL",
                "LOOKBACK_BLOCKS", "GAS_LIMIT", "TIMEOUT"):
        # teardown also clears values loaded from .env
        monkeypatch.setenv("STATEMENT_REGISTRY_" + key, "")
        monkeypatch.delenv("STATEMENT_REGISTRY_" + key)


def test_defaults():
    config = RegistryConfig()
    assert config.rpc_url == "https://rpc.testnet.arc.network"
    assert config.chain_id == ARC_TESTNET_CHAIN_ID == 5042002
    assert config.lookback_blocks == DEFAULT_LOOKBACK_BLOCKS == 50_000
    assert config.gas_limit == DEFAULT_GAS_LIMIT == 200_000


def test_retry_config_not_shared():
    first, second = RegistryConfig(), RegistryConfig()
    first.retry_config.max_attempts = 9

    assert second.retry_config.max_attempts == DEFAULT_RETRY_CONFIG.max_attempts == 3
    assert first.retry_config is not DEFAULT_RETRY_CONFIG


def test_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("STATEMENT_REGISTRY_RPC_URL", "http://localhost:8545")
    monkeypatch.setenv("STATEMENT_REGISTRY_CHAIN_ID", "0x7a69")
    monkeypatch.setenv("STATEMENT_REGISTRY_LOOKBACK_BLOCKS", "100000")
    monkeypatch.setenv("STATEMENT_REGISTRY_TIMEOUT", "2.5")

    config = RegistryConfig.from_env(dotenv_path=str(tmp_path / "missing.env"))

    assert config.rpc_url == "http://localhost:8545"
    assert config.chain_id == 31337
    assert config.lookback_blocks == 100_000
    assert config.timeout == 2.5


def test_overrides_win_over_env(monkeypatch, tmp_path):
    monkeypatch.setenv("STATEMENT_REGISTRY_LOOKBACK_BLOCKS", "100000")
    config = RegistryConfig.from_env(dotenv_path=str(tmp_path / "missing.env"), lookback_blocks=10, rpc_url=None)
    assert config.lookback_blocks == 10
    assert config.rpc_url == "https://rpc.testnet.arc.network"


def test_dotenv_file(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("STATEMENT_REGISTRY_GAS_LIMIT=300000\n")
    assert RegistryConfig.from_env(dotenv_path=str(env_file)).gas_limit == 300_000


def test_unparseable_env(monkeypatch, tmp_path):
    monkeypatch.setenv("STATEMENT_REGISTRY_GAS_LIMIT", "lots")
    with pytest.raises(ConfigurationError):
        RegistryConfig.from_env(dotenv_path=str(tmp_path / "missing.env"))


@pytest.mark.parametrize(
    "kwargs",
    [
        {"contract_address": "0x1234"},
        {"lookback_blocks": -1},
        {"gas_limit": 0},
        {"timeout": 0},
    ],
)
def test_invalid_values(kwargs):
    with pytest.raises(ConfigurationError):
        RegistryConfig(**kwargs)
