"""
Statement Registry configuration.

Defaults point at the ARC testnet deployment. Every value can be overridden
through ``STATEMENT_REGISTRY_*`` environment variables (a local ``.env`` file
is honoured) or by passing keyword arguments.

Environment Variables:
    STATEMENT_REGISTRY_RPC_URL
    STATEMENT_REGISTRY_CHAIN_ID
    STATEMENT_REGISTRY_CONTRACT
    STATEMENT_REGISTRY_EXPLORER_URL
    STATEMENT_REGISTRY_EXPLORER_API_URL
    STATEMENT_REGISTRY_LOOKBACK_BLOCKS
    STATEMENT_REGISTRY_GAS_LIMIT
    STATEMENT_REGISTRY_TIMEOUT
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Callable, Optional

from dotenv import load_dotenv

from .chain_utils import is_valid_address
from .exceptions import ConfigurationError
from .retry import RetryConfig

ARC_TESTNET_RPC_URL = "https://rpc.testnet.arc.network"
ARC_TESTNET_CHAIN_ID = 0x4CEF52
ARC_TESTNET_EXPLORER_URL = "https://testnet.arcscan.app"
ARC_TESTNET_EXPLORER_API_URL = "https://testnet.arcscan.app/api"
STATEMENT_REGISTRY_ADDRESS = "0xd2d97209aFd34B9865fda1eA7B0c390395321B32"

DEFAULT_LOOKBACK_BLOCKS = 50_000
DEFAULT_GAS_LIMIT = 200_000

ENV_PREFIX = "STATEMENT_REGISTRY_"


@dataclass
class RegistryConfig:
    """
    Registry configuration.

    Attributes:
        rpc_url: JSON-RPC endpoint
        chain_id: Chain id of the network
        contract_address: Statement registry contract
        explorer_url: Block explorer web UI, used for links
        explorer_api_url: Block explorer REST API
        lookback_blocks: Size of the log query window, in blocks
        gas_limit: Gas limit hint for publish/revoke transactions
        timeout: HTTP timeout in seconds
        retry_config: Retry policy for RPC calls
    """

    rpc_url: str = ARC_TESTNET_RPC_URL
    chain_id: int = ARC_TESTNET_CHAIN_ID
    contract_address: str = STATEMENT_REGISTRY_ADDRESS
    explorer_url: str = ARC_TESTNET_EXPLORER_URL
    explorer_api_url: str = ARC_TESTNET_EXPLORER_API_URL
    lookback_blocks: int = DEFAULT_LOOKBACK_BLOCKS
    gas_limit: int = DEFAULT_GAS_LIMIT
    timeout: float = 10.0
    retry_config: RetryConfig = field(default_factory=RetryConfig)

    def __post_init__(self) -> None:
        if not is_valid_address(self.contract_address):
            raise ConfigurationError(
                "Contract address must be 0x + 40 hex characters",
                details={"contract_address": self.contract_address},
            )
        if self.lookback_blocks < 0:
            raise ConfigurationError(
                "lookback_blocks must be non-negative",
                details={"lookback_blocks": self.lookback_blocks},
            )
        if self.gas_limit <= 0:
            raise ConfigurationError(
                "gas_limit must be positive", details={"gas_limit": self.gas_limit}
            )
        if self.timeout <= 0:
            raise ConfigurationError(
                "timeout must be positive", details={"timeout": self.timeout}
            )

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None, **overrides) -> "RegistryConfig":
        """
        Build a config from the environment.

        Keyword ``overrides`` win over environment values, which win over
        the defaults.

        Raises:
            ConfigurationError: An environment value cannot be parsed
        """
        load_dotenv(dotenv_path)

        values = {}
        for name, env_key, parse in (
            ("rpc_url", "RPC_URL", str),
            ("chain_id", "CHAIN_ID", _parse_int),
            ("contract_address", "CONTRACT", str),
            ("explorer_url", "EXPLORER_URL", str),
            ("explorer_api_url", "EXPLORER_API_URL", str),
            ("lookback_blocks", "LOOKBACK_BLOCKS", _parse_int),
            ("gas_limit", "GAS_LIMIT", _parse_int),
            ("timeout", "TIMEOUT", float),
        ):
            raw = os.getenv(ENV_PREFIX + env_key)
            if raw:
                values[name] = _parse_env(ENV_PREFIX + env_key, raw, parse)

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def _parse_int(raw: str) -> int:
    # chain ids are usually written in hex, block counts in decimal
    return int(raw, 0)


def _parse_env(key: str, raw: str, parse: Callable):
    try:
        return parse(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(
            f"Cannot parse environment variable {key}", details={"value": raw}
        ) from exc
