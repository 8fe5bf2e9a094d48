"""
Network and service configuration for the pay402 SDK.
"""
import json
import os
import importlib.resources
import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import ConfigurationError
from .models import NetworkProfile

logger = logging.getLogger(__name__)

DEFAULT_NETWORK = "mantle"
DEFAULT_API_BASE_URL = "https://x402-services.vercel.app"
# MUSD on Mantle
DEFAULT_TOKEN_ADDRESS = "0x4dABf45C8cF333Ef1e874c3FDFC3C86799af80c8"
DEFAULT_TOKEN_DECIMALS = 6


class NetworkConfig:
    """
    Read-only registry of supported networks.

    Profiles are loaded once from the packaged ``networks.json`` file.
    """

    _networks_cache: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def load_networks(cls) -> Dict[str, Dict[str, Any]]:
        """
        Load the network table, caching it after the first read.

        Returns:
            Mapping of network name to its raw configuration
        """
        if cls._networks_cache is not None:
            return cls._networks_cache

        resource = importlib.resources.files("pay402_sdk") / "networks.json"
        with resource.open("r", encoding="utf-8") as f:
            cls._networks_cache = json.load(f)
        logger.debug(f"Loaded {len(cls._networks_cache)} network profiles")
        return cls._networks_cache

    @classmethod
    def get_network(cls, network: str) -> Dict[str, Any]:
        """
        Get the raw configuration for a network.

        Raises:
            ConfigurationError: If the network is unknown
        """
        networks = cls.load_networks()
        if network not in networks:
            available = ", ".join(sorted(networks))
            raise ConfigurationError(f"Invalid network: {network}. Available networks: {available}")
        return networks[network]

    @classmethod
    def get_profile(cls, network: str) -> NetworkProfile:
        return NetworkProfile.model_validate(cls.get_network(network))

    @classmethod
    def get_rpc_url(cls, network: str, override: Optional[str] = None) -> str:
        """
        Resolve the RPC URL for a network.

        Precedence: explicit override, then ``<NETWORK>_RPC_URL`` from the
        environment, then the network table.
        """
        if override:
            return override

        env_var = f"{network.upper().replace('-', '_')}_RPC_URL"
        if os.environ.get(env_var):
            return os.environ[env_var]

        return cls.get_network(network)["rpc"]

    @classmethod
    def get_chain_id(cls, network: str) -> int:
        return int(cls.get_network(network)["chainId"])

    @classmethod
    def tx_url(cls, network: str, tx_hash: str) -> Optional[str]:
        """Block explorer URL for a transaction, if the network has an explorer."""
        explorer = cls.get_network(network).get("explorer")
        if not explorer:
            return None
        return f"{explorer.rstrip('/')}/tx/{tx_hash}"


class ServiceConfig(BaseModel):
    """
    Immutable configuration for a :class:`pay402_sdk.PaymentClient`.
    """
    model_config = ConfigDict(frozen=True)

    private_key: str = Field(..., repr=False)
    network: str = DEFAULT_NETWORK
    rpc_url: Optional[str] = None
    api_base_url: str = DEFAULT_API_BASE_URL
    token_address: str = DEFAULT_TOKEN_ADDRESS
    token_decimals: int = DEFAULT_TOKEN_DECIMALS
    receipt_timeout: float = 120
    poll_interval: float = 0.1
    http_timeout: float = 30

    @classmethod
    def from_env(cls, **overrides: Any) -> "ServiceConfig":
        """
        Build a configuration from ``PAY402_*`` environment variables.

        Keyword arguments override the environment.

        Raises:
            ConfigurationError: If no private key is available
        """
        env_map = {
            "private_key": "PAY402_PRIVATE_KEY",
            "network": "PAY402_NETWORK",
            "rpc_url": "PAY402_RPC_URL",
            "api_base_url": "PAY402_API_BASE_URL",
            "token_address": "PAY402_TOKEN_ADDRESS",
        }
        values: Dict[str, Any] = {}
        for field_name, env_var in env_map.items():
            if os.environ.get(env_var):
                values[field_name] = os.environ[env_var]
        values.update({k: v for k, v in overrides.items() if v is not None})

        if not values.get("private_key"):
            raise ConfigurationError("PAY402_PRIVATE_KEY environment variable is required")
        return cls(**values)

    def resolve_rpc_url(self) -> str:
        """
        RPC endpoint for this configuration.

        Raises:
            ConfigurationError: If the network is unknown and no RPC URL was given
        """
        if self.rpc_url:
            return self.rpc_url
        try:
            return NetworkConfig.get_rpc_url(self.network)
        except ConfigurationError as e:
            raise ConfigurationError(f"{e} and no RPC URL provided.") from e

    def expected_chain_id(self) -> Optional[int]:
        """Chain id of the configured network, or None for unknown networks."""
        if self.network not in NetworkConfig.load_networks():
            return None
        return NetworkConfig.get_chain_id(self.network)
