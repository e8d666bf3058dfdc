"""
Wallet configuration model.

Tracks the active wallet and which network/endpoint to use. The API key
lives in memory only and is never part of the serialized form.
"""

import os
import logging
from dataclasses import dataclass, field, replace
from typing import Optional

from networks import DEFAULT_NETWORK, default_rpc_url, is_valid_network

logger = logging.getLogger(__name__)

API_KEY_ENV = "TETSUO_GROK_API_KEY"

# JSON key -> attribute. Anything not listed here is never written.
PERSISTED_FIELDS = {
    "activeWallet": "active_wallet",
    "network": "network",
    "rpcEndpoint": "rpc_endpoint",
}


@dataclass
class WalletConfig:
    """Singleton configuration record."""
    active_wallet: Optional[str] = None
    network: str = DEFAULT_NETWORK
    rpc_endpoint: str = field(default_factory=default_rpc_url)
    api_key: Optional[str] = field(default=None, repr=False)  # memory only

    def to_dict(self) -> dict:
        """Serialized form. Built from PERSISTED_FIELDS, so api_key never appears."""
        return {key: getattr(self, attr) for key, attr in PERSISTED_FIELDS.items()}

    @classmethod
    def from_dict(cls, data: dict) -> "WalletConfig":
        return merge_config(data)

    def with_api_key_from_env(self) -> "WalletConfig":
        """Copy with api_key taken from $TETSUO_GROK_API_KEY when set."""
        api_key = os.environ.get(API_KEY_ENV)
        if not api_key:
            return self
        return replace(self, api_key=api_key)


def merge_config(data: Optional[dict], defaults: Optional[WalletConfig] = None) -> WalletConfig:
    """
    Merge a loaded dictionary over defaults, field by field.

    Unknown keys and wrongly typed values are ignored. A stored API key is
    ignored. An unknown network falls back to the default one. Without a
    stored endpoint the endpoint is the chosen network's public RPC.
    """
    defaults = defaults or WalletConfig()
    data = data if isinstance(data, dict) else {}

    active_wallet = defaults.active_wallet
    if "activeWallet" in data:
        value = data["activeWallet"]
        if value is None or (isinstance(value, str) and value):
            active_wallet = value

    network = defaults.network
    value = data.get("network")
    if isinstance(value, str):
        if is_valid_network(value):
            network = value
        else:
            logger.warning(f"Unknown network '{value}' in config, using {defaults.network}")

    value = data.get("rpcEndpoint")
    if isinstance(value, str) and value:
        rpc_endpoint = value
    elif network != defaults.network:
        rpc_endpoint = default_rpc_url(network)
    else:
        rpc_endpoint = defaults.rpc_endpoint

    return WalletConfig(
        active_wallet=active_wallet,
        network=network,
        rpc_endpoint=rpc_endpoint,
        api_key=defaults.api_key,
    )
