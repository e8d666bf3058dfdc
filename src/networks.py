"""
TETSUO Networks - Solana cluster configurations and token constants.

Supports Solana mainnet-beta, devnet and testnet.
"""

from dataclasses import dataclass
from typing import Optional

# ============================================
# Network Configurations
# ============================================

@dataclass
class NetworkConfig:
    """Configuration for a Solana cluster."""
    name: str
    display_name: str
    rpc_url: str
    explorer_url: str
    is_testnet: bool
    native_symbol: str = "SOL"
    native_decimals: int = 9  # lamports


# Supported clusters
NETWORKS = {
    "mainnet": NetworkConfig(
        name="mainnet",
        display_name="Solana Mainnet",
        rpc_url="https://api.mainnet-beta.solana.com",
        explorer_url="https://explorer.solana.com",
        is_testnet=False,
    ),
    "devnet": NetworkConfig(
        name="devnet",
        display_name="Solana Devnet",
        rpc_url="https://api.devnet.solana.com",
        explorer_url="https://explorer.solana.com",
        is_testnet=True,
    ),
    "testnet": NetworkConfig(
        name="testnet",
        display_name="Solana Testnet",
        rpc_url="https://api.testnet.solana.com",
        explorer_url="https://explorer.solana.com",
        is_testnet=True,
    ),
}

# Default network
DEFAULT_NETWORK = "mainnet"


# ============================================
# Token Configurations
# ============================================

@dataclass
class TokenConfig:
    """Configuration for an SPL token."""
    symbol: str
    name: str
    mint: str
    decimals: int


TETSUO = TokenConfig(
    symbol="TETSUO",
    name="Tetsuo",
    mint="8i51XNNpGaKaj4G4nDdmQh95v4FKAxw8mhtaRoKd9tE8",
    decimals=9,
)


# ============================================
# Utility Functions
# ============================================

def get_network(name: str) -> Optional[NetworkConfig]:
    """Get network config by name."""
    return NETWORKS.get(name)


def is_valid_network(name: str) -> bool:
    return name in NETWORKS


def default_rpc_url(name: str = DEFAULT_NETWORK) -> str:
    """Public RPC endpoint for a network (mainnet if unknown)."""
    network = NETWORKS.get(name) or NETWORKS[DEFAULT_NETWORK]
    return network.rpc_url


def explorer_link(address: str, network: str = DEFAULT_NETWORK) -> str:
    """Explorer URL for an account on the given cluster."""
    config = NETWORKS.get(network) or NETWORKS[DEFAULT_NETWORK]
    url = f"{config.explorer_url}/address/{address}"
    if config.name != "mainnet":
        url += f"?cluster={config.name}"
    return url


def format_address(address: str, chars: int = 4) -> str:
    """Format address as AbCd...WxYz"""
    if len(address) <= chars * 2 + 3:
        return address
    return f"{address[:chars]}...{address[-chars:]}"
