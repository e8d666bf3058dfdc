"""
Models package - Configuration record for the TETSUO wallet.

Contains:
- WalletConfig: active wallet, network and RPC endpoint
- merge_config: defaults merged with a loaded record
- ConfigStore, MemoryConfigStore: JSON persistence
"""

from .config import WalletConfig, merge_config, API_KEY_ENV
from .store import ConfigStore, MemoryConfigStore

__all__ = [
    "WalletConfig",
    "merge_config",
    "API_KEY_ENV",
    "ConfigStore",
    "MemoryConfigStore",
]
