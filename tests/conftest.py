"""Shared fixtures for the wallet test suite."""

import pytest

from models import MemoryConfigStore
from wallet import MemoryWalletStore, WalletManager, default_manager

# Standard BIP-39 test vectors (valid checksums)
PHRASE_12 = "abandon abandon abandon abandon abandon abandon abandon abandon abandon abandon abandon about"
PHRASE_12_B = "legal winner thank year wave sausage worth useful legal winner thank yellow"
PHRASE_24 = " ".join(["abandon"] * 23 + ["art"])


@pytest.fixture
def wallet_store():
    return MemoryWalletStore()


@pytest.fixture
def config_store():
    return MemoryConfigStore()


@pytest.fixture
def manager(wallet_store, config_store):
    """Facade over in-memory stores."""
    return WalletManager(wallet_store, config_store)


@pytest.fixture
def file_manager(tmp_path):
    """Facade over the real file stores in a temporary data directory."""
    return default_manager(tmp_path / "home")
