"""
Tests for the configuration record.

Covers models/config.py and models/store.py:
  - defaults on first run
  - field-by-field merge of a loaded record
  - API key is never persisted
  - file permissions and malformed files
"""

import json
import os
import stat

import pytest

from models import ConfigStore, MemoryConfigStore, WalletConfig, merge_config
from models.config import API_KEY_ENV
from networks import NETWORKS
from wallet.errors import StorageError

MAINNET_RPC = "https://api.mainnet-beta.solana.com"
DEVNET_RPC = "https://api.devnet.solana.com"


@pytest.fixture
def store(tmp_path):
    return ConfigStore(tmp_path / "config.json")


class TestDefaults:

    def test_default_record(self):
        config = WalletConfig()
        assert config.active_wallet is None
        assert config.network == "mainnet"
        assert config.rpc_endpoint == MAINNET_RPC
        assert config.api_key is None

    def test_first_run_without_file(self, store):
        assert store.load() == WalletConfig()
        assert not store.path.exists()


class TestMerge:

    def test_none_gives_defaults(self):
        assert merge_config(None) == WalletConfig()

    def test_partial_record(self):
        config = merge_config({"activeWallet": "main"})
        assert config.active_wallet == "main"
        assert config.network == "mainnet"
        assert config.rpc_endpoint == MAINNET_RPC

    def test_full_record(self):
        config = merge_config({
            "activeWallet": "a",
            "network": "testnet",
            "rpcEndpoint": "https://rpc.example.com",
        })
        assert config == WalletConfig("a", "testnet", "https://rpc.example.com")

    def test_network_without_endpoint_uses_network_rpc(self):
        config = merge_config({"network": "devnet"})
        assert config.rpc_endpoint == DEVNET_RPC

    def test_unknown_keys_ignored(self):
        config = merge_config({"theme": "dark", "activeWallet": "main"})
        assert config.active_wallet == "main"
        assert not hasattr(config, "theme")

    def test_wrong_types_ignored(self):
        config = merge_config({"activeWallet": 5, "network": ["devnet"], "rpcEndpoint": 1})
        assert config == WalletConfig()

    def test_unknown_network_falls_back(self):
        config = merge_config({"network": "ethereum"})
        assert config.network == "mainnet"

    def test_stored_api_key_ignored(self):
        config = merge_config({"apiKey": "leaked", "grokApiKey": "leaked"})
        assert config.api_key is None

    def test_explicit_null_active_wallet(self):
        defaults = WalletConfig(active_wallet="main")
        assert merge_config({"activeWallet": None}, defaults).active_wallet is None

    def test_defaults_are_not_mutated(self):
        defaults = WalletConfig()
        merge_config({"activeWallet": "x", "network": "devnet"}, defaults)
        assert defaults == WalletConfig()


class TestSecretStripping:

    def test_to_dict_has_no_api_key(self):
        data = WalletConfig(api_key="x").to_dict()
        assert data == {"activeWallet": None, "network": "mainnet", "rpcEndpoint": MAINNET_RPC}

    def test_saved_file_never_contains_api_key(self, store):
        store.save(WalletConfig(active_wallet=None, api_key="x"))
        raw = store.path.read_text()
        assert "x" not in raw

        store.save(WalletConfig(active_wallet="main", api_key="sk-grok-secret-123"))
        raw = store.path.read_text()
        assert "sk-grok-secret-123" not in raw
        assert "apiKey" not in raw

    def test_memory_store_strips_api_key(self):
        store = MemoryConfigStore()
        store.save(WalletConfig(api_key="sk-grok-secret-123"))
        assert "sk-grok-secret-123" not in json.dumps(store.raw)
        assert store.load().api_key is None

    def test_repr_hides_api_key(self):
        assert "sk-grok" not in repr(WalletConfig(api_key="sk-grok-secret-123"))

    def test_api_key_from_environment(self, monkeypatch):
        monkeypatch.setenv(API_KEY_ENV, "env-key")
        config = WalletConfig().with_api_key_from_env()
        assert config.api_key == "env-key"
        assert "env-key" not in json.dumps(config.to_dict())

    def test_api_key_env_unset(self, monkeypatch):
        monkeypatch.delenv(API_KEY_ENV, raising=False)
        config = WalletConfig()
        assert config.with_api_key_from_env() is config


class TestConfigStore:

    def test_save_load_round_trip(self, store):
        config = WalletConfig("main", "devnet", DEVNET_RPC)
        store.save(config)
        assert store.load() == config

    def test_file_format(self, store):
        store.save(WalletConfig("main", "devnet", DEVNET_RPC))
        assert json.loads(store.path.read_text()) == {
            "activeWallet": "main",
            "network": "devnet",
            "rpcEndpoint": DEVNET_RPC,
        }

    @pytest.mark.skipif(os.name != "posix", reason="Unix permissions only")
    def test_file_is_owner_only(self, store):
        store.save(WalletConfig())
        assert stat.S_IMODE(store.path.stat().st_mode) == 0o600

    def test_invalid_json_raises_storage_error(self, store):
        store.path.write_text("not json")
        with pytest.raises(StorageError):
            store.load()

    def test_invalid_utf8_raises_storage_error(self, store):
        store.path.write_bytes(b"{\"network\": \"\xff\xfe\"}")
        with pytest.raises(StorageError):
            store.load()

    def test_non_object_file_gives_defaults(self, store):
        store.path.write_text("[]")
        assert store.load() == WalletConfig()

    def test_all_networks_have_rpc(self):
        for name, network in NETWORKS.items():
            assert merge_config({"network": name}).rpc_endpoint == network.rpc_url
