"""Tests for Solana cluster configuration and token constants."""

import pytest

from networks import (
    DEFAULT_NETWORK,
    NETWORKS,
    TETSUO,
    default_rpc_url,
    explorer_link,
    format_address,
    get_network,
    is_valid_network,
)
from wallet.keys import is_valid_address

ADDRESS = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"


class TestNetworks:

    def test_supported_clusters(self):
        assert set(NETWORKS) == {"mainnet", "devnet", "testnet"}
        assert DEFAULT_NETWORK == "mainnet"

    @pytest.mark.parametrize("name,url", [
        ("mainnet", "https://api.mainnet-beta.solana.com"),
        ("devnet", "https://api.devnet.solana.com"),
        ("testnet", "https://api.testnet.solana.com"),
    ])
    def test_rpc_urls(self, name, url):
        assert default_rpc_url(name) == url
        assert get_network(name).rpc_url == url

    def test_unknown_network(self):
        assert get_network("ethereum") is None
        assert not is_valid_network("ethereum")
        assert default_rpc_url("ethereum") == NETWORKS["mainnet"].rpc_url

    def test_only_mainnet_is_not_testnet(self):
        assert [n.name for n in NETWORKS.values() if not n.is_testnet] == ["mainnet"]


class TestToken:

    def test_tetsuo_mint(self):
        assert TETSUO.decimals == 9
        assert is_valid_address(TETSUO.mint)


class TestFormatting:

    def test_explorer_link_mainnet(self):
        assert explorer_link(ADDRESS) == f"https://explorer.solana.com/address/{ADDRESS}"

    def test_explorer_link_devnet(self):
        assert explorer_link(ADDRESS, "devnet").endswith("?cluster=devnet")

    def test_format_address(self):
        assert format_address(ADDRESS) == "9WzD...AWWM"
        assert format_address(ADDRESS, 6) == "9WzDXw...YtAWWM"

    def test_format_short_address_unchanged(self):
        assert format_address("abcdefghijk") == "abcdefghijk"
