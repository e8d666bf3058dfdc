"""
TETSUO Wallet - Command-line wallet for TETSUO on Solana.

Entry point for the application. Every command is a thin layer over
WalletManager; prompts and output live here, wallet logic does not.
"""

import sys
import getpass
import logging
import argparse
from typing import Optional

import base58

from networks import NETWORKS, DEFAULT_NETWORK, TETSUO, explorer_link, format_address
from services.logging import configure_logging, cleanup_old_logs
from utils import get_logs_dir
from wallet import (
    KDF_PRESETS,
    NotFoundError,
    WalletError,
    WalletManager,
    default_manager,
    validate_mnemonic,
)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


# ============================================
# Prompts
# ============================================

def _prompt(text: str, default: Optional[str] = None) -> str:
    suffix = f" [{default}]" if default else ""
    value = input(f"{text}{suffix}: ").strip()
    return value or (default or "")


def _prompt_secret(text: str) -> str:
    return getpass.getpass(f"{text}: ")


def _read_new_password() -> str:
    """Ask for a new password twice."""
    password = _prompt_secret("Encryption password")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if _prompt_secret("Confirm password") != password:
        raise ValueError("Passwords do not match")
    return password


def _resolve_name(manager: WalletManager, name: Optional[str]) -> str:
    """Explicit wallet name, or the active wallet."""
    if name:
        return name
    active = manager.get_active_wallet()
    if active is None:
        raise ValueError("No active wallet. Create one with: tetsuo-wallet new")
    return active.name


# ============================================
# Commands
# ============================================

def cmd_new(manager: WalletManager, args) -> int:
    name = args.name or _prompt("Wallet name", "main")
    password = _read_new_password()
    strength = 256 if args.words == 24 else 128

    created = manager.create_wallet(name, password, args.network, strength=strength)
    record = created.record

    print()
    print("SAVE THIS RECOVERY PHRASE - IT CANNOT BE RECOVERED!")
    print()
    print(f"  {created.mnemonic}")
    print()
    print("Write it down and store it in a safe place.")
    print()
    print("Wallet created successfully!")
    print(f"  Name:    {record.name}")
    print(f"  Address: {record.address}")
    print(f"  Network: {record.network}")
    return 0


def cmd_import(manager: WalletManager, args) -> int:
    name = args.name or _prompt("Wallet name", "imported")
    phrase = _prompt_secret("Recovery phrase")
    if not validate_mnemonic(phrase):
        raise ValueError("Recovery phrase must be 12 or 24 valid words")
    password = _read_new_password()

    record = manager.import_wallet(name, phrase, password, args.network)

    print("Wallet imported successfully!")
    print(f"  Name:    {record.name}")
    print(f"  Address: {record.address}")
    print(f"  Network: {record.network}")
    return 0


def cmd_list(manager: WalletManager, args) -> int:
    wallets = manager.list_wallets()
    if not wallets:
        print("No wallets yet. Create one with: tetsuo-wallet new")
        return 0

    active = manager.load_config().active_wallet
    for wallet in wallets:
        marker = "*" if wallet.name == active else " "
        print(f"{marker} {wallet.name:<16} {format_address(wallet.address, 6):<18} {wallet.network}")
    return 0


def cmd_use(manager: WalletManager, args) -> int:
    manager.set_active_wallet(args.name)
    print(f'Active wallet set to "{args.name}"')
    return 0


def cmd_delete(manager: WalletManager, args) -> int:
    if manager.get_wallet(args.name) is None:
        raise NotFoundError(args.name)
    if not args.yes:
        print("Deleting a wallet removes its encrypted recovery phrase from this machine.")
        if _prompt("Type the wallet name to confirm") != args.name:
            print("Cancelled")
            return 1

    manager.delete_wallet(args.name)
    active = manager.get_active_wallet()
    print(f'Deleted wallet "{args.name}"')
    print(f"Active wallet: {active.name if active else 'none'}")
    return 0


def cmd_show(manager: WalletManager, args) -> int:
    name = _resolve_name(manager, args.name)
    password = _prompt_secret(f'Password for "{name}"')

    with manager.unlock_wallet(name, password) as wallet:
        print(f"  Name:    {wallet.name}")
        print(f"  Address: {wallet.derived_address()}")
        print(f"  Network: {wallet.network}")
        print(f"  Token:   {TETSUO.symbol} ({TETSUO.mint})")
        print(f"  Explorer: {explorer_link(wallet.address, wallet.network)}")
    return 0


def cmd_sign(manager: WalletManager, args) -> int:
    name = _resolve_name(manager, args.wallet)
    password = _prompt_secret(f'Password for "{name}"')

    with manager.unlock_wallet(name, password) as wallet:
        signature = wallet.sign_message(args.message)
        print(base58.b58encode(signature).decode('ascii'))
    return 0


def cmd_config(manager: WalletManager, args) -> int:
    config = manager.load_config()

    if args.network or args.rpc:
        if args.network and args.network != config.network:
            # Follow the new network's endpoint unless one is given
            config.rpc_endpoint = NETWORKS[args.network].rpc_url
            config.network = args.network
        if args.rpc:
            config.rpc_endpoint = args.rpc
        manager.save_config(config)
        print("Configuration updated")

    config = config.with_api_key_from_env()
    print(f"  Active wallet: {config.active_wallet or 'none'}")
    print(f"  Network:       {config.network}")
    print(f"  RPC endpoint:  {config.rpc_endpoint}")
    print(f"  Grok API key:  {'set (environment)' if config.api_key else 'not set'}")
    return 0


COMMANDS = {
    "new": cmd_new,
    "import": cmd_import,
    "list": cmd_list,
    "use": cmd_use,
    "delete": cmd_delete,
    "show": cmd_show,
    "sign": cmd_sign,
    "config": cmd_config,
}


# ============================================
# Parser
# ============================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tetsuo-wallet",
        description="TETSUO Solana wallet",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="More log output (-vv for debug)")
    parser.add_argument("--home", help="Wallet data directory (default: ~/.tetsuo-solana)")
    parser.add_argument("--log-retention", type=int, default=0, metavar="DAYS",
                        help="Keep daily log files for DAYS days (0 = no log files)")

    sub = parser.add_subparsers(dest="command", required=True)
    networks = sorted(NETWORKS)

    p = sub.add_parser("new", help="Create a new wallet")
    p.add_argument("-n", "--name", help="Wallet name")
    p.add_argument("--network", choices=networks, default=DEFAULT_NETWORK)
    p.add_argument("--words", type=int, choices=(12, 24), default=24)
    p.add_argument("--kdf", choices=sorted(KDF_PRESETS), default="pbkdf2")

    p = sub.add_parser("import", help="Import a wallet from a recovery phrase")
    p.add_argument("-n", "--name", help="Wallet name")
    p.add_argument("--network", choices=networks, default=DEFAULT_NETWORK)
    p.add_argument("--kdf", choices=sorted(KDF_PRESETS), default="pbkdf2")

    sub.add_parser("list", help="List all wallets")

    p = sub.add_parser("use", help="Switch active wallet")
    p.add_argument("name")

    p = sub.add_parser("delete", help="Delete a wallet")
    p.add_argument("name")
    p.add_argument("-y", "--yes", action="store_true", help="Skip confirmation")

    p = sub.add_parser("show", help="Unlock a wallet and show its address")
    p.add_argument("name", nargs="?")

    p = sub.add_parser("sign", help="Sign a message with a wallet")
    p.add_argument("message")
    p.add_argument("-w", "--wallet", help="Wallet name (default: active)")

    p = sub.add_parser("config", help="Show or change configuration")
    p.add_argument("--network", choices=networks)
    p.add_argument("--rpc", help="Custom RPC endpoint")

    return parser


def main(argv: Optional[list[str]] = None, manager: Optional[WalletManager] = None) -> int:
    """Application entry point."""
    args = build_parser().parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    log_dir = get_logs_dir(args.home) if args.log_retention > 0 else None
    configure_logging(level, log_dir=log_dir, retention_days=args.log_retention)
    if log_dir is not None:
        cleanup_old_logs(args.log_retention, log_dir=log_dir)

    try:
        if manager is None:
            kdf = KDF_PRESETS[getattr(args, "kdf", "pbkdf2")]
            manager = default_manager(args.home, kdf=kdf)
        logger.debug(f"Running command '{args.command}'")
        return COMMANDS[args.command](manager, args)
    except (WalletError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nCancelled", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
