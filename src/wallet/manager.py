"""
Wallet Manager - Multi-wallet session facade.

Composes key derivation, envelope encryption, the wallet store and the
configuration record into the operations callers use: create, import,
unlock, delete, switch active, list.

Per wallet name the states are absent -> stored (locked) -> unlocked.
Nothing "unlocked" is ever persisted; every unlock decrypts and derives
afresh, and locking is dropping (and wiping) the UnlockedWallet.
"""

import logging
import threading
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, field

from models.config import WalletConfig
from networks import DEFAULT_NETWORK, default_rpc_url, is_valid_network
from utils import get_config_path, get_wallet_file

from .crypto import Envelope, seal, open_envelope
from .errors import AuthenticationError, NotFoundError, DuplicateNameError, InvalidPhraseError
from .keys import (
    DEFAULT_STRENGTH,
    KeyPair,
    generate_wallet,
    keypair_from_mnemonic,
    public_key_to_address,
    sign,
    wallet_from_mnemonic,
)
from .store import BaseWalletStore, WalletRecord, WalletStore, WalletSummary

logger = logging.getLogger(__name__)


# ============================================
# Results
# ============================================

@dataclass
class CreatedWallet:
    """A newly created wallet and its phrase (shown to the user once)."""
    record: WalletRecord
    mnemonic: str = field(repr=False)


class UnlockedWallet:
    """
    A decrypted wallet held in memory.

    Usage:
        with manager.unlock_wallet("main", password) as wallet:
            signature = wallet.sign_message(b"hello")
    """

    def __init__(self, record: WalletRecord, mnemonic: str, keypair: KeyPair):
        self._record = record
        self._mnemonic = mnemonic
        self._keypair = keypair

    # Record fields

    @property
    def name(self) -> str:
        return self._record.name

    @property
    def address(self) -> str:
        return self._record.address

    @property
    def network(self) -> str:
        return self._record.network

    @property
    def created_at(self) -> str:
        return self._record.created_at

    @property
    def encrypted_mnemonic(self) -> Envelope:
        return self._record.encrypted_mnemonic

    @property
    def record(self) -> WalletRecord:
        return self._record

    # Secrets

    @property
    def is_locked(self) -> bool:
        return self._keypair is None

    @property
    def mnemonic(self) -> str:
        """The recovery phrase (sensitive)."""
        self._require_unlocked()
        return self._mnemonic

    @property
    def keypair(self) -> KeyPair:
        self._require_unlocked()
        return self._keypair

    @property
    def public_key(self) -> bytes:
        self._require_unlocked()
        return self._keypair.public_key

    def derived_address(self) -> str:
        """Address recomputed from the in-memory keypair."""
        return public_key_to_address(self.public_key)

    def sign_message(self, message: str | bytes) -> bytes:
        """Sign a message with the wallet key. Returns a 64-byte signature."""
        self._require_unlocked()
        if isinstance(message, str):
            message = message.encode('utf-8')
        return sign(message, self._keypair.secret_key)

    def _require_unlocked(self) -> None:
        if self._keypair is None:
            raise RuntimeError(f'Wallet "{self.name}" is locked')

    # ============================================
    # Security: Memory Cleanup
    # ============================================

    def lock(self) -> None:
        """Wipe the secret key and drop the phrase."""
        keypair = getattr(self, '_keypair', None)
        if keypair is not None:
            keypair.wipe()
        self._keypair = None
        self._mnemonic = None

    def __enter__(self) -> "UnlockedWallet":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.lock()

    def __del__(self):
        """Attempt to clear sensitive data on destruction."""
        self.lock()

    def __repr__(self) -> str:
        state = "locked" if self.is_locked else "unlocked"
        return f"UnlockedWallet(name={self.name!r}, address={self.address!r}, {state})"


# ============================================
# Facade
# ============================================

class WalletManager:
    """
    Manages multiple named wallets and the active selection.

    Storage is injected: any object with load()/save() works, so the
    file-backed stores and the in-memory ones are interchangeable.
    """

    def __init__(self, wallet_store: BaseWalletStore, config_store,
                 kdf: Optional[dict] = None):
        """
        Args:
            wallet_store: Wallet record store
            config_store: Configuration store
            kdf: KDF parameters for newly sealed phrases (None = default PBKDF2)
        """
        self.wallet_store = wallet_store
        self.config_store = config_store
        self.kdf = kdf
        self._lock = threading.RLock()

    # ============================================
    # Create / Import
    # ============================================

    def create_wallet(self, name: str, password: str,
                      network: str = DEFAULT_NETWORK,
                      strength: int = DEFAULT_STRENGTH) -> CreatedWallet:
        """
        Create a wallet with a fresh recovery phrase and make it active.

        Returns the record and the plaintext phrase. This is the only time
        the phrase is handed out.

        Raises: DuplicateNameError
        """
        self._check_name(name)
        self._check_network(network)

        with self._lock:
            if self.wallet_store.find(name) is not None:
                raise DuplicateNameError(name)

            keys = generate_wallet(strength)
            try:
                record = self._store_new(name, keys.mnemonic, keys.address, password, network)
            finally:
                keys.keypair.wipe()

        logger.info(f"Created wallet '{name}' ({keys.address}) on {network}")
        return CreatedWallet(record=record, mnemonic=keys.mnemonic)

    def import_wallet(self, name: str, mnemonic: str, password: str,
                      network: str = DEFAULT_NETWORK) -> WalletRecord:
        """
        Import a wallet from an existing recovery phrase and make it active.

        The phrase is validated before anything is encrypted or written.

        Raises: InvalidPhraseError, DuplicateNameError
        """
        self._check_name(name)
        self._check_network(network)

        keys = wallet_from_mnemonic(mnemonic)
        try:
            with self._lock:
                if self.wallet_store.find(name) is not None:
                    raise DuplicateNameError(name)
                record = self._store_new(name, keys.mnemonic, keys.address, password, network)
        finally:
            keys.keypair.wipe()

        logger.info(f"Imported wallet '{name}' ({record.address}) on {network}")
        return record

    def _store_new(self, name: str, mnemonic: str, address: str,
                   password: str, network: str) -> WalletRecord:
        envelope = seal(mnemonic, password, self.kdf)
        record = WalletRecord.create(name, address, envelope, network)

        config = self.config_store.load()
        if network != config.network and config.rpc_endpoint == default_rpc_url(config.network):
            config.rpc_endpoint = default_rpc_url(network)
        config.active_wallet = name
        config.network = network

        self.wallet_store.add(record)
        try:
            self.config_store.save(config)
        except Exception:
            # Undo the add so the name is free again
            self.wallet_store.remove(name)
            raise
        return record

    # ============================================
    # Unlock
    # ============================================

    def unlock_wallet(self, name: str, password: str) -> UnlockedWallet:
        """
        Decrypt a wallet and derive its keypair. Writes nothing.

        Raises: NotFoundError, AuthenticationError
        """
        record = self.get_wallet(name)
        if record is None:
            raise NotFoundError(name)

        try:
            mnemonic = open_envelope(record.encrypted_mnemonic, password)
        except AuthenticationError:
            logger.warning(f"Failed unlock attempt for wallet '{name}'")
            raise AuthenticationError(name) from None

        try:
            keypair = keypair_from_mnemonic(mnemonic)
        except InvalidPhraseError:
            logger.warning(f"Wallet '{name}' decrypted to an invalid recovery phrase")
            raise AuthenticationError(name) from None

        if public_key_to_address(keypair.public_key) != record.address:
            keypair.wipe()
            logger.warning(f"Wallet '{name}' address does not match its recovery phrase")
            raise AuthenticationError(name)

        logger.debug(f"Unlocked wallet '{name}'")
        return UnlockedWallet(record, mnemonic, keypair)

    # ============================================
    # Delete / Active selection
    # ============================================

    def delete_wallet(self, name: str) -> WalletRecord:
        """
        Delete a wallet. If it was active, the first remaining wallet
        (or none) becomes active.

        Raises: NotFoundError
        """
        with self._lock:
            removed = self.wallet_store.remove(name)

            config = self.config_store.load()
            if config.active_wallet == name:
                remaining = self.wallet_store.load()
                config.active_wallet = remaining[0].name if remaining else None
                self.config_store.save(config)
                logger.info(f"Active wallet is now {config.active_wallet or 'none'}")

        logger.info(f"Deleted wallet '{name}'")
        return removed

    def set_active_wallet(self, name: str) -> None:
        """
        Make a wallet the active one.

        Raises: NotFoundError
        """
        with self._lock:
            if self.wallet_store.find(name) is None:
                raise NotFoundError(name)
            config = self.config_store.load()
            config.active_wallet = name
            self.config_store.save(config)

    def get_active_wallet(self) -> Optional[WalletRecord]:
        """
        The active wallet's record, or None.

        A configured name that no longer exists in the store reads as None.
        """
        config = self.config_store.load()
        if not config.active_wallet:
            return None
        record = self.get_wallet(config.active_wallet)
        if record is None:
            logger.warning(f"Active wallet '{config.active_wallet}' not found in store")
        return record

    # ============================================
    # Queries
    # ============================================

    def get_wallet(self, name: str) -> Optional[WalletRecord]:
        """Get a wallet record by name."""
        return self.wallet_store.find(name)

    def list_wallets(self) -> list[WalletSummary]:
        """Name, address and network of every wallet. No secrets."""
        return [record.summary() for record in self.wallet_store.load()]

    # ============================================
    # Configuration
    # ============================================

    def load_config(self) -> WalletConfig:
        return self.config_store.load()

    def save_config(self, config: WalletConfig) -> None:
        """
        Persist configuration (API key stripped).

        Raises: NotFoundError if it names a wallet that does not exist,
        ValueError for an unknown network.
        """
        self._check_network(config.network)
        with self._lock:
            if config.active_wallet and self.wallet_store.find(config.active_wallet) is None:
                raise NotFoundError(config.active_wallet)
            self.config_store.save(config)

    # ============================================
    # Validation
    # ============================================

    @staticmethod
    def _check_name(name: str) -> None:
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Wallet name is required")
        if name != name.strip():
            raise ValueError("Wallet name cannot start or end with whitespace")

    @staticmethod
    def _check_network(network: str) -> None:
        if not is_valid_network(network):
            raise ValueError(f"Unknown network: {network}")


def default_manager(data_dir: Optional[str | Path] = None,
                    kdf: Optional[dict] = None) -> WalletManager:
    """Manager over the file stores in the per-user data directory."""
    # imported here: models.store depends on wallet.errors
    from models.store import ConfigStore

    return WalletManager(
        WalletStore(get_wallet_file(data_dir)),
        ConfigStore(get_config_path(data_dir)),
        kdf=kdf,
    )
