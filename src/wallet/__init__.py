"""
Wallet package - Secure key management for the TETSUO wallet.

Contains:
- Envelope cipher: PBKDF2/Argon2id + AES-256-GCM sealing of recovery phrases
- Key derivation: BIP-39 phrases, SLIP-0010 ed25519 on the Solana path
- WalletStore, WalletRecord: persisted wallet records
- WalletManager: create/import/unlock/delete/active-wallet facade
- Error taxonomy
"""

from .errors import (
    WalletError,
    DuplicateNameError,
    NotFoundError,
    InvalidPhraseError,
    AuthenticationError,
    StorageError,
)
from .crypto import (
    Envelope,
    seal,
    open_envelope,
    derive_key,
    secure_wipe,
    DEFAULT_KDF,
    ARGON2_KDF,
    KDF_PRESETS,
)
from .keys import (
    KeyPair,
    WalletKeys,
    generate_mnemonic,
    validate_mnemonic,
    normalize_mnemonic,
    keypair_from_mnemonic,
    wallet_from_mnemonic,
    generate_wallet,
    public_key_to_address,
    address_to_public_key,
    is_valid_address,
    sign,
    verify,
    SOLANA_DERIVATION_PATH,
)
from .store import (
    WalletRecord,
    WalletSummary,
    BaseWalletStore,
    WalletStore,
    MemoryWalletStore,
)
from .manager import (
    WalletManager,
    UnlockedWallet,
    CreatedWallet,
    default_manager,
)

__all__ = [
    # Errors
    "WalletError",
    "DuplicateNameError",
    "NotFoundError",
    "InvalidPhraseError",
    "AuthenticationError",
    "StorageError",
    # Crypto
    "Envelope",
    "seal",
    "open_envelope",
    "derive_key",
    "secure_wipe",
    "DEFAULT_KDF",
    "ARGON2_KDF",
    "KDF_PRESETS",
    # Keys
    "KeyPair",
    "WalletKeys",
    "generate_mnemonic",
    "validate_mnemonic",
    "normalize_mnemonic",
    "keypair_from_mnemonic",
    "wallet_from_mnemonic",
    "generate_wallet",
    "public_key_to_address",
    "address_to_public_key",
    "is_valid_address",
    "sign",
    "verify",
    "SOLANA_DERIVATION_PATH",
    # Store
    "WalletRecord",
    "WalletSummary",
    "BaseWalletStore",
    "WalletStore",
    "MemoryWalletStore",
    # Manager
    "WalletManager",
    "UnlockedWallet",
    "CreatedWallet",
    "default_manager",
]
