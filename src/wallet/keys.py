"""
Wallet Keys - Solana key derivation from recovery phrases.

- BIP-39 seed phrases (12 or 24 words)
- SLIP-0010 ed25519 HD derivation on the Solana path
- Base58 addresses

All key material stays in memory.
"""

import secrets
from dataclasses import dataclass, field

import base58
from bip_utils import Bip32Slip10Ed25519
from mnemonic import Mnemonic
from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey, VerifyKey

from .crypto import secure_wipe
from .errors import InvalidPhraseError


# BIP-44 derivation path for Solana (all levels hardened)
SOLANA_DERIVATION_PATH = "m/44'/501'/0'/0'"

VALID_WORD_COUNTS = (12, 24)
VALID_STRENGTHS = (128, 256)
DEFAULT_STRENGTH = 256  # 24 words

PUBLIC_KEY_SIZE = 32
SIGNATURE_SIZE = 64

_mnemo = Mnemonic("english")


# ============================================
# Data Classes
# ============================================

@dataclass
class KeyPair:
    """An ed25519 keypair. secret_key is the 64-byte seed + public key form."""
    public_key: bytes
    secret_key: bytearray = field(repr=False)

    def wipe(self) -> None:
        """Clear the secret key in place."""
        secure_wipe(self.secret_key)


@dataclass
class WalletKeys:
    """A phrase together with the keypair and address it derives."""
    mnemonic: str = field(repr=False)
    keypair: KeyPair
    address: str


# ============================================
# Mnemonics
# ============================================

def generate_mnemonic(strength: int = DEFAULT_STRENGTH) -> str:
    """
    Generate a new random recovery phrase.

    Args:
        strength: 128 (12 words) or 256 (24 words) bits of entropy
    """
    if strength not in VALID_STRENGTHS:
        raise ValueError("strength must be 128 or 256")
    return _mnemo.to_mnemonic(secrets.token_bytes(strength // 8))


def normalize_mnemonic(phrase: str) -> str:
    """Collapse whitespace and lowercase a phrase."""
    return " ".join(phrase.lower().split())


def validate_mnemonic(phrase: str) -> bool:
    """Check word count (12 or 24) and BIP-39 checksum."""
    if not isinstance(phrase, str):
        return False
    normalized = normalize_mnemonic(phrase)
    if len(normalized.split(" ")) not in VALID_WORD_COUNTS:
        return False
    return _mnemo.check(normalized)


# ============================================
# Key Derivation
# ============================================

def keypair_from_seed(seed: bytes) -> KeyPair:
    """Build an ed25519 keypair from a 32-byte seed."""
    signing_key = SigningKey(seed)
    public_key = bytes(signing_key.verify_key)
    return KeyPair(public_key=public_key, secret_key=bytearray(seed + public_key))


def keypair_from_mnemonic(phrase: str) -> KeyPair:
    """
    Derive the Solana keypair for a recovery phrase.

    The same phrase always yields the same keypair.

    Raises: InvalidPhraseError if the phrase fails validation.
    """
    if not validate_mnemonic(phrase):
        raise InvalidPhraseError()

    seed = Mnemonic.to_seed(normalize_mnemonic(phrase), passphrase="")
    node = Bip32Slip10Ed25519.FromSeedAndPath(seed, SOLANA_DERIVATION_PATH)
    return keypair_from_seed(node.PrivateKey().Raw().ToBytes())


def public_key_to_address(public_key: bytes) -> str:
    """Encode a public key as a base58 Solana address."""
    return base58.b58encode(bytes(public_key)).decode('ascii')


def address_to_public_key(address: str) -> bytes:
    """
    Decode a base58 Solana address.

    Raises: ValueError if it is not a 32-byte base58 value.
    """
    try:
        public_key = base58.b58decode(address)
    except ValueError as e:
        raise ValueError(f"Invalid address: {address}") from e
    if len(public_key) != PUBLIC_KEY_SIZE:
        raise ValueError(f"Invalid address: {address}")
    return public_key


def is_valid_address(address: str) -> bool:
    try:
        address_to_public_key(address)
        return True
    except ValueError:
        return False


def wallet_from_mnemonic(phrase: str) -> WalletKeys:
    """Derive keypair and address for an existing phrase."""
    keypair = keypair_from_mnemonic(phrase)
    return WalletKeys(
        mnemonic=normalize_mnemonic(phrase),
        keypair=keypair,
        address=public_key_to_address(keypair.public_key),
    )


def generate_wallet(strength: int = DEFAULT_STRENGTH) -> WalletKeys:
    """Generate a fresh phrase with its keypair and address."""
    return wallet_from_mnemonic(generate_mnemonic(strength))


# ============================================
# Signing
# ============================================

def sign(message: bytes, secret_key: bytes) -> bytes:
    """Produce a 64-byte detached ed25519 signature."""
    signing_key = SigningKey(bytes(secret_key[:32]))
    return signing_key.sign(bytes(message)).signature


def verify(message: bytes, signature: bytes, public_key: bytes) -> bool:
    """Check a detached signature. Malformed input verifies as False."""
    try:
        VerifyKey(bytes(public_key)).verify(bytes(message), bytes(signature))
        return True
    except (BadSignatureError, ValueError, TypeError):
        return False

