"""
Wallet Crypto - Password-based envelope encryption.

Industry-standard security:
- PBKDF2-HMAC-SHA256 key derivation (100,000 iterations, default)
- Argon2id key derivation (memory-hard, optional)
- AES-256-GCM authenticated encryption

Recovery phrases never exist unencrypted on disk. Every envelope records
the KDF parameters it was sealed with, so the default cost can be raised
later without breaking existing wallets.
"""

import json
import secrets
from typing import Optional, Union
from dataclasses import dataclass, field

# Cryptography
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from argon2.exceptions import HashingError
from argon2.low_level import hash_secret_raw, Type

from .errors import AuthenticationError


# ============================================
# Security Constants
# ============================================

# PBKDF2 parameters (compatibility-sensitive: envelopes without a "kdf"
# field were sealed with exactly these)
PBKDF2_ALGORITHM = "pbkdf2-sha256"
PBKDF2_ITERATIONS = 100_000

# Argon2id parameters (OWASP recommendations for high-security)
ARGON2_ALGORITHM = "argon2id"
ARGON2_TIME_COST = 3
ARGON2_MEMORY_COST = 65536  # 64 MB
ARGON2_PARALLELISM = 4

# Upper bounds accepted from a stored envelope (unlock must not hang)
PBKDF2_MAX_ITERATIONS = 10_000_000
ARGON2_MAX_TIME_COST = 16
ARGON2_MAX_MEMORY_COST = 1_048_576  # 1 GB
ARGON2_MAX_PARALLELISM = 16

KEY_SIZE = 32  # 256 bits for AES-256
SALT_SIZE = 32
IV_SIZE = 16
TAG_SIZE = 16  # 128-bit GCM tag

DEFAULT_KDF = {"algorithm": PBKDF2_ALGORITHM, "iterations": PBKDF2_ITERATIONS}
ARGON2_KDF = {
    "algorithm": ARGON2_ALGORITHM,
    "time_cost": ARGON2_TIME_COST,
    "memory_cost": ARGON2_MEMORY_COST,
    "parallelism": ARGON2_PARALLELISM,
}

# Short names accepted by the command line
KDF_PRESETS = {
    "pbkdf2": DEFAULT_KDF,
    "argon2id": ARGON2_KDF,
}


def secure_wipe(buffer: bytearray) -> None:
    """Overwrite a buffer with random bytes, then with zeros."""
    if not buffer:
        return
    buffer[:] = secrets.token_bytes(len(buffer))
    buffer[:] = bytes(len(buffer))


# ============================================
# Envelope
# ============================================

@dataclass
class Envelope:
    """An encrypted-at-rest secret. All byte fields are hex strings."""
    salt: str
    iv: str
    auth_tag: str
    encrypted: str
    kdf: dict = field(default_factory=lambda: dict(DEFAULT_KDF))

    def to_dict(self) -> dict:
        return {
            "salt": self.salt,
            "iv": self.iv,
            "authTag": self.auth_tag,
            "encrypted": self.encrypted,
            "kdf": dict(self.kdf),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict) -> "Envelope":
        """
        Create from a stored dictionary.

        A missing "kdf" field means the legacy PBKDF2 parameters.

        Raises: ValueError if a required field is missing or not a string.
        """
        if not isinstance(data, dict):
            raise ValueError("Envelope must be an object")

        values = {}
        for attr, key in (("salt", "salt"), ("iv", "iv"),
                          ("auth_tag", "authTag"), ("encrypted", "encrypted")):
            value = data.get(key)
            if not isinstance(value, str):
                raise ValueError(f"Envelope field '{key}' is missing")
            values[attr] = value

        kdf = data.get("kdf")
        if kdf is None:
            kdf = dict(DEFAULT_KDF)
        elif not isinstance(kdf, dict):
            raise ValueError("Envelope field 'kdf' must be an object")

        return cls(kdf=dict(kdf), **values)

    @classmethod
    def from_json(cls, text: str) -> "Envelope":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError("Envelope is not valid JSON") from e
        return cls.from_dict(data)

    @classmethod
    def parse(cls, value: Union["Envelope", dict, str]) -> "Envelope":
        """Accept an Envelope, its dict form, or its JSON string form."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.from_json(value)
        return cls.from_dict(value)


# ============================================
# Key Derivation
# ============================================

def derive_key(password: str, salt: bytes, kdf: Optional[dict] = None) -> bytes:
    """
    Derive a 256-bit encryption key from a password.

    Raises: ValueError for an unknown algorithm or bad parameters.
    """
    kdf = kdf or DEFAULT_KDF
    algorithm = kdf.get("algorithm")
    secret = password.encode('utf-8')

    if algorithm == PBKDF2_ALGORITHM:
        iterations = _kdf_param(kdf, "iterations", 1, PBKDF2_MAX_ITERATIONS)
        return PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=KEY_SIZE,
            salt=salt,
            iterations=iterations,
        ).derive(secret)

    if algorithm == ARGON2_ALGORITHM:
        return hash_secret_raw(
            secret=secret,
            salt=salt,
            time_cost=_kdf_param(kdf, "time_cost", 1, ARGON2_MAX_TIME_COST),
            memory_cost=_kdf_param(kdf, "memory_cost", 8, ARGON2_MAX_MEMORY_COST),
            parallelism=_kdf_param(kdf, "parallelism", 1, ARGON2_MAX_PARALLELISM),
            hash_len=KEY_SIZE,
            type=Type.ID
        )

    raise ValueError(f"Unsupported KDF: {algorithm}")


def _kdf_param(kdf: dict, key: str, low: int, high: int) -> int:
    value = kdf.get(key)
    if isinstance(value, bool) or not isinstance(value, int) or not low <= value <= high:
        raise ValueError(f"KDF parameter '{key}' out of range")
    return value


# ============================================
# Encryption
# ============================================

def seal(plaintext: str, password: str, kdf: Optional[dict] = None) -> Envelope:
    """
    Encrypt a secret with a password.

    A fresh salt and IV are generated on every call.
    """
    kdf = dict(kdf or DEFAULT_KDF)
    salt = secrets.token_bytes(SALT_SIZE)
    iv = secrets.token_bytes(IV_SIZE)
    key = derive_key(password, salt, kdf)

    aesgcm = AESGCM(key)
    ciphertext_and_tag = aesgcm.encrypt(iv, plaintext.encode('utf-8'), None)

    ciphertext = ciphertext_and_tag[:-TAG_SIZE]
    tag = ciphertext_and_tag[-TAG_SIZE:]

    return Envelope(
        salt=salt.hex(),
        iv=iv.hex(),
        auth_tag=tag.hex(),
        encrypted=ciphertext.hex(),
        kdf=kdf,
    )


def open_envelope(envelope: Union[Envelope, dict, str], password: str) -> str:
    """
    Decrypt a secret with a password.

    Raises: AuthenticationError if the password is wrong or the envelope
    is tampered, truncated or malformed. The cause is never reported.
    """
    try:
        env = Envelope.parse(envelope)
        salt = bytes.fromhex(env.salt)
        iv = bytes.fromhex(env.iv)
        tag = bytes.fromhex(env.auth_tag)
        ciphertext = bytes.fromhex(env.encrypted)
        if len(tag) != TAG_SIZE:
            raise InvalidTag()

        key = derive_key(password, salt, env.kdf)
        plaintext = AESGCM(key).decrypt(iv, ciphertext + tag, None)
        return plaintext.decode('utf-8')
    except (InvalidTag, HashingError, ValueError, KeyError, TypeError, OverflowError):
        raise AuthenticationError() from None
