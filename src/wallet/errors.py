"""
Wallet Errors - Failure kinds raised by the wallet core.

Messages name the wallet or file at fault, never the password,
derived key or recovery phrase.
"""

from typing import Optional


class WalletError(Exception):
    """Base class for all wallet failures."""


class DuplicateNameError(WalletError):
    """A wallet with this name already exists."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Wallet "{name}" already exists')


class NotFoundError(WalletError):
    """No wallet with this name exists."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Wallet "{name}" not found')


class InvalidPhraseError(WalletError):
    """Recovery phrase failed word count or checksum validation."""

    def __init__(self, message: str = "Invalid recovery phrase (must be 12 or 24 valid words)"):
        super().__init__(message)


class AuthenticationError(WalletError):
    """Wrong password or corrupted envelope. The two are indistinguishable."""

    def __init__(self, name: Optional[str] = None):
        self.name = name
        if name:
            super().__init__(f'Wrong password or corrupted data for wallet "{name}"')
        else:
            super().__init__("Wrong password or corrupted data")


class StorageError(WalletError):
    """Reading or writing a persisted file failed."""

    def __init__(self, path, reason: str):
        self.path = path
        super().__init__(f"Storage error for {path}: {reason}")
