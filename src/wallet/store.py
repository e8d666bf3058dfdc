"""
Wallet Store - Persisted collection of named wallet records.

The store file is the only record of which wallets exist. It holds one
JSON array; each record's recovery phrase is a nested envelope.
"""

import copy
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
from dataclasses import dataclass

from utils import read_json, write_json_atomic

from .crypto import Envelope
from .errors import DuplicateNameError, NotFoundError, StorageError

logger = logging.getLogger(__name__)


# ============================================
# Records
# ============================================

@dataclass
class WalletRecord:
    """A stored wallet (no plaintext secrets)."""
    name: str
    address: str
    encrypted_mnemonic: Envelope
    created_at: str
    network: str

    @classmethod
    def create(cls, name: str, address: str, encrypted_mnemonic: Envelope,
               network: str) -> "WalletRecord":
        """Create a new record stamped with the current UTC time."""
        return cls(
            name=name,
            address=address,
            encrypted_mnemonic=encrypted_mnemonic,
            created_at=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            network=network,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON storage."""
        return {
            "name": self.name,
            "address": self.address,
            "encryptedMnemonic": self.encrypted_mnemonic.to_dict(),
            "createdAt": self.created_at,
            "network": self.network,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WalletRecord":
        """
        Create from dictionary.

        Accepts the envelope either nested or as a JSON string.

        Raises: ValueError if a field is missing or malformed.
        """
        if not isinstance(data, dict):
            raise ValueError("Wallet record must be an object")
        try:
            name = data["name"]
            address = data["address"]
            envelope = Envelope.parse(data["encryptedMnemonic"])
        except KeyError as e:
            raise ValueError(f"Wallet record is missing {e}") from e
        if not isinstance(name, str) or not isinstance(address, str):
            raise ValueError("Wallet record name and address must be strings")

        return cls(
            name=name,
            address=address,
            encrypted_mnemonic=envelope,
            created_at=str(data.get("createdAt", "")),
            network=str(data.get("network", "mainnet")),
        )

    def summary(self) -> "WalletSummary":
        return WalletSummary(name=self.name, address=self.address, network=self.network)


@dataclass
class WalletSummary:
    """Public projection of a wallet record for listings."""
    name: str
    address: str
    network: str

    def to_dict(self) -> dict:
        return {"name": self.name, "address": self.address, "network": self.network}


def records_from_data(data, source) -> list[WalletRecord]:
    """Parse a loaded JSON array into records. Raises StorageError."""
    if data is None:
        return []
    if not isinstance(data, list):
        raise StorageError(source, "expected a list of wallets")
    try:
        return [WalletRecord.from_dict(item) for item in data]
    except ValueError as e:
        raise StorageError(source, str(e)) from e


# ============================================
# Stores
# ============================================

class BaseWalletStore:
    """
    Add/remove/find on top of load() and save().

    Subclasses provide the persistence. Callers serialize access; the
    facade holds a lock around each load-mutate-save sequence.
    """

    def load(self) -> list[WalletRecord]:
        raise NotImplementedError

    def save(self, records: list[WalletRecord]) -> None:
        raise NotImplementedError

    def find(self, name: str) -> Optional[WalletRecord]:
        """Get a record by name."""
        for record in self.load():
            if record.name == name:
                return record
        return None

    def add(self, record: WalletRecord) -> None:
        """
        Append a record and persist.

        Raises: DuplicateNameError before anything is written.
        """
        records = self.load()
        if any(r.name == record.name for r in records):
            raise DuplicateNameError(record.name)
        records.append(record)
        self.save(records)

    def remove(self, name: str) -> WalletRecord:
        """
        Remove a record by name and persist. Returns the removed record.

        Raises: NotFoundError if there is no such record.
        """
        records = self.load()
        for i, record in enumerate(records):
            if record.name == name:
                removed = records.pop(i)
                self.save(records)
                return removed
        raise NotFoundError(name)

    def names(self) -> list[str]:
        return [r.name for r in self.load()]


class WalletStore(BaseWalletStore):
    """Wallet records persisted to a single JSON file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> list[WalletRecord]:
        """Load all records. A missing file is the empty first-run state."""
        try:
            data = read_json(self.path)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise StorageError(self.path, "file is not valid UTF-8 JSON") from e
        except OSError as e:
            raise StorageError(self.path, e.strerror or str(e)) from e
        return records_from_data(data, self.path)

    def save(self, records: list[WalletRecord]) -> None:
        """Atomically replace the store contents."""
        data = [r.to_dict() for r in records]
        try:
            write_json_atomic(self.path, data)
        except OSError as e:
            raise StorageError(self.path, e.strerror or str(e)) from e
        logger.debug(f"Saved {len(records)} wallet(s) to {self.path}")


class MemoryWalletStore(BaseWalletStore):
    """In-memory store holding the serialized form, for tests and embedding."""

    def __init__(self, records: Optional[list[WalletRecord]] = None):
        self._data: list[dict] = [r.to_dict() for r in records or []]

    def load(self) -> list[WalletRecord]:
        return records_from_data(copy.deepcopy(self._data), "<memory>")

    def save(self, records: list[WalletRecord]) -> None:
        self._data = [r.to_dict() for r in records]

    @property
    def raw(self) -> list[dict]:
        """Serialized contents, as they would be written to disk."""
        return copy.deepcopy(self._data)
