"""
Config Store - JSON persistence for the configuration record.

Same discipline as the wallet store: atomic replace, owner-only file.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Optional

from utils import read_json, write_json_atomic
from wallet.errors import StorageError

from .config import WalletConfig, merge_config

logger = logging.getLogger(__name__)


class ConfigStore:
    """Loads and saves the configuration file."""

    def __init__(self, path: str | Path, defaults: Optional[WalletConfig] = None):
        self.path = Path(path)
        self.defaults = defaults or WalletConfig()

    def load(self) -> WalletConfig:
        """Load configuration with defaults applied. No file means all defaults."""
        try:
            data = read_json(self.path)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise StorageError(self.path, "file is not valid UTF-8 JSON") from e
        except OSError as e:
            raise StorageError(self.path, e.strerror or str(e)) from e
        return merge_config(data, self.defaults)

    def save(self, config: WalletConfig) -> None:
        """Persist configuration. The API key is never written."""
        try:
            write_json_atomic(self.path, config.to_dict())
        except OSError as e:
            raise StorageError(self.path, e.strerror or str(e)) from e
        logger.debug(f"Saved config to {self.path}")


class MemoryConfigStore:
    """In-memory config store holding the serialized form."""

    def __init__(self, defaults: Optional[WalletConfig] = None):
        self.defaults = defaults or WalletConfig()
        self._data: Optional[dict] = None

    def load(self) -> WalletConfig:
        return merge_config(copy.deepcopy(self._data), self.defaults)

    def save(self, config: WalletConfig) -> None:
        self._data = config.to_dict()

    @property
    def raw(self) -> Optional[dict]:
        """Serialized contents, as they would be written to disk."""
        return copy.deepcopy(self._data)
