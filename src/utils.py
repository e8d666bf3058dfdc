"""
Shared utility functions for the TETSUO wallet.

Contains path helpers for the per-user data directory and the
atomic JSON persistence shared by the wallet and config stores.
"""

import os
import json
from pathlib import Path
from typing import Optional

APP_DIR_NAME = ".tetsuo-solana"
APP_DIR_ENV = "TETSUO_WALLET_HOME"

WALLET_FILENAME = "wallets.enc"
CONFIG_FILENAME = "config.json"

# Owner-only permissions (Unix only)
SECURE_DIR_MODE = 0o700
SECURE_FILE_MODE = 0o600


def set_secure_permissions(path: Path, mode: int = SECURE_FILE_MODE) -> None:
    """
    Set restrictive file permissions on Unix systems.

    No-op on Windows (NTFS uses ACLs, not Unix permissions).
    """
    if os.name == 'posix':
        os.chmod(path, mode)


def ensure_dir(path: Path) -> Path:
    """Create a directory (owner-only on Unix) if it does not exist."""
    path.mkdir(mode=SECURE_DIR_MODE, parents=True, exist_ok=True)
    return path


def get_app_dir(base: Optional[str | Path] = None) -> Path:
    """
    Get the application data directory.

    Order: explicit base, $TETSUO_WALLET_HOME, ~/.tetsuo-solana
    """
    if base is not None:
        app_dir = Path(base)
    elif os.environ.get(APP_DIR_ENV):
        app_dir = Path(os.environ[APP_DIR_ENV]).expanduser()
    else:
        app_dir = Path.home() / APP_DIR_NAME

    return ensure_dir(app_dir)


def get_wallet_file(base: Optional[str | Path] = None) -> Path:
    """Get path to the wallet store file."""
    return get_app_dir(base) / WALLET_FILENAME


def get_config_path(base: Optional[str | Path] = None) -> Path:
    """Get path to the configuration file."""
    return get_app_dir(base) / CONFIG_FILENAME


def get_logs_dir(base: Optional[str | Path] = None) -> Path:
    """Get the logs directory."""
    return ensure_dir(get_app_dir(base) / "logs")


def read_json(path: Path):
    """Read a JSON file. Returns None if it does not exist."""
    if not path.exists():
        return None
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def write_json_atomic(path: Path, data, mode: int = SECURE_FILE_MODE) -> None:
    """
    Atomically replace a JSON file.

    Writes to a sibling temp file created with owner-only permissions,
    fsyncs it, then renames it over the target. Readers see either the
    old or the new contents, never a partial file.

    Raises: OSError on I/O failure (the temp file is removed).
    """
    path = Path(path)
    ensure_dir(path.parent)
    temp_path = path.with_name(path.name + ".tmp")

    fd = os.open(temp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.flush()
            os.fsync(f.fileno())
        set_secure_permissions(temp_path, mode)
        os.replace(temp_path, path)
    except BaseException:
        try:
            temp_path.unlink()
        except OSError:
            pass
        raise
