"""
Configuration module for edletter.

Settings come from EDLETTER_* environment variables; trust files (master
key, revocation list) are loaded through a TTL cache.
"""

import json
import os
import threading
import time
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .keys import KeyPair
from .logging_config import configure_logging
from .revocation import RevocationList

# ============================================================
# Environment Configuration
# ============================================================

# Trust material
MASTER_KEY_PATH = os.getenv("EDLETTER_MASTER_KEY_PATH", "trust/master_key.json")
REVOCATION_LIST_PATH = os.getenv("EDLETTER_REVOCATION_LIST_PATH", "trust/revocation_list.json")

# Validation limits
MAX_CHAIN_DEPTH = int(os.getenv("EDLETTER_MAX_CHAIN_DEPTH", "16"))

# Certificates
CERT_VALIDITY_DAYS = int(os.getenv("EDLETTER_CERT_VALIDITY_DAYS", "90"))

# Cache TTL (seconds)
CONFIG_CACHE_TTL = int(os.getenv("EDLETTER_CONFIG_CACHE_TTL", "60"))

# Logging
LOG_LEVEL = os.getenv("EDLETTER_LOG_LEVEL", "INFO")
LOG_JSON = os.getenv("EDLETTER_LOG_JSON", "true").lower() in ("1", "true", "yes")


# ============================================================
# Cached Configuration Loaders
# ============================================================

class CachedConfig:
    """
    Thread-safe cache of parsed trust files.

    A file is read again once its entry is older than the TTL, so an updated
    revocation list takes effect without a restart.
    """

    def __init__(self, ttl_seconds: int = 60):
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.RLock()
        self._ttl = ttl_seconds

    def get_json(self, path: str) -> Any:
        with self._lock:
            entry = self._entries.get(path)
            if entry is not None and time.monotonic() - entry[0] <= self._ttl:
                return entry[1]

            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)

            self._entries[path] = (time.monotonic(), data)
            return data

    def invalidate(self) -> None:
        with self._lock:
            self._entries.clear()


# Global cached config instance
_config_cache = CachedConfig(ttl_seconds=CONFIG_CACHE_TTL)


def load_json_cached(path: str) -> Dict[str, Any]:
    """Load JSON file with caching."""
    return _config_cache.get_json(path)


def load_master_key(path: Optional[str] = None) -> KeyPair:
    """Load the master key pair (public half at least)."""
    return KeyPair.from_dict(load_json_cached(path or MASTER_KEY_PATH))


def load_revocation_list(path: Optional[str] = None) -> RevocationList:
    """Load the revocation list; a missing file means nothing is revoked."""
    path = path or REVOCATION_LIST_PATH
    if not Path(path).exists():
        return RevocationList()
    return RevocationList.from_dict(load_json_cached(path))


def invalidate_config_cache() -> None:
    """Invalidate all cached configuration."""
    _config_cache.invalidate()


def configure_logging_from_env() -> None:
    """Install log handlers according to EDLETTER_LOG_LEVEL and EDLETTER_LOG_JSON."""
    configure_logging(level=LOG_LEVEL, json_format=LOG_JSON)
