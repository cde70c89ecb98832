"""
edletter Hashing

All hashes use SHA-256 with lowercase hexadecimal output and a
"sha256:" prefix.
"""

import hashlib
from typing import Iterable, Union

from .canonicalization import canonicalize


def sha256_hash(data: Union[bytes, str]) -> str:
    """
    Compute SHA-256 hash in prefixed form.

    Returns:
        Hash string in format "sha256:abcdef..."
    """
    if isinstance(data, str):
        data = data.encode('utf-8')

    digest = hashlib.sha256(data).hexdigest().lower()
    return f"sha256:{digest}"


def key_id(public_key: bytes) -> str:
    """
    Identifier of a public key.

    Certificates are identified (and revoked) by this value:
    key_id = SHA-256(public_key)
    """
    return sha256_hash(bytes(public_key))


def revocation_list_hash(revoked_ids: Iterable[str]) -> str:
    """
    Hash of a revocation list snapshot, independent of entry order.

    revocation_list_hash = SHA-256(CJE(sorted(revoked_ids)))
    """
    return sha256_hash(canonicalize(sorted(set(revoked_ids))))


def verify_hash(declared_hash: str, data: Union[bytes, str]) -> bool:
    """Verify that data matches a declared "sha256:" hash."""
    if not declared_hash.startswith("sha256:"):
        return False
    return sha256_hash(data) == declared_hash
