"""
Key file handling for edletter.

Master keys are provisioned as small JSON files:

    {"kid": "...", "public_key_b64": "...", "private_key_b64": "..."}

The private part is optional; a validator only needs the public key.
"""

import base64
import json
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from . import ed25519
from .hashing import key_id


def b64e(b: bytes) -> str:
    """Base64 encode bytes to string."""
    return base64.b64encode(b).decode('ascii')


def b64d(s: str) -> bytes:
    """Base64 decode string to bytes."""
    return base64.b64decode(s.encode('ascii'), validate=True)


class KeyFileError(ValueError):
    """Raised when a key file is malformed."""


@dataclass(frozen=True)
class KeyPair:
    """Ed25519 key pair, private half optional."""
    kid: str
    public_key: bytes
    private_key: Optional[bytes] = None

    @classmethod
    def generate(cls, kid: Optional[str] = None) -> 'KeyPair':
        """Generate a key pair; kid defaults to the public key's id."""
        public_key, private_key = ed25519.generate_keypair()
        return cls(kid=kid or key_id(public_key), public_key=public_key, private_key=private_key)

    def has_private_key(self) -> bool:
        return self.private_key is not None

    def to_dict(self, include_private: bool = True) -> Dict[str, Any]:
        data = {
            "kid": self.kid,
            "public_key_b64": b64e(self.public_key),
        }
        if include_private and self.private_key is not None:
            data["private_key_b64"] = b64e(self.private_key)
        return data

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'KeyPair':
        """
        Parse a key file document.

        Raises:
            KeyFileError: on missing fields, bad base64 or mismatched keys
        """
        try:
            kid = raw["kid"]
            public_key = b64d(raw["public_key_b64"])
            private_b64 = raw.get("private_key_b64")
            private_key = b64d(private_b64) if private_b64 else None
        except KeyError as e:
            raise KeyFileError(f"Key file missing field: {e.args[0]}") from e
        except (ValueError, TypeError, AttributeError) as e:
            raise KeyFileError(f"Key file has invalid base64: {e}") from e

        if len(public_key) != ed25519.PUBLIC_KEY_SIZE:
            raise KeyFileError(f"Public key must be {ed25519.PUBLIC_KEY_SIZE} bytes")
        if private_key is not None:
            try:
                derived = ed25519.public_key_from_private(private_key)
            except ValueError as e:
                raise KeyFileError(str(e)) from e
            if derived != public_key:
                raise KeyFileError("Private key does not belong to public key")

        return cls(kid=kid, public_key=public_key, private_key=private_key)


def load_key_file(path: str) -> KeyPair:
    """Load a key pair from a JSON key file."""
    with open(path, "r", encoding="utf-8") as f:
        return KeyPair.from_dict(json.load(f))


def save_key_file(key_pair: KeyPair, path: str, include_private: bool = True) -> None:
    """
    Write a key pair to a JSON key file.

    Files holding a private key are created with mode 0600.
    """
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    data = key_pair.to_dict(include_private=include_private)
    mode = 0o600 if "private_key_b64" in data else 0o644
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
