"""
edletter Ed25519 primitives

Uses Ed25519 (RFC 8032) through PyNaCl. Keys are handled as raw bytes:
32-byte private seeds and 32-byte public (verify) keys. Signatures are the
raw 64-byte detached signature.
"""

from typing import Tuple

from nacl.exceptions import BadSignatureError, CryptoError
from nacl.signing import SigningKey, VerifyKey

PUBLIC_KEY_SIZE = 32
PRIVATE_KEY_SIZE = 32
SIGNATURE_SIZE = 64


def generate_keypair() -> Tuple[bytes, bytes]:
    """
    Generate an Ed25519 key pair.

    Returns:
        Tuple of (public_key_bytes, private_key_bytes)
    """
    signing_key = SigningKey.generate()
    return bytes(signing_key.verify_key), bytes(signing_key)


def public_key_from_private(private_key: bytes) -> bytes:
    """Derive the public key belonging to a private key."""
    return bytes(_signing_key(private_key).verify_key)


def sign(data: bytes, private_key: bytes) -> bytes:
    """
    Sign data with an Ed25519 private key.

    Raises:
        ValueError: if the private key is malformed
    """
    return _signing_key(private_key).sign(bytes(data)).signature


def verify(data: bytes, signature: bytes, public_key: bytes) -> bool:
    """Verify an Ed25519 signature. Malformed input verifies as False."""
    if len(signature) != SIGNATURE_SIZE or len(public_key) != PUBLIC_KEY_SIZE:
        return False
    try:
        VerifyKey(bytes(public_key)).verify(bytes(data), bytes(signature))
        return True
    except (BadSignatureError, CryptoError, ValueError):
        return False


def _signing_key(private_key: bytes) -> SigningKey:
    if len(private_key) != PRIVATE_KEY_SIZE:
        raise ValueError(
            f"Ed25519 private key must be {PRIVATE_KEY_SIZE} bytes, got {len(private_key)}"
        )
    return SigningKey(bytes(private_key))
