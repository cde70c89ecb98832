"""
edletter: Signed Envelopes with Certificate Chains

Version: 1.0.0
License: MIT

A Letter is a container for signed data. Content is signed either directly
with the master key or with a Certificate, which is itself signed by the
master key or by another certificate. Validation walks the chain of issuing
certificates back to the trusted master key.

Usage:
    from edletter import Certificate, Letter, RootValidator, generate_keypair

    master_public, master_private = generate_keypair()

    cert = Certificate.generate_random({"name": "alice"})
    cert.sign_with_master(master_private)

    letter = Letter.with_certificate(b"ephemeral public key", cert)

    validator = RootValidator(master_public)
    result = validator.is_valid(letter)

    if result.is_valid():
        key = letter.get()
    else:
        print(result.outcome, result.reason)
"""

__version__ = "1.0.0"
__author__ = "edletter contributors"
__license__ = "MIT"

# Canonicalization and hashing
from .canonicalization import canonicalize, canonicalize_str
from .hashing import sha256_hash, key_id, revocation_list_hash, verify_hash

# Crypto primitives
from .ed25519 import generate_keypair, public_key_from_private, sign, verify

# Results and errors
from .results import ValidationOutcome, ValidationResult, RevocationResult
from .errors import LetterError, SigningFailed

# Capabilities
from .capabilities import (
    Fingerprint,
    Identifiable,
    Validatable,
    Validator,
    Revoker,
    fingerprint,
)

# Envelope and chain
from .signature import Signature
from .certificate import Certificate
from .letter import Letter
from .validation import check_signature

# Validation and revocation
from .validator import RootValidator, validate
from .revocation import NoRevoker, RevocationList

# Keys
from .keys import KeyPair, KeyFileError, load_key_file, save_key_file


__all__ = [
    # Version
    "__version__",

    # Canonicalization
    "canonicalize",
    "canonicalize_str",

    # Hashing
    "sha256_hash",
    "key_id",
    "revocation_list_hash",
    "verify_hash",

    # Crypto
    "generate_keypair",
    "public_key_from_private",
    "sign",
    "verify",

    # Results and errors
    "ValidationOutcome",
    "ValidationResult",
    "RevocationResult",
    "LetterError",
    "SigningFailed",

    # Capabilities
    "Fingerprint",
    "Identifiable",
    "Validatable",
    "Validator",
    "Revoker",
    "fingerprint",

    # Envelope and chain
    "Signature",
    "Certificate",
    "Letter",
    "check_signature",

    # Validation and revocation
    "RootValidator",
    "validate",
    "NoRevoker",
    "RevocationList",

    # Keys
    "KeyPair",
    "KeyFileError",
    "load_key_file",
    "save_key_file",
]
