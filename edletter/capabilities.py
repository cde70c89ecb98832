"""
edletter Capability Contracts

The envelope only talks to its collaborators through these interfaces:

- Fingerprint: canonical bytes of a content value (what gets signed)
- Identifiable: optional identity of a content value
- Validatable: something a Validator can check (letters, certificates)
- Validator: trusted-root decision oracle
- Revoker: revocation decision oracle
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from .canonicalization import canonicalize, is_canonicalizable
from .results import RevocationResult, ValidationResult


def _defines(C: type, method: str) -> bool:
    return any(method in B.__dict__ and B.__dict__[method] is not None for B in C.__mro__)


class Fingerprint(ABC):
    """
    Content that can be reduced to canonical bytes.

    Any class defining a ``fingerprint`` method is treated as a Fingerprint,
    inheriting from this class is not required.
    """

    @abstractmethod
    def fingerprint(self) -> bytes:
        """Canonical, deterministic byte representation of this value."""

    @classmethod
    def __subclasshook__(cls, C):
        if cls is Fingerprint:
            return _defines(C, "fingerprint") or NotImplemented
        return NotImplemented


class Identifiable(ABC):
    """Content that may carry an identity."""

    @abstractmethod
    def get_id(self) -> Optional[str]:
        """The identity of this value, or None when it has none."""

    @classmethod
    def __subclasshook__(cls, C):
        if cls is Identifiable:
            return _defines(C, "get_id") or NotImplemented
        return NotImplemented


JSON_PREFIX = b"json:"


def fingerprint(value: Any) -> bytes:
    """
    Canonical bytes of a content value.

    Dispatch order:
    1. Fingerprint capability: value.fingerprint()
    2. bytes, bytearray, memoryview: as-is
    3. str: UTF-8
    4. objects implementing __bytes__ (e.g. nacl VerifyKey): bytes(value)
    5. JSON-like values: JSON_PREFIX + canonical JSON encoding

    The prefix keeps structured values apart from strings, so 5 and "5"
    (or ["a"] and '["a"]') never share a fingerprint.

    Raises:
        TypeError: if the value has no canonical byte form
    """
    if isinstance(value, Fingerprint):
        return bytes(value.fingerprint())
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode('utf-8')
    if hasattr(type(value), "__bytes__"):
        return bytes(value)
    if is_canonicalizable(value):
        try:
            return JSON_PREFIX + canonicalize(value)
        except ValueError as e:
            raise TypeError(f"Cannot fingerprint {type(value).__name__}: {e}") from e
    raise TypeError(f"Cannot fingerprint {type(value).__name__}")


class Validatable(ABC):
    """An entity whose trust can be decided by a Validator."""

    @abstractmethod
    def self_validate(self, validator: 'Validator') -> ValidationResult:
        """Check this entity's own signature chain using the validator."""

    @abstractmethod
    def self_check_revoked(self, revoker: 'Revoker') -> RevocationResult:
        """Ask the revoker about this entity."""

    @abstractmethod
    def is_revokable(self) -> bool:
        """Whether revocation applies to this kind of entity."""

    @abstractmethod
    def get_id(self) -> Optional[str]:
        """Identity used for revocation, or None."""


class Validator(ABC):
    """
    Decision oracle holding the trusted root key material.

    Implementations are responsible for the chain being well-founded
    (no cycles, bounded depth).
    """

    @abstractmethod
    def is_signature_valid(self, data: bytes, signature_hash: bytes) -> bool:
        """Whether signature_hash is a master-key signature over data."""

    @abstractmethod
    def is_valid(self, entity: Validatable) -> ValidationResult:
        """Full trust decision for an entity, recursing through its chain."""


class Revoker(ABC):
    """Decision oracle for revocation status."""

    @abstractmethod
    def is_revoked(self, entity: Validatable) -> RevocationResult:
        """Revocation status of an entity."""
