"""
edletter Signature

A signature is either made directly with the master key (no parent) or
issued by a certificate (the parent), which is carried along so that the
receiving side can validate the chain.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

from .ed25519 import SIGNATURE_SIZE

if TYPE_CHECKING:
    from .certificate import Certificate


@dataclass(frozen=True)
class Signature:
    """Immutable signature record."""
    hash: bytes
    parent: Optional['Certificate'] = None

    def __post_init__(self):
        if not isinstance(self.hash, bytes):
            object.__setattr__(self, "hash", bytes(self.hash))
        if self.parent is not None and not self.hash:
            raise ValueError("A certificate-issued signature requires a non-empty hash")

    @classmethod
    def new(cls, signature_hash: bytes) -> 'Signature':
        """Signature made directly with the master key."""
        return cls(hash=signature_hash)

    @classmethod
    def with_parent(cls, parent: 'Certificate', signature_hash: bytes) -> 'Signature':
        """Signature issued by the given certificate."""
        if parent is None:
            raise ValueError("with_parent() requires a certificate")
        return cls(hash=signature_hash, parent=parent)

    def is_signed_by_master(self) -> bool:
        return self.parent is None

    def describe(self) -> Dict[str, Any]:
        """Short summary used in log events and result details."""
        return {
            "signed_by": "master" if self.is_signed_by_master() else self.parent.get_id(),
            "hash_size": len(self.hash),
            "well_formed": len(self.hash) == SIGNATURE_SIZE,
        }
