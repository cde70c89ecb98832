"""
edletter Certificate

An Ed25519 key pair with metadata and an expiry, signed either by the
master key or by another certificate. A certificate that holds its private
key can issue signatures; public copies (as carried inside signatures)
can only verify.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from . import config, ed25519
from .canonicalization import canonicalize
from .capabilities import Fingerprint, Revoker, Validatable, Validator
from .errors import SigningFailed
from .hashing import key_id
from .results import RevocationResult, ValidationOutcome, ValidationResult
from .signature import Signature
from .validation import check_signature

logger = logging.getLogger(__name__)


def _utc_seconds(value: datetime) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).replace(microsecond=0)


class Certificate(Fingerprint, Validatable):
    """
    Certificate with optional private key.

    The fingerprint covers meta, public key and expiry. The private key and
    the certificate's own signature are not part of it.
    """

    def __init__(
        self,
        meta: Optional[Dict[str, str]],
        public_key: bytes,
        expires: datetime,
        private_key: Optional[bytes] = None,
        signature: Optional[Signature] = None,
    ):
        if len(public_key) != ed25519.PUBLIC_KEY_SIZE:
            raise ValueError(
                f"Ed25519 public key must be {ed25519.PUBLIC_KEY_SIZE} bytes, got {len(public_key)}"
            )
        if private_key is not None and ed25519.public_key_from_private(private_key) != bytes(public_key):
            raise ValueError("Private key does not belong to public key")

        self._meta = dict(meta or {})
        self._public_key = bytes(public_key)
        self._private_key = bytes(private_key) if private_key is not None else None
        self._expires = _utc_seconds(expires)
        self._signature = signature

    @classmethod
    def generate_random(
        cls,
        meta: Optional[Dict[str, str]] = None,
        expires: Optional[datetime] = None,
        validity_days: Optional[int] = None,
    ) -> 'Certificate':
        """
        Generate an unsigned certificate with a fresh key pair.

        Args:
            meta: Descriptive metadata
            expires: Expiry time (default: now + validity_days)
            validity_days: Used when expires is not given
                (default: EDLETTER_CERT_VALIDITY_DAYS)
        """
        public_key, private_key = ed25519.generate_keypair()
        if expires is None:
            if validity_days is None:
                validity_days = config.CERT_VALIDITY_DAYS
            expires = datetime.now(timezone.utc) + timedelta(days=validity_days)
        return cls(meta, public_key, expires, private_key=private_key)

    @property
    def meta(self) -> Dict[str, str]:
        return dict(self._meta)

    @property
    def public_key(self) -> bytes:
        return self._public_key

    @property
    def private_key(self) -> Optional[bytes]:
        return self._private_key

    @property
    def expires(self) -> datetime:
        return self._expires

    @property
    def signature(self) -> Optional[Signature]:
        return self._signature

    def has_private_key(self) -> bool:
        return self._private_key is not None

    def is_signed(self) -> bool:
        return self._signature is not None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return _utc_seconds(now) > self._expires

    def public_copy(self) -> 'Certificate':
        """Copy of this certificate without the private key."""
        return Certificate(self._meta, self._public_key, self._expires, signature=self._signature)

    def fingerprint(self) -> bytes:
        return canonicalize({
            "meta": self._meta,
            "public_key": self._public_key.hex(),
            "expires": self._expires.isoformat().replace("+00:00", "Z"),
        })

    # Signing

    def sign(self, data: bytes) -> Optional[bytes]:
        """Sign data with this certificate's private key; None without one."""
        if self._private_key is None:
            return None
        return ed25519.sign(data, self._private_key)

    def verify(self, data: bytes, signature_hash: bytes) -> bool:
        """Verify a signature over data against this certificate's public key."""
        return ed25519.verify(data, signature_hash, self._public_key)

    def sign_with_master(self, master_private_key: bytes) -> None:
        """Sign this certificate directly with the master key."""
        self._signature = Signature.new(ed25519.sign(self.fingerprint(), master_private_key))
        logger.debug("Certificate %s signed by master", self.get_id())

    def sign_with_parent(self, parent: 'Certificate') -> None:
        """
        Sign this certificate with another certificate.

        Raises:
            SigningFailed: if the parent has no private key
        """
        signature_hash = parent.sign(self.fingerprint())
        if signature_hash is None:
            raise SigningFailed(
                "Parent certificate has no private key",
                certificate_id=parent.get_id(),
            )
        self._signature = Signature.with_parent(parent.public_copy(), signature_hash)
        logger.debug("Certificate %s signed by %s", self.get_id(), parent.get_id())

    # Validatable

    def self_validate(self, validator: Validator) -> ValidationResult:
        if self.is_expired():
            return ValidationResult.invalid(
                ValidationOutcome.EXPIRED,
                "Certificate expired",
                {"certificate_id": self.get_id(), "expires": self._expires.isoformat()},
            )
        if self._signature is None:
            return ValidationResult.signature_invalid(
                "Certificate is not signed",
                {"certificate_id": self.get_id()},
            )
        return check_signature(self.fingerprint(), self._signature, validator)

    def self_check_revoked(self, revoker: Revoker) -> RevocationResult:
        return revoker.is_revoked(self)

    def is_revokable(self) -> bool:
        return True

    def get_id(self) -> str:
        return key_id(self._public_key)

    def describe(self) -> Dict[str, Any]:
        return {
            "certificate_id": self.get_id(),
            "meta": self.meta,
            "expires": self._expires.isoformat(),
            "signed": self.is_signed(),
            "has_private_key": self.has_private_key(),
        }

    def __eq__(self, other):
        if not isinstance(other, Certificate):
            return NotImplemented
        return (
            self.fingerprint() == other.fingerprint()
            and self._signature == other._signature
        )

    def __hash__(self):
        return hash(self.fingerprint())

    def __repr__(self):
        return f"Certificate(id={self.get_id()!r}, expires={self._expires.isoformat()!r})"
