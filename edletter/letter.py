"""
edletter Letter

A Letter is a container for signed data. Sign content either with the
master key or with a Certificate; the receiving side validates the Letter
against the master public key.

For example, after generating an ephemeral key pair, wrap the public key in
a Letter signed with your certificate and send it. The other end validates
the Letter and, if it trusts your certificate (because the master key signed
it), knows the public key is really yours.
"""

from typing import Any, Generic, Optional, TypeVar

from . import ed25519
from .capabilities import Identifiable, Revoker, Validatable, Validator, fingerprint
from .certificate import Certificate
from .errors import SigningFailed
from .logging_config import audit_log
from .results import RevocationResult, ValidationResult
from .signature import Signature
from .validation import check_signature

T = TypeVar("T")


class Letter(Validatable, Generic[T]):
    """
    Signed envelope around a content value.

    ``content`` may be reassigned (a different value no longer validates);
    the signature is fixed at construction. Read access to attributes, items,
    iteration, ``len()``, ``in``, ``str()`` and ``bytes()`` is forwarded to
    the content.
    """

    def __init__(self, content: T, signature: Signature):
        """Assemble a Letter from its parts. Nothing is checked."""
        self.content = content
        self._signature = signature

    @classmethod
    def with_private_key(cls, content: T, private_key: bytes) -> 'Letter[T]':
        """Sign content directly with the given (master) private key."""
        signature = Signature.new(ed25519.sign(fingerprint(content), private_key))
        audit_log.letter_signed(signed_by="master")
        return cls(content, signature)

    @classmethod
    def with_certificate(cls, content: T, certificate: Certificate) -> 'Letter[T]':
        """
        Sign content with a certificate.

        Raises:
            SigningFailed: if the certificate has no private key
        """
        signature_hash = certificate.sign(fingerprint(content))
        if signature_hash is None:
            audit_log.signing_failed(certificate.get_id(), "private key missing")
            raise SigningFailed(
                "Failed to sign content: certificate has no private key",
                certificate_id=certificate.get_id(),
            )
        signature = Signature.with_parent(certificate.public_copy(), signature_hash)
        audit_log.letter_signed(signed_by=certificate.get_id())
        return cls(content, signature)

    @property
    def signature(self) -> Signature:
        return self._signature

    def get(self) -> T:
        return self.content

    # Validatable

    def self_validate(self, validator: Validator) -> ValidationResult:
        return check_signature(fingerprint(self.content), self._signature, validator)

    def self_check_revoked(self, revoker: Revoker) -> RevocationResult:
        # Letters are never revoked themselves; certificates in the chain
        # are checked by the validator.
        return RevocationResult.not_revoked()

    def is_revokable(self) -> bool:
        return False

    def get_id(self) -> Optional[str]:
        if isinstance(self.content, Identifiable):
            return self.content.get_id()
        return None

    # Read-only delegation to the content

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails; private names are never forwarded.
        if name.startswith("_") or name == "content":
            raise AttributeError(name)
        return getattr(self.content, name)

    def __getitem__(self, key):
        return self.content[key]

    def __iter__(self):
        return iter(self.content)

    def __len__(self) -> int:
        return len(self.content)

    def __contains__(self, item) -> bool:
        return item in self.content

    def __bool__(self) -> bool:
        return bool(self.content)

    def __str__(self) -> str:
        return str(self.content)

    def __bytes__(self) -> bytes:
        """
        Fingerprint of the content.

        The signature is not included. A Letter used as the content of
        another Letter therefore binds only the inner content: the outer
        signature stays valid if the inner Letter is re-signed or carries
        a bogus signature. Validate inner letters separately.
        """
        return fingerprint(self.content)

    def __repr__(self) -> str:
        return f"Letter({self.content!r}, signed_by={self._signature.describe()['signed_by']!r})"
