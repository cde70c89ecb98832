"""
edletter Validation Results

Validation and revocation checks return values rather than raising: a
failed check is an ordinary answer, not a fault.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ValidationOutcome(str, Enum):
    """
    Validation outcomes.

    VALID: The entity chains up to the trusted master key
    SIGNATURE_INVALID: The signature does not match the expected signer
    PARENT_INVALID: The issuing certificate does not validate
    EXPIRED: The certificate is past its expiry
    REVOKED: The certificate appears on the revocation list
    CHAIN_TOO_DEEP: The chain exceeds the validator's depth limit
    """
    VALID = "VALID"
    SIGNATURE_INVALID = "SIGNATURE_INVALID"
    PARENT_INVALID = "PARENT_INVALID"
    EXPIRED = "EXPIRED"
    REVOKED = "REVOKED"
    CHAIN_TOO_DEEP = "CHAIN_TOO_DEEP"


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating a letter or certificate."""
    outcome: ValidationOutcome
    reason: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    cause: Optional['ValidationResult'] = None

    def is_valid(self) -> bool:
        return self.outcome == ValidationOutcome.VALID

    def __bool__(self) -> bool:
        return self.is_valid()

    def root_cause(self) -> 'ValidationResult':
        """The innermost failing result along the chain."""
        result = self
        while result.cause is not None:
            result = result.cause
        return result

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"outcome": self.outcome.value}
        if self.reason:
            data["reason"] = self.reason
        if self.details:
            data["details"] = self.details
        if self.cause is not None:
            data["cause"] = self.cause.to_dict()
        return data

    @classmethod
    def valid(cls) -> 'ValidationResult':
        return cls(outcome=ValidationOutcome.VALID)

    @classmethod
    def signature_invalid(cls, reason: str, details: Dict[str, Any] = None) -> 'ValidationResult':
        return cls(outcome=ValidationOutcome.SIGNATURE_INVALID, reason=reason, details=details)

    @classmethod
    def parent_invalid(cls, cause: 'ValidationResult', details: Dict[str, Any] = None) -> 'ValidationResult':
        return cls(
            outcome=ValidationOutcome.PARENT_INVALID,
            reason="Issuing certificate is not valid",
            details=details,
            cause=cause,
        )

    @classmethod
    def invalid(cls, outcome: ValidationOutcome, reason: str, details: Dict[str, Any] = None) -> 'ValidationResult':
        if outcome == ValidationOutcome.VALID:
            raise ValueError("invalid() requires a failing outcome")
        return cls(outcome=outcome, reason=reason, details=details)


@dataclass(frozen=True)
class RevocationResult:
    """Answer of a revoker for one entity."""
    revoked: bool
    reason: Optional[str] = None

    def is_revoked(self) -> bool:
        return self.revoked

    @classmethod
    def not_revoked(cls) -> 'RevocationResult':
        return cls(revoked=False)

    @classmethod
    def revoked_because(cls, reason: str) -> 'RevocationResult':
        return cls(revoked=True, reason=reason)
