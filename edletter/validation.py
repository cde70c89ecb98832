"""
edletter Chain Validation

The signature check shared by letters and certificates:

1. Master-signed: the validator checks the hash against the master key.
2. Certificate-issued: the validator must accept the parent certificate
   (recursing through the parent's own signature), then the parent must
   verify the hash over the data.

Every chain therefore ends in a master signature or fails.
"""

import logging

from .capabilities import Validator
from .results import ValidationResult
from .signature import Signature

logger = logging.getLogger(__name__)


def check_signature(data: bytes, signature: Signature, validator: Validator) -> ValidationResult:
    """
    Validate signature over data against the validator's root of trust.

    Args:
        data: Fingerprint of the signed entity
        signature: The entity's signature
        validator: Trusted-root decision oracle

    Returns:
        ValidationResult; PARENT_INVALID carries the parent's failure as cause
    """
    if signature.is_signed_by_master():
        if validator.is_signature_valid(data, signature.hash):
            return ValidationResult.valid()
        return ValidationResult.signature_invalid("Master signature invalid")

    parent = signature.parent
    parent_result = validator.is_valid(parent)
    if not parent_result.is_valid():
        logger.debug("Parent %s rejected: %s", parent.get_id(), parent_result.outcome.value)
        return ValidationResult.parent_invalid(
            parent_result,
            {"parent_id": parent.get_id()},
        )

    if parent.verify(data, signature.hash):
        return ValidationResult.valid()
    return ValidationResult.signature_invalid(
        "Signature does not match issuing certificate",
        {"parent_id": parent.get_id()},
    )
