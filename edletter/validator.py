"""
edletter Root Validator

Decides trust for letters and certificates against a single master public
key. For every entity it:

1. Refuses chains deeper than max_chain_depth (this also stops cycles)
2. Runs the entity's own signature check (recursing through parents)
3. Consults the revoker through the entity's revocation hook

Validation keeps no state on the validator itself; the current chain depth
lives in a context variable, so one validator can serve many threads.
"""

import logging
import uuid
from contextvars import ContextVar
from typing import Optional

from . import config, ed25519
from .capabilities import Revoker, Validatable, Validator
from .logging_config import audit_log, get_validation_id, validation_id_var
from .revocation import NoRevoker
from .results import ValidationOutcome, ValidationResult

logger = logging.getLogger(__name__)

_chain_depth_var: ContextVar[int] = ContextVar('edletter_chain_depth', default=0)


class RootValidator(Validator):
    """
    Validator trusting one master public key.

    Args:
        master_public_key: 32-byte Ed25519 public key of the master
        revoker: Revocation oracle (default: nothing is revoked)
        max_chain_depth: Maximum number of certificates above the entity
            being validated (default: EDLETTER_MAX_CHAIN_DEPTH)
    """

    def __init__(
        self,
        master_public_key: bytes,
        revoker: Optional[Revoker] = None,
        max_chain_depth: Optional[int] = None
    ):
        if len(master_public_key) != ed25519.PUBLIC_KEY_SIZE:
            raise ValueError(
                f"Master public key must be {ed25519.PUBLIC_KEY_SIZE} bytes, got {len(master_public_key)}"
            )
        if max_chain_depth is None:
            max_chain_depth = config.MAX_CHAIN_DEPTH
        if max_chain_depth < 0:
            raise ValueError("max_chain_depth must not be negative")

        self._master_public_key = bytes(master_public_key)
        self._revoker = revoker if revoker is not None else NoRevoker()
        self._max_chain_depth = max_chain_depth

    @classmethod
    def from_config(
        cls,
        master_key_path: Optional[str] = None,
        revocation_list_path: Optional[str] = None
    ) -> 'RootValidator':
        """Build a validator from the configured trust files."""
        master = config.load_master_key(master_key_path)
        revoker = config.load_revocation_list(revocation_list_path)
        logger.info(
            "Loaded master key %s with %d revoked certificate(s)", master.kid, len(revoker)
        )
        return cls(master.public_key, revoker=revoker)

    @property
    def master_public_key(self) -> bytes:
        return self._master_public_key

    @property
    def revoker(self) -> Revoker:
        return self._revoker

    @property
    def max_chain_depth(self) -> int:
        return self._max_chain_depth

    def is_signature_valid(self, data: bytes, signature_hash: bytes) -> bool:
        return ed25519.verify(data, signature_hash, self._master_public_key)

    def is_valid(self, entity: Validatable) -> ValidationResult:
        depth = _chain_depth_var.get()
        if depth > self._max_chain_depth:
            audit_log.chain_too_deep(entity.get_id(), self._max_chain_depth)
            return ValidationResult.invalid(
                ValidationOutcome.CHAIN_TOO_DEEP,
                f"Certificate chain exceeds {self._max_chain_depth} links",
                {"entity_id": entity.get_id()},
            )

        id_token = None
        if depth == 0 and not get_validation_id():
            id_token = validation_id_var.set(str(uuid.uuid4()))
        depth_token = _chain_depth_var.set(depth + 1)
        try:
            result = entity.self_validate(self)
            if result.is_valid():
                revocation = entity.self_check_revoked(self._revoker)
                if revocation.is_revoked():
                    result = ValidationResult.invalid(
                        ValidationOutcome.REVOKED,
                        revocation.reason or "Revoked",
                        {"entity_id": entity.get_id()},
                    )
            audit_log.validation_decision(entity.get_id(), result.outcome.value, depth)
        finally:
            _chain_depth_var.reset(depth_token)
            if id_token is not None:
                validation_id_var.reset(id_token)
        return result


def validate(
    entity: Validatable,
    master_public_key: bytes,
    revoker: Optional[Revoker] = None
) -> ValidationResult:
    """
    Convenience function to validate a letter or certificate against a
    master public key.
    """
    return RootValidator(master_public_key, revoker=revoker).is_valid(entity)
