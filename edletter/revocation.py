"""
edletter Revokers

Revocation is a property of certificates. A validator consults its revoker
for every revokable entity in the chain; letters are never revoked.
"""

import json
import threading
from typing import Any, Dict, Iterable, Optional, Union

from .canonicalization import canonicalize
from .capabilities import Revoker, Validatable
from .hashing import revocation_list_hash, verify_hash
from .logging_config import audit_log
from .results import RevocationResult


class NoRevoker(Revoker):
    """Revoker that never revokes anything."""

    def is_revoked(self, entity: Validatable) -> RevocationResult:
        return RevocationResult.not_revoked()


class RevocationList(Revoker):
    """
    Revoker backed by a set of revoked ids.

    Document format:

        {"revoked": [{"id": "sha256:...", "reason": "key compromise"}, ...],
         "list_hash": "sha256:..."}

    Plain id strings are accepted as entries as well. "list_hash" is
    optional; when present it must match the ids. Thread-safe.
    """

    def __init__(self, revoked: Optional[Dict[str, Optional[str]]] = None):
        self._revoked: Dict[str, Optional[str]] = dict(revoked or {})
        self._lock = threading.RLock()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RevocationList':
        revoked: Dict[str, Optional[str]] = {}
        for entry in data.get("revoked", []):
            if isinstance(entry, str):
                revoked[entry] = None
            elif isinstance(entry, dict) and "id" in entry:
                revoked[entry["id"]] = entry.get("reason")
            else:
                raise ValueError(f"Invalid revocation entry: {entry!r}")
        declared = data.get("list_hash")
        if declared is not None and not verify_hash(declared, canonicalize(sorted(revoked))):
            raise ValueError(f"Revocation list hash mismatch: {declared}")
        return cls(revoked)

    @classmethod
    def from_file(cls, path: str) -> 'RevocationList':
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))

    def to_dict(self) -> Dict[str, Any]:
        with self._lock:
            entries = []
            for revoked_id in sorted(self._revoked):
                entry = {"id": revoked_id}
                if self._revoked[revoked_id]:
                    entry["reason"] = self._revoked[revoked_id]
                entries.append(entry)
        return {"revoked": entries, "list_hash": self.list_hash()}

    def revoke(self, entity: Union[Validatable, str], reason: Optional[str] = None) -> str:
        """Add an entity (or a bare id) to the list. Returns the revoked id."""
        revoked_id = entity if isinstance(entity, str) else entity.get_id()
        if not revoked_id:
            raise ValueError("Entity has no id and cannot be revoked")
        with self._lock:
            self._revoked[revoked_id] = reason
        return revoked_id

    def unrevoke(self, revoked_id: str) -> None:
        with self._lock:
            self._revoked.pop(revoked_id, None)

    def revoked_ids(self) -> Iterable[str]:
        with self._lock:
            return frozenset(self._revoked)

    def list_hash(self) -> str:
        return revocation_list_hash(self.revoked_ids())

    def is_revoked(self, entity: Validatable) -> RevocationResult:
        if not entity.is_revokable():
            return RevocationResult.not_revoked()
        entity_id = entity.get_id()
        with self._lock:
            if entity_id is None or entity_id not in self._revoked:
                return RevocationResult.not_revoked()
            reason = self._revoked[entity_id]
        audit_log.certificate_revoked(entity_id, reason)
        return RevocationResult.revoked_because(reason or "Certificate revoked")

    def __len__(self) -> int:
        with self._lock:
            return len(self._revoked)

    def __contains__(self, revoked_id: str) -> bool:
        with self._lock:
            return revoked_id in self._revoked
