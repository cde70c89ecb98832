"""
Logging configuration for edletter.

Audit events for signing and validation, emitted on the "edletter.audit"
logger with their fields attached as ``record.extra_fields``. The library
only creates loggers; call configure_logging() from the application to
install a handler.
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import IO, Any, Dict, Optional

# Ties together the log events of one top-level validation
validation_id_var: ContextVar[str] = ContextVar('validation_id', default='')


class StructuredFormatter(logging.Formatter):
    """One JSON object per line: audit fields merged over the basic record fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc)
            .isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        validation_id = validation_id_var.get()
        if validation_id:
            log_data["validation_id"] = validation_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        log_data.update(getattr(record, "extra_fields", {}))

        # certificate ids, outcomes and reasons are all str; default=str
        # covers anything else an event attaches
        return json.dumps(log_data, default=str)


class AuditLogger:
    """
    Audit events of the library.

    Records signing of letters, signing failures, validation decisions and
    revocation hits.
    """

    def __init__(self, name: str = "edletter.audit"):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, event_type: str, message: str, **fields) -> None:
        if not self._logger.isEnabledFor(level):
            return
        extra_fields = {
            "event_type": event_type,
            "validation_id": validation_id_var.get(),
            **fields
        }
        self._logger.log(level, "%s: %s", event_type, message, extra={"extra_fields": extra_fields})

    def letter_signed(self, signed_by: str) -> None:
        self._log(logging.DEBUG, "LETTER_SIGNED", f"Letter signed by {signed_by}", signed_by=signed_by)

    def signing_failed(self, certificate_id: str, reason: str) -> None:
        self._log(
            logging.WARNING,
            "SIGNING_FAILED",
            f"Signing with {certificate_id} failed: {reason}",
            certificate_id=certificate_id,
            reason=reason,
        )

    def validation_decision(self, entity_id: Optional[str], outcome: str, depth: int) -> None:
        """Log a validation decision. Failures at the top level are warnings."""
        if outcome == "VALID":
            level = logging.DEBUG
        else:
            level = logging.WARNING if depth == 0 else logging.INFO
        self._log(
            level,
            "VALIDATION_DECISION",
            f"Validation decision: {outcome}",
            entity_id=entity_id,
            outcome=outcome,
            depth=depth,
        )

    def certificate_revoked(self, certificate_id: str, reason: Optional[str]) -> None:
        self._log(
            logging.WARNING,
            "CERTIFICATE_REVOKED",
            f"Certificate {certificate_id} is revoked",
            certificate_id=certificate_id,
            reason=reason,
        )

    def chain_too_deep(self, entity_id: Optional[str], max_depth: int) -> None:
        self._log(
            logging.ERROR,
            "CHAIN_TOO_DEEP",
            f"Certificate chain exceeds {max_depth} links",
            entity_id=entity_id,
            max_depth=max_depth,
        )


_handler: Optional[logging.Handler] = None


def configure_logging(
    level: str = "INFO",
    json_format: bool = True,
    stream: Optional[IO[str]] = None
) -> logging.Handler:
    """
    Install a handler on the "edletter" logger.

    Calling it again replaces the handler installed by the previous call;
    handlers added by the application are left alone.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use StructuredFormatter instead of plain text lines
        stream: Output stream, stdout by default

    Returns:
        The installed handler
    """
    global _handler

    logger = logging.getLogger("edletter")
    logger.setLevel(getattr(logging, level.upper()))

    if _handler is not None:
        logger.removeHandler(_handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    if json_format:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
    logger.addHandler(handler)
    _handler = handler
    return handler


def get_validation_id() -> str:
    """Id of the validation running in the current context, or ''."""
    return validation_id_var.get()


# Global audit logger instance
audit_log = AuditLogger()
