#!/usr/bin/env python3
"""
edletter Example - Vouching for an Ephemeral Key

A master key signs an intermediate certificate, the intermediate signs a
device certificate, and the device wraps a freshly generated ephemeral
public key in a Letter. The receiving side only knows the master public
key and validates the whole chain.

Run with: python examples/ephemeral_key_exchange.py
"""

from nacl.public import PrivateKey

from edletter import (
    Certificate,
    Letter,
    RevocationList,
    RootValidator,
    generate_keypair,
)
from edletter.config import configure_logging_from_env


def main():
    configure_logging_from_env()

    print("=" * 70)
    print("edletter Ephemeral Key Exchange - Example")
    print("=" * 70)

    # =========================================================================
    # SETUP: Master key and certificate chain
    # =========================================================================

    master_public, master_private = generate_keypair()

    intermediate = Certificate.generate_random({"name": "intermediate"})
    intermediate.sign_with_master(master_private)

    device = Certificate.generate_random({"name": "device-042"})
    device.sign_with_parent(intermediate)

    print(f"\n  Intermediate: {intermediate.get_id()}")
    print(f"  Device:       {device.get_id()}")

    # =========================================================================
    # SENDER: Sign the ephemeral public key
    # =========================================================================

    ephemeral = PrivateKey.generate()
    letter = Letter.with_certificate(ephemeral.public_key, device)

    print(f"\n  Letter: {letter!r}")

    # =========================================================================
    # RECEIVER: Validate against the master key
    # =========================================================================

    revocations = RevocationList()
    validator = RootValidator(master_public, revoker=revocations)

    result = validator.is_valid(letter)
    print(f"\n  Validation: {result.outcome.value}")

    # =========================================================================
    # Revoke the intermediate; the device's letters no longer validate
    # =========================================================================

    revocations.revoke(intermediate, reason="key compromise")
    result = validator.is_valid(letter)
    print(f"\n  After revoking intermediate: {result.outcome.value}")
    print(f"  Root cause: {result.root_cause().outcome.value} ({result.root_cause().reason})")

    print("\n" + "=" * 70)
    print("Example Complete")
    print("=" * 70)


if __name__ == "__main__":
    main()
