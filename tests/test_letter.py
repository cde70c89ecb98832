"""
edletter Letter Test Suite

Covers construction of letters (master key and certificate), validation of
the content against the signature, the revocation hook, identity lookup and
transparent access to the content.
"""

import unittest
from concurrent.futures import ThreadPoolExecutor
from unittest import mock

from nacl.signing import SigningKey

from edletter import (
    Certificate,
    Letter,
    RevocationList,
    RootValidator,
    Signature,
    SigningFailed,
    ValidationOutcome,
    fingerprint,
    generate_keypair,
    sign,
    validate,
)


class Device:
    """Content type with its own fingerprint and identity."""

    def __init__(self, name: str):
        self.name = name

    def fingerprint(self) -> bytes:
        return f"device:{self.name}".encode("utf-8")

    def get_id(self):
        return f"device:{self.name}"


class TestMasterSignedLetter(unittest.TestCase):
    """Letters signed directly with the master key."""

    def setUp(self):
        self.master_public, self.master_private = generate_keypair()
        self.validator = RootValidator(self.master_public)

    def test_simple(self):
        """Signed content validates; replaced content does not."""
        letter = Letter.with_private_key("hello world", self.master_private)

        self.assertTrue(self.validator.is_valid(letter).is_valid())

        letter.content = "world hello"

        result = self.validator.is_valid(letter)
        self.assertFalse(result.is_valid())
        self.assertEqual(result.outcome, ValidationOutcome.SIGNATURE_INVALID)

    def test_signature_has_no_parent(self):
        letter = Letter.with_private_key(b"payload", self.master_private)
        self.assertTrue(letter.signature.is_signed_by_master())
        self.assertIsNone(letter.signature.parent)
        self.assertEqual(len(letter.signature.hash), 64)

    def test_other_master_key_rejected(self):
        other_public, _ = generate_keypair()
        letter = Letter.with_private_key("hello world", self.master_private)

        result = RootValidator(other_public).is_valid(letter)
        self.assertEqual(result.outcome, ValidationOutcome.SIGNATURE_INVALID)
        self.assertEqual(result.reason, "Master signature invalid")

    def test_restoring_content_validates_again(self):
        letter = Letter.with_private_key("hello world", self.master_private)
        letter.content = "world hello"
        self.assertFalse(self.validator.is_valid(letter))
        letter.content = "hello world"
        self.assertTrue(self.validator.is_valid(letter))

    def test_structured_content_key_order_irrelevant(self):
        letter = Letter.with_private_key({"b": 1, "a": [1, 2]}, self.master_private)
        letter.content = {"a": [1, 2], "b": 1}
        self.assertTrue(self.validator.is_valid(letter).is_valid())

    def test_string_and_number_content_differ(self):
        for signed, swapped in (("5", 5), ('["a"]', ["a"]), (7, "7")):
            with self.subTest(signed=signed):
                letter = Letter.with_private_key(signed, self.master_private)
                letter.content = swapped
                self.assertEqual(
                    self.validator.is_valid(letter).outcome,
                    ValidationOutcome.SIGNATURE_INVALID,
                )

    def test_assembled_from_parts(self):
        content = b"assembled"
        signature = Signature.new(sign(content, self.master_private))
        letter = Letter(content, signature)
        self.assertTrue(self.validator.is_valid(letter).is_valid())

    def test_assembled_with_bogus_signature(self):
        letter = Letter(b"assembled", Signature.new(b"\x00" * 64))
        result = self.validator.is_valid(letter)
        self.assertEqual(result.outcome, ValidationOutcome.SIGNATURE_INVALID)

    def test_malformed_private_key(self):
        with self.assertRaises(ValueError):
            Letter.with_private_key("hello world", b"short")

    def test_convenience_validate(self):
        letter = Letter.with_private_key("hello world", self.master_private)
        self.assertTrue(validate(letter, self.master_public).is_valid())

    def test_concurrent_validation(self):
        letter = Letter.with_private_key("hello world", self.master_private)
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: self.validator.is_valid(letter), range(64)))
        self.assertTrue(all(r.is_valid() for r in results))


class TestCertificateSignedLetter(unittest.TestCase):
    """Letters signed with a certificate."""

    def setUp(self):
        self.master_public, self.master_private = generate_keypair()
        self.validator = RootValidator(self.master_public)
        self.cert = Certificate.generate_random({"name": "alice"})
        self.cert.sign_with_master(self.master_private)

    def test_certificate(self):
        """Certificate-signed content validates; replaced content does not."""
        letter = Letter.with_certificate("hello world", self.cert)

        self.assertTrue(self.validator.is_valid(letter).is_valid())

        letter.content = "world hello"

        result = self.validator.is_valid(letter)
        self.assertEqual(result.outcome, ValidationOutcome.SIGNATURE_INVALID)

    def test_parent_is_public_copy(self):
        letter = Letter.with_certificate("hello world", self.cert)
        parent = letter.signature.parent

        self.assertFalse(letter.signature.is_signed_by_master())
        self.assertIsNot(parent, self.cert)
        self.assertFalse(parent.has_private_key())
        self.assertEqual(parent.get_id(), self.cert.get_id())
        self.assertTrue(parent.verify(fingerprint("hello world"), letter.signature.hash))

    def test_signing_failed_without_private_key(self):
        public_only = self.cert.public_copy()
        with self.assertRaises(SigningFailed) as ctx:
            Letter.with_certificate("hello world", public_only)
        self.assertEqual(ctx.exception.certificate_id, self.cert.get_id())

    def test_signing_failed_with_letter_parent(self):
        """Certificates taken from a received letter cannot sign."""
        letter = Letter.with_certificate("hello world", self.cert)
        with self.assertRaises(SigningFailed):
            Letter.with_certificate("forged", letter.signature.parent)

    def test_unsigned_certificate(self):
        unsigned = Certificate.generate_random({"name": "mallory"})
        letter = Letter.with_certificate("hello world", unsigned)

        result = self.validator.is_valid(letter)
        self.assertEqual(result.outcome, ValidationOutcome.PARENT_INVALID)
        self.assertEqual(result.cause.outcome, ValidationOutcome.SIGNATURE_INVALID)
        self.assertEqual(result.cause.reason, "Certificate is not signed")

    def test_certificate_signed_by_other_master(self):
        _, other_private = generate_keypair()
        foreign = Certificate.generate_random({"name": "foreign"})
        foreign.sign_with_master(other_private)

        result = self.validator.is_valid(Letter.with_certificate("hello world", foreign))
        self.assertEqual(result.outcome, ValidationOutcome.PARENT_INVALID)
        self.assertEqual(result.root_cause().outcome, ValidationOutcome.SIGNATURE_INVALID)

    def test_hash_from_other_certificate(self):
        """A valid parent does not vouch for a hash it did not make."""
        other = Certificate.generate_random({"name": "bob"})
        other.sign_with_master(self.master_private)

        data = fingerprint("hello world")
        signature = Signature.with_parent(self.cert.public_copy(), other.sign(data))
        letter = Letter("hello world", signature)

        result = self.validator.is_valid(letter)
        self.assertEqual(result.outcome, ValidationOutcome.SIGNATURE_INVALID)
        self.assertEqual(result.details["parent_id"], self.cert.get_id())

    def test_revoked_certificate(self):
        revocations = RevocationList()
        revocations.revoke(self.cert, reason="lost device")
        validator = RootValidator(self.master_public, revoker=revocations)

        result = validator.is_valid(Letter.with_certificate("hello world", self.cert))
        self.assertEqual(result.outcome, ValidationOutcome.PARENT_INVALID)
        self.assertEqual(result.cause.outcome, ValidationOutcome.REVOKED)
        self.assertEqual(result.cause.reason, "lost device")


class TestRevocationHook(unittest.TestCase):
    """Letters themselves are never revoked."""

    def test_letter_never_revoked(self):
        _, master_private = generate_keypair()
        letter = Letter.with_private_key("hello world", master_private)
        revoker = mock.Mock()

        result = letter.self_check_revoked(revoker)

        self.assertFalse(result.is_revoked())
        revoker.is_revoked.assert_not_called()
        self.assertFalse(letter.is_revokable())

    def test_validator_consults_hook(self):
        master_public, master_private = generate_keypair()
        letter = Letter.with_private_key("hello world", master_private)
        revoker = mock.Mock()

        result = RootValidator(master_public, revoker=revoker).is_valid(letter)

        self.assertTrue(result.is_valid())
        revoker.is_revoked.assert_not_called()


class TestContentAccess(unittest.TestCase):
    """The letter stands in for its content."""

    def setUp(self):
        _, self.master_private = generate_keypair()

    def test_get_returns_original(self):
        content = {"kid": "abc", "keys": [1, 2, 3]}
        letter = Letter.with_private_key(content, self.master_private)
        self.assertEqual(letter.get(), {"kid": "abc", "keys": [1, 2, 3]})
        self.assertIs(letter.get(), content)

    def test_delegation(self):
        letter = Letter.with_private_key("hello world", self.master_private)
        self.assertEqual(letter.upper(), "HELLO WORLD")
        self.assertEqual(len(letter), 11)
        self.assertIn("world", letter)
        self.assertEqual(letter[0], "h")
        self.assertEqual(str(letter), "hello world")
        self.assertEqual(list(Letter.with_private_key([1, 2], self.master_private)), [1, 2])

    def test_bytes_is_fingerprint(self):
        letter = Letter.with_private_key("hello world", self.master_private)
        self.assertEqual(bytes(letter), b"hello world")

    def test_nested_letter_binds_inner_content_only(self):
        inner = Letter.with_private_key("hello world", self.master_private)
        outer = Letter.with_private_key(inner, self.master_private)
        self.assertEqual(fingerprint(outer.content), b"hello world")

        resigned = Letter(inner.content, Signature.new(b"\x00" * 64))
        outer.content = resigned
        self.assertEqual(fingerprint(outer.content), b"hello world")

    def test_public_key_content(self):
        verify_key = SigningKey.generate().verify_key
        letter = Letter.with_private_key(verify_key, self.master_private)
        self.assertEqual(letter.encode(), bytes(verify_key))
        self.assertEqual(bytes(letter), bytes(verify_key))

    def test_truthiness_follows_content(self):
        self.assertFalse(Letter.with_private_key(b"", self.master_private))
        self.assertTrue(Letter.with_private_key({"k": 1}, self.master_private))

    def test_signature_read_only(self):
        letter = Letter.with_private_key("hello world", self.master_private)
        with self.assertRaises(AttributeError):
            letter.signature = Signature.new(b"\x00" * 64)

    def test_missing_attribute(self):
        letter = Letter.with_private_key("hello world", self.master_private)
        with self.assertRaises(AttributeError):
            letter.no_such_attribute
        with self.assertRaises(AttributeError):
            letter._private


class TestIdentity(unittest.TestCase):
    """Identity lookup returns None instead of failing."""

    def setUp(self):
        self.master_public, self.master_private = generate_keypair()

    def test_plain_content_has_no_id(self):
        letter = Letter.with_private_key("hello world", self.master_private)
        self.assertIsNone(letter.get_id())

    def test_identifiable_content(self):
        letter = Letter.with_private_key(Device("042"), self.master_private)
        self.assertEqual(letter.get_id(), "device:042")
        self.assertTrue(RootValidator(self.master_public).is_valid(letter).is_valid())

    def test_custom_fingerprint_tamper(self):
        letter = Letter.with_private_key(Device("042"), self.master_private)
        letter.content = Device("043")
        result = RootValidator(self.master_public).is_valid(letter)
        self.assertEqual(result.outcome, ValidationOutcome.SIGNATURE_INVALID)


if __name__ == "__main__":
    unittest.main()
