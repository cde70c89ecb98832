"""Exceptions raised by edletter."""


class LetterError(Exception):
    """Base class for edletter errors."""


class SigningFailed(LetterError):
    """
    Raised when content cannot be signed with a certificate.

    The certificate holds no private key (for example, it is a public copy
    taken from another letter's signature).
    """

    def __init__(self, message: str, certificate_id: str = None):
        super().__init__(message)
        self.certificate_id = certificate_id
