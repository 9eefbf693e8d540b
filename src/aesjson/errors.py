"""Custom exceptions for AesJson.

File-system failures are not wrapped: ``FileNotFoundError``,
``PermissionError`` and the rest of the ``OSError`` family reach the caller
unchanged.
"""


class AesJsonError(Exception):
    """Base exception for AesJson."""


class ConfigurationError(AesJsonError):
    """Unknown profile or unusable key derivation input."""


class CryptographicError(AesJsonError):
    """Cipher parameters are invalid or ciphertext failed padding checks."""


class DecompressionError(AesJsonError):
    """Compressed stream is malformed."""


class SerializationError(AesJsonError):
    """Payload cannot be encoded, or decoded into the expected type."""
