"""Streaming AES with block padding.

There is no authentication tag. A wrong key or IV is only noticed when the
padding of the final block happens to be invalid; otherwise the caller gets
garbage plaintext and a later stage has to reject it.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import IO

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, CipherContext, algorithms, modes

from aesjson.crypto.kdf import DEFAULT_PROFILE, IV_LEN, Profile, derive_key_iv
from aesjson.errors import CryptographicError

BLOCK_SIZE_BITS = 128
STREAM_CHUNK_SIZE = 1024 * 64
AES_KEY_LENGTHS = (16, 24, 32)


class CipherMode(enum.Enum):
    CBC = "CBC"
    ECB = "ECB"
    CTR = "CTR"


class PaddingScheme(enum.Enum):
    PKCS7 = "PKCS7"
    ANSIX923 = "ANSIX923"


def _padding_algorithm(scheme: PaddingScheme) -> padding.PKCS7 | padding.ANSIX923:
    if scheme is PaddingScheme.PKCS7:
        return padding.PKCS7(BLOCK_SIZE_BITS)
    return padding.ANSIX923(BLOCK_SIZE_BITS)


class _CipherWriter:
    """Encrypts everything written to it into ``sink``; pads on close."""

    def __init__(self, sink: IO[bytes], encryptor: CipherContext, padder: padding.PaddingContext) -> None:
        self._sink = sink
        self._encryptor = encryptor
        self._padder = padder
        self.closed = False

    def writable(self) -> bool:
        return True

    def write(self, data: bytes) -> int:
        if self.closed:
            raise ValueError("write to closed cipher stream")
        ciphertext = self._encryptor.update(self._padder.update(bytes(data)))
        if ciphertext:
            self._sink.write(ciphertext)
        return len(data)

    def flush(self) -> None:
        self._sink.flush()

    def close(self) -> None:
        """Write the padded final block. The sink stays open."""
        if self.closed:
            return
        self.closed = True
        final_chunk = self._encryptor.update(self._padder.finalize()) + self._encryptor.finalize()
        if final_chunk:
            self._sink.write(final_chunk)
        self._sink.flush()


class _CipherReader:
    """Decrypts ``source`` on demand and strips padding at end of stream."""

    def __init__(self, source: IO[bytes], decryptor: CipherContext, unpadder: padding.PaddingContext) -> None:
        self._source = source
        self._decryptor = decryptor
        self._unpadder = unpadder
        self._buffer = bytearray()
        self._eof = False
        self.closed = False

    def readable(self) -> bool:
        return True

    def _fill(self) -> None:
        chunk = self._source.read(STREAM_CHUNK_SIZE)
        try:
            if chunk:
                self._buffer += self._unpadder.update(self._decryptor.update(chunk))
                return
            self._eof = True
            self._buffer += self._unpadder.update(self._decryptor.finalize())
            self._buffer += self._unpadder.finalize()
        except ValueError as exc:
            # cryptography reports both unaligned input and bad padding as ValueError.
            raise CryptographicError(f"Unable to decrypt payload: {exc}") from exc

    def read(self, size: int = -1) -> bytes:
        if self.closed:
            raise ValueError("read from closed cipher stream")
        while not self._eof and (size < 0 or len(self._buffer) < size):
            self._fill()
        if size < 0 or size > len(self._buffer):
            size = len(self._buffer)
        plaintext = bytes(self._buffer[:size])
        del self._buffer[:size]
        return plaintext

    def close(self) -> None:
        self.closed = True
        self._buffer.clear()


@dataclass(frozen=True)
class EncryptionContext:
    """AES key, IV, block mode and padding scheme for a single read or write."""

    key: bytes = field(repr=False)
    iv: bytes = field(repr=False)
    mode: CipherMode = CipherMode.CBC
    padding: PaddingScheme = PaddingScheme.PKCS7

    def __post_init__(self) -> None:
        if len(self.key) not in AES_KEY_LENGTHS:
            raise CryptographicError(f"AES key must be 16, 24 or 32 bytes long, got {len(self.key)}")
        if len(self.iv) != IV_LEN:
            raise CryptographicError(f"IV must be {IV_LEN} bytes long, got {len(self.iv)}")
        if not isinstance(self.mode, CipherMode):
            raise CryptographicError(f"Unsupported cipher mode: {self.mode!r}")
        if not isinstance(self.padding, PaddingScheme):
            raise CryptographicError(f"Unsupported padding scheme: {self.padding!r}")

    @classmethod
    def from_password(
        cls,
        password: str | bytes,
        salt: str | bytes,
        profile: Profile | str = DEFAULT_PROFILE,
    ) -> EncryptionContext:
        """Build an AES-256-CBC/PKCS7 context from Argon2id key material."""
        key, iv = derive_key_iv(password, salt, profile)
        return cls(key=key, iv=iv)

    def _cipher(self) -> Cipher[modes.Mode]:
        if self.mode is CipherMode.CBC:
            mode: modes.Mode = modes.CBC(self.iv)
        elif self.mode is CipherMode.CTR:
            mode = modes.CTR(self.iv)
        else:
            mode = modes.ECB()
        return Cipher(algorithms.AES(self.key), mode)

    def encode_stream(self, sink: IO[bytes]) -> _CipherWriter:
        return _CipherWriter(sink, self._cipher().encryptor(), _padding_algorithm(self.padding).padder())

    def decode_stream(self, source: IO[bytes]) -> _CipherReader:
        return _CipherReader(source, self._cipher().decryptor(), _padding_algorithm(self.padding).unpadder())


__all__ = [
    "AES_KEY_LENGTHS",
    "BLOCK_SIZE_BITS",
    "CipherMode",
    "EncryptionContext",
    "PaddingScheme",
    "STREAM_CHUNK_SIZE",
]
