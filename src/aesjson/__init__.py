"""AesJson package."""

from importlib.metadata import PackageNotFoundError, version

from aesjson.crypto.cipher import CipherMode, EncryptionContext, PaddingScheme
from aesjson.crypto.kdf import Profile
from aesjson.pipeline.api import (
    read_file,
    read_file_async,
    read_file_with_cipher,
    read_file_with_cipher_async,
    write_file,
    write_file_async,
    write_file_with_cipher,
    write_file_with_cipher_async,
)

__all__ = [
    "CipherMode",
    "EncryptionContext",
    "PaddingScheme",
    "Profile",
    "__version__",
    "read_file",
    "read_file_async",
    "read_file_with_cipher",
    "read_file_with_cipher_async",
    "write_file",
    "write_file_async",
    "write_file_with_cipher",
    "write_file_with_cipher_async",
]

try:
    __version__ = version("aesjson")
except PackageNotFoundError:  # pragma: no cover - happens only from source checkout
    __version__ = "0.0.0-dev"
