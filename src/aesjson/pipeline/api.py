"""High-level API for writing and reading encrypted JSON files.

Files written with a password can only be read back with the same password,
salt and profile. Nothing about those parameters is stored in the file.
"""

from __future__ import annotations

from typing import Any

from aesjson.crypto.cipher import EncryptionContext
from aesjson.crypto.kdf import DEFAULT_PROFILE, Profile
from aesjson.pipeline.core import PathLike, Pipeline
from aesjson.pipeline.stages import ByteStage

_PIPELINE = Pipeline()


def write_file(
    value: Any,
    path: PathLike,
    password: str,
    salt: str,
    profile: Profile | str = DEFAULT_PROFILE,
) -> None:
    """Serialize, gzip and encrypt ``value`` into ``path`` (created or truncated).

    The AES key and IV come from Argon2id over ``password`` and ``salt`` with
    the cost parameters of ``profile``. The password should be 16-32
    hard-to-guess characters and the salt at least 8 bytes (16 recommended).
    """

    write_file_with_cipher(value, path, EncryptionContext.from_password(password, salt, profile))


def read_file(
    path: PathLike,
    password: str,
    salt: str,
    profile: Profile | str = DEFAULT_PROFILE,
    *,
    model: Any = None,
) -> Any:
    """Decrypt, gunzip and deserialize the value stored in ``path``.

    Returns ``None`` when the stored payload is empty or JSON ``null``. With
    ``model`` the JSON is validated into that type.
    """

    return read_file_with_cipher(path, EncryptionContext.from_password(password, salt, profile), model=model)


def write_file_with_cipher(value: Any, path: PathLike, cipher: ByteStage) -> None:
    """Like :func:`write_file` with a caller-supplied cipher (e.g. :class:`EncryptionContext`)."""

    _PIPELINE.write_file(value, path, cipher)


def read_file_with_cipher(path: PathLike, cipher: ByteStage, *, model: Any = None) -> Any:
    """Like :func:`read_file` with a caller-supplied cipher."""

    return _PIPELINE.read_file(path, cipher, model)


async def write_file_async(
    value: Any,
    path: PathLike,
    password: str,
    salt: str,
    profile: Profile | str = DEFAULT_PROFILE,
) -> None:
    """Async :func:`write_file`.

    Key derivation runs on the event loop before the first await, so
    expensive profiles block the loop for their full cost.
    """

    cipher = EncryptionContext.from_password(password, salt, profile)
    await write_file_with_cipher_async(value, path, cipher)


async def read_file_async(
    path: PathLike,
    password: str,
    salt: str,
    profile: Profile | str = DEFAULT_PROFILE,
    *,
    model: Any = None,
) -> Any:
    """Async :func:`read_file`; key derivation blocks the loop as in :func:`write_file_async`."""

    cipher = EncryptionContext.from_password(password, salt, profile)
    return await read_file_with_cipher_async(path, cipher, model=model)


async def write_file_with_cipher_async(value: Any, path: PathLike, cipher: ByteStage) -> None:
    """Async :func:`write_file_with_cipher`."""

    await _PIPELINE.write_file_async(value, path, cipher)


async def read_file_with_cipher_async(path: PathLike, cipher: ByteStage, *, model: Any = None) -> Any:
    """Async :func:`read_file_with_cipher`."""

    return await _PIPELINE.read_file_async(path, cipher, model)


__all__ = [
    "read_file",
    "read_file_async",
    "read_file_with_cipher",
    "read_file_with_cipher_async",
    "write_file",
    "write_file_async",
    "write_file_with_cipher",
    "write_file_with_cipher_async",
]
