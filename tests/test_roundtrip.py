from __future__ import annotations

import asyncio
import gzip
import json
from dataclasses import dataclass
from pathlib import Path

import pytest
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

import aesjson
from aesjson.crypto.kdf import Profile, derive_key_iv

PASSWORD = "any password"
SALT = "any salt"


@dataclass
class SaveGame:
    A: str
    B: float


def test_read_file_gets_same_object_used_to_write_file(tmp_path: Path) -> None:
    """Same password and salt read back exactly what was written."""
    target = tmp_path / "test.file"
    written = SaveGame(A="Hello", B=-1 / 12)

    aesjson.write_file(written, target, PASSWORD, SALT)
    restored = aesjson.read_file(target, PASSWORD, SALT, model=SaveGame)

    assert restored is not None
    assert restored.A == "Hello"
    assert restored.B == -1 / 12
    assert restored.B.hex() == (-1 / 12).hex()


@pytest.mark.parametrize(
    "value",
    [
        "plain string",
        3.141592653589793,
        -0.0,
        {"nested": {"list": [1, 2.5, "three", None], "flag": True}, "empty": {}},
        [None, {"field": None}],
        {"unicode": "héllo ✓"},
    ],
)
def test_roundtrip_values(tmp_path: Path, value: object) -> None:
    target = tmp_path / "value.dat"
    aesjson.write_file(value, target, PASSWORD, SALT, Profile.MOBILE_GAME)
    assert aesjson.read_file(target, PASSWORD, SALT, Profile.MOBILE_GAME) == value


def test_null_value_reads_back_absent(tmp_path: Path) -> None:
    target = tmp_path / "none.dat"
    aesjson.write_file(None, target, PASSWORD, SALT, Profile.MOBILE_GAME)

    assert target.stat().st_size > 0
    assert aesjson.read_file(target, PASSWORD, SALT, Profile.MOBILE_GAME, model=SaveGame) is None


def test_file_is_aes_of_gzip_of_json(tmp_path: Path) -> None:
    target = tmp_path / "layout.dat"
    value = {"A": "Hello", "B": -1 / 12}
    aesjson.write_file(value, target, PASSWORD, SALT, Profile.MOBILE_GAME)

    key, iv = derive_key_iv(PASSWORD, SALT, Profile.MOBILE_GAME)
    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    padded = decryptor.update(target.read_bytes()) + decryptor.finalize()
    unpadder = padding.PKCS7(128).unpadder()
    compressed = unpadder.update(padded) + unpadder.finalize()

    assert json.loads(gzip.decompress(compressed).decode("utf-8")) == value


def test_different_salts_give_different_ciphertext(tmp_path: Path) -> None:
    first = tmp_path / "first.dat"
    second = tmp_path / "second.dat"
    aesjson.write_file({"A": "Hello"}, first, PASSWORD, "salt number one", Profile.MOBILE_GAME)
    aesjson.write_file({"A": "Hello"}, second, PASSWORD, "salt number two", Profile.MOBILE_GAME)

    assert first.read_bytes() != second.read_bytes()


def test_same_inputs_give_same_file(tmp_path: Path) -> None:
    first = tmp_path / "first.dat"
    second = tmp_path / "second.dat"
    aesjson.write_file([1, 2, 3], first, PASSWORD, SALT, Profile.MOBILE_GAME)
    aesjson.write_file([1, 2, 3], second, PASSWORD, SALT, Profile.MOBILE_GAME)

    assert first.read_bytes() == second.read_bytes()


def test_write_overwrites_existing_file(tmp_path: Path) -> None:
    target = tmp_path / "save.dat"
    target.write_bytes(b"x" * 10_000)

    aesjson.write_file({"level": 2}, target, PASSWORD, SALT, Profile.MOBILE_GAME)

    assert target.stat().st_size < 10_000
    assert aesjson.read_file(target, PASSWORD, SALT, Profile.MOBILE_GAME) == {"level": 2}


def test_server_grade_profile_roundtrip(tmp_path: Path) -> None:
    target = tmp_path / "server.dat"
    aesjson.write_file({"vault": "entry"}, target, PASSWORD, SALT, Profile.SERVER_GRADE)
    assert aesjson.read_file(target, PASSWORD, SALT, "server-grade") == {"vault": "entry"}


def test_async_roundtrip(tmp_path: Path) -> None:
    target = tmp_path / "async.dat"

    async def scenario() -> SaveGame | None:
        await aesjson.write_file_async(SaveGame(A="Hello", B=-1 / 12), target, PASSWORD, SALT)
        return await aesjson.read_file_async(target, PASSWORD, SALT, model=SaveGame)

    assert asyncio.run(scenario()) == SaveGame(A="Hello", B=-1 / 12)


def test_async_and_sync_files_are_identical(tmp_path: Path) -> None:
    sync_target = tmp_path / "sync.dat"
    async_target = tmp_path / "async.dat"
    value = {"A": "Hello", "B": -1 / 12, "items": list(range(100))}

    aesjson.write_file(value, sync_target, PASSWORD, SALT, Profile.MOBILE_GAME)
    asyncio.run(aesjson.write_file_async(value, async_target, PASSWORD, SALT, Profile.MOBILE_GAME))

    assert sync_target.read_bytes() == async_target.read_bytes()
    assert aesjson.read_file(async_target, PASSWORD, SALT, Profile.MOBILE_GAME) == value
    assert asyncio.run(aesjson.read_file_async(sync_target, PASSWORD, SALT, Profile.MOBILE_GAME)) == value


def test_custom_cipher_roundtrip(tmp_path: Path) -> None:
    target = tmp_path / "custom.dat"
    cipher = aesjson.EncryptionContext(
        key=b"k" * 16,
        iv=b"i" * 16,
        mode=aesjson.CipherMode.CTR,
        padding=aesjson.PaddingScheme.ANSIX923,
    )

    aesjson.write_file_with_cipher({"mode": "ctr"}, target, cipher)
    assert aesjson.read_file_with_cipher(target, cipher) == {"mode": "ctr"}


def test_custom_cipher_async_roundtrip(tmp_path: Path, context: aesjson.EncryptionContext) -> None:
    target = tmp_path / "custom-async.dat"

    async def scenario() -> object:
        await aesjson.write_file_with_cipher_async({"async": True}, target, context)
        return await aesjson.read_file_with_cipher_async(target, context)

    assert asyncio.run(scenario()) == {"async": True}
    assert aesjson.read_file_with_cipher(target, context) == {"async": True}
