"""Key derivation helpers using Argon2id."""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from argon2.low_level import Type, hash_secret_raw

from aesjson.errors import ConfigurationError

logger = logging.getLogger(__name__)

KEY_LEN = 32
IV_LEN = 16
MIN_SALT_LEN = 8  # Argon2 refuses shorter salts
ARGON2_VERSION = 19


class Profile(enum.Enum):
    """Argon2id cost presets, picked per deployment target."""

    # Password is never available to end-users (e.g. an online key vault).
    SERVER_GRADE = "server-grade"
    # PC/console games: password and salt ship with the game, so keep it fast.
    DESKTOP_GAME = "desktop-game"
    MOBILE_GAME = "mobile-game"


DEFAULT_PROFILE = Profile.DESKTOP_GAME


@dataclass(frozen=True)
class Argon2Params:
    mem_cost_kib: int
    time_cost: int
    parallelism: int


PROFILE_PARAMS: Mapping[Profile, Argon2Params] = MappingProxyType(
    {
        Profile.SERVER_GRADE: Argon2Params(mem_cost_kib=64 * 1024, time_cost=3, parallelism=8),
        Profile.DESKTOP_GAME: Argon2Params(mem_cost_kib=16 * 1024, time_cost=1, parallelism=2),
        Profile.MOBILE_GAME: Argon2Params(mem_cost_kib=8 * 1024, time_cost=1, parallelism=1),
    }
)


def resolve_profile(profile: Profile | str) -> Profile:
    """Return the :class:`Profile` for a member, its value or its name."""

    if isinstance(profile, Profile):
        return profile
    if isinstance(profile, str):
        lowered = profile.strip().lower()
        for candidate in Profile:
            if lowered in (candidate.value, candidate.name.lower()):
                return candidate
    raise ConfigurationError(f"Unknown profile: {profile!r}")


def cost_params(profile: Profile | str) -> Argon2Params:
    """Return Argon2 cost parameters for ``profile``."""

    return PROFILE_PARAMS[resolve_profile(profile)]


def _as_bytes(value: str | bytes) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def _argon2id(secret: bytes, salt: bytes, params: Argon2Params, length: int) -> bytes:
    return hash_secret_raw(
        secret=secret,
        salt=salt,
        time_cost=params.time_cost,
        memory_cost=params.mem_cost_kib,
        parallelism=params.parallelism,
        hash_len=length,
        type=Type.ID,
        version=ARGON2_VERSION,
    )


def derive_key_iv(
    password: str | bytes,
    salt: str | bytes,
    profile: Profile | str = DEFAULT_PROFILE,
) -> tuple[bytes, bytes]:
    """Derive an AES-256 key and a 16-byte IV from ``password`` and ``salt``.

    Key and IV are separate Argon2id outputs (32 and 16 bytes long) over the
    same inputs. Argon2 mixes the requested length into its initial hash, so
    the IV is not a prefix of the key.
    """

    resolved = resolve_profile(profile)
    params = PROFILE_PARAMS[resolved]
    salt_bytes = _as_bytes(salt)
    if len(salt_bytes) < MIN_SALT_LEN:
        raise ConfigurationError(
            f"Salt must be at least {MIN_SALT_LEN} bytes long, got {len(salt_bytes)}"
        )

    secret = _as_bytes(password)
    started = time.perf_counter()
    key = _argon2id(secret, salt_bytes, params, KEY_LEN)
    iv = _argon2id(secret, salt_bytes, params, IV_LEN)
    logger.debug(
        "Derived key material with profile %s in %.1f ms",
        resolved.value,
        (time.perf_counter() - started) * 1000,
    )
    return key, iv


__all__ = [
    "ARGON2_VERSION",
    "Argon2Params",
    "DEFAULT_PROFILE",
    "IV_LEN",
    "KEY_LEN",
    "MIN_SALT_LEN",
    "PROFILE_PARAMS",
    "Profile",
    "cost_params",
    "derive_key_iv",
    "resolve_profile",
]
