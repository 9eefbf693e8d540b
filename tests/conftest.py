import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = PROJECT_ROOT / "src"
if SRC_DIR.exists():
    sys.path.insert(0, str(SRC_DIR))

from aesjson.crypto.cipher import EncryptionContext  # noqa: E402


@pytest.fixture
def context() -> EncryptionContext:
    """Fixed AES-256 context that skips Argon2 for pipeline-only tests."""
    return EncryptionContext(key=bytes(range(32)), iv=bytes(range(16, 32)))
