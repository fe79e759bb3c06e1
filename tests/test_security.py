from __future__ import annotations

import sys
from pathlib import Path

# Make the recovery_api package importable for local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from recovery_api.core.security import hash_password, verify_password  # noqa: E402


def test_hash_roundtrip():
    stored = hash_password("password123")
    assert stored.startswith("argon2$")
    assert "password123" not in stored
    assert verify_password("password123", stored) is True
    assert verify_password("password124", stored) is False


def test_plaintext_or_missing_hash_never_verifies():
    assert verify_password("password123", "password123") is False
    assert verify_password("password123", None) is False
    assert verify_password("password123", "argon2$garbage") is False
