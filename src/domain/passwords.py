"""
Password hashing helpers (bcrypt).

bcrypt only reads the first 72 bytes of its input, so longer passwords
are truncated explicitly before hashing and comparison.
"""

import bcrypt

_BCRYPT_MAX_BYTES = 72

# Pre-computed hash compared against when the account does not exist,
# so unknown emails cost the same bcrypt round as wrong passwords.
_DUMMY_BCRYPT_HASH = bcrypt.hashpw(b"dummy_password_for_timing_safety", bcrypt.gensalt(10)).decode()


def _pwd_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = 10) -> str:
    """Hash password using bcrypt with the given cost factor."""
    return bcrypt.hashpw(_pwd_bytes(password), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, password_hash: str | None) -> bool:
    """
    Constant-time password check.

    A missing hash is compared against a dummy hash and always fails.
    """
    if not password_hash:
        bcrypt.checkpw(_pwd_bytes(password), _DUMMY_BCRYPT_HASH.encode())
        return False
    try:
        return bcrypt.checkpw(_pwd_bytes(password), password_hash.encode())
    except ValueError:
        # Malformed stored hash
        return False
