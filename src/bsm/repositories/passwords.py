from __future__ import annotations

import hashlib
import hmac
import secrets

PREFIX = "pbkdf2_sha256$"


def hash_password(password: str, *, rounds: int = 200_000, salt: str | None = None) -> str:
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), bytes.fromhex(salt), rounds).hex()
    return f"{PREFIX}{rounds}${salt}${digest}"


def is_hashed(stored: str) -> bool:
    return stored.startswith(PREFIX)


def verify_password(stored: str, provided: str) -> bool:
    if not is_hashed(stored):
        return False
    try:
        _algo, rounds_s, salt, digest = stored.split("$", 3)
        candidate = hashlib.pbkdf2_hmac(
            "sha256",
            provided.encode("utf-8"),
            bytes.fromhex(salt),
            int(rounds_s),
        ).hex()
    except ValueError:
        return False
    return hmac.compare_digest(candidate, digest)
