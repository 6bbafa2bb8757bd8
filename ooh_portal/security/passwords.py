from __future__ import annotations

from pwdlib import PasswordHash

from ooh_portal.models import User

_hasher = PasswordHash.recommended()


def hash_password(raw_password: str) -> str:
    return _hasher.hash(raw_password)


def check_user_password(user: User, raw_password: str) -> bool:
    """Verify a login attempt and upgrade the stored hash when pwdlib's parameters moved on."""
    valid, updated_hash = _hasher.verify_and_update(raw_password, user.password_hash)
    if valid and updated_hash:
        user.password_hash = updated_hash
    return valid
