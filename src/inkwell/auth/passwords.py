# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import re
from typing import List

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

_PH = PasswordHasher()

USERNAME_MIN, USERNAME_MAX = 3, 20
PASSWORD_MIN, PASSWORD_MAX = 8, 128

_USERNAME_CHARS = re.compile(r"[a-zA-Z0-9_-]+")
_USERNAME_EDGE = re.compile(r"^[_-]|[_-]\Z")
_PASSWORD_CLASSES = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


def validate_credentials(username: object, password: object) -> List[str]:
    """Return every policy violation for a signup attempt (empty list when valid).

    Rules are checked independently so the user sees all problems at once.
    Username uniqueness is the store's concern and is appended by the caller.
    """
    errors: List[str] = []

    if not isinstance(username, str) or username.strip() == "":
        errors.append("Invalid username")
    if not isinstance(password, str) or password.strip() == "":
        errors.append("Invalid password")

    uname = username if isinstance(username, str) else ""
    if not uname:
        errors.append("You must provide a username")
    else:
        if len(uname) < USERNAME_MIN:
            errors.append(f"Username must be at least {USERNAME_MIN} characters long")
        if len(uname) > USERNAME_MAX:
            errors.append(f"Username must be at most {USERNAME_MAX} characters long")
        if not _USERNAME_CHARS.fullmatch(uname):
            errors.append("Username can only contain letters, numbers, underscores, and hyphens")
        if _USERNAME_EDGE.search(uname):
            errors.append("Username cannot start or end with underscore or hyphen")

    pw = password if isinstance(password, str) else ""
    if not pw:
        errors.append("You must provide a password")
    else:
        if len(pw) < PASSWORD_MIN:
            errors.append(f"Password must be at least {PASSWORD_MIN} characters long")
        if len(pw) > PASSWORD_MAX:
            errors.append(f"Password must be at most {PASSWORD_MAX} characters long")
        if not _PASSWORD_CLASSES.match(pw):
            errors.append(
                "Password must contain at least one lowercase letter, one uppercase letter, and one number"
            )

    return errors


def hash_password(plain: str) -> str:
    """Argon2id hash with a fresh random salt on every call."""
    if not isinstance(plain, str) or not plain:
        raise ValueError("Empty password")
    return _PH.hash(plain)


def verify_password(hash_value: str, plain: str) -> bool:
    # argon2 compares digests in constant time; every failure mode reads as a mismatch.
    if not hash_value or not isinstance(plain, str) or not plain:
        return False
    try:
        return _PH.verify(hash_value, plain)
    except (VerificationError, InvalidHashError):
        return False


def needs_rehash(hash_value: str) -> bool:
    """True when a stored hash predates the current argon2 parameters."""
    try:
        return _PH.check_needs_rehash(hash_value)
    except InvalidHashError:
        return False
