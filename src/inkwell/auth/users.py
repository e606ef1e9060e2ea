# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from typing import List, Optional, Union

from inkwell.auth.passwords import hash_password, needs_rehash, validate_credentials, verify_password
from inkwell.core.results import Err, Invalid, Ok, StoreFailure, UsernameTaken
from inkwell.infra.user_repo import User, UserRepo

logger = logging.getLogger(__name__)

LOGIN_FAILED = "Invalid username or password"

# Verified against when the username is unknown, so both failure paths cost one argon2 check.
_DUMMY_HASH = hash_password("inkwell-timing-equaliser")


def check_login_form(username: object, password: object) -> List[str]:
    errors: List[str] = []
    if not isinstance(username, str) or username.strip() == "":
        errors.append("Invalid username")
    if not isinstance(password, str) or password.strip() == "":
        errors.append("Invalid password")
    return errors


class Accounts:
    """Signup and login on top of the credential store."""

    def __init__(self, users: UserRepo) -> None:
        self.users = users

    def register(
        self, username: str, password: str
    ) -> Union[Ok[User], Err[Invalid], Err[UsernameTaken], Err[StoreFailure]]:
        errors = validate_credentials(username, password)
        if username and self.users.get_by_username(username) is not None:
            errors.append(UsernameTaken().message)
        if errors:
            return Err(Invalid(tuple(errors)))

        result = self.users.create(username, hash_password(password))
        if isinstance(result, Ok):
            logger.info("Registered user id=%s", result.value.id)
        return result

    def authenticate(self, username: str, password: str) -> Optional[User]:
        """Return the user on a credential match, else ``None`` (never says which part failed)."""
        user = self.users.get_by_username(username)
        if user is None:
            verify_password(_DUMMY_HASH, password)
            logger.warning("Failed login attempt")
            return None
        if not verify_password(user.password_hash, password):
            logger.warning("Failed login attempt")
            return None
        if needs_rehash(user.password_hash):
            self.users.update_password_hash(user.id, hash_password(password))
            logger.info("Rehashed password for user id=%s", user.id)
        return user
