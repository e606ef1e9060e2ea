# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

from itsdangerous import BadPayload, BadSignature, URLSafeTimedSerializer

DEFAULT_MAX_AGE_SECONDS = 60 * 60 * 24  # 24 hours
DEFAULT_SALT = "inkwell.session.v1"


@dataclass(frozen=True)
class Identity:
    user_id: int
    username: str
    expires_at: int


class SessionTokens:
    """Issue and verify signed, stateless session tokens.

    The secret is fixed for the lifetime of the instance. A token carries
    ``{uid, u, exp}``; it is valid while the signature matches and ``exp``
    has not passed. There is no refresh: once expired, log in again.
    """

    def __init__(self, secret_key: str, *, max_age: int = DEFAULT_MAX_AGE_SECONDS, salt: str = DEFAULT_SALT) -> None:
        if not secret_key:
            raise RuntimeError("Missing session signing secret")
        self.max_age = max_age
        self._serializer = URLSafeTimedSerializer(secret_key=secret_key, salt=salt)

    def issue(self, user_id: int, username: str) -> str:
        expires_at = int(time.time()) + self.max_age
        return self._serializer.dumps({"uid": int(user_id), "u": username, "exp": expires_at})

    def verify(self, token: Optional[str]) -> Optional[Identity]:
        """Decode a token; ``None`` for missing, tampered, foreign or expired tokens."""
        if not token:
            return None
        try:
            data = self._serializer.loads(token, max_age=self.max_age)
        except (BadSignature, BadPayload):
            return None
        if not isinstance(data, dict):
            return None
        try:
            user_id = int(data["uid"])
            expires_at = int(data["exp"])
        except (KeyError, TypeError, ValueError):
            return None
        username = str(data.get("u") or "").strip()
        if not username or int(time.time()) > expires_at:
            return None
        return Identity(user_id=user_id, username=username, expires_at=expires_at)
