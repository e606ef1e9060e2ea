# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, Request

from inkwell.auth.session import Identity, SessionTokens
from inkwell.config import Settings


def load_identity(request: Request) -> Optional[Identity]:
    """Cookie -> identity, or None for anonymous. Pure per request; no session table."""
    settings: Settings = request.app.state.settings
    tokens: SessionTokens = request.app.state.tokens
    return tokens.verify(request.cookies.get(settings.cookie_name, ""))


def current_user_optional(request: Request) -> Optional[Identity]:
    if hasattr(request.state, "user"):
        return request.state.user
    return load_identity(request)


def require_user(request: Request) -> Identity:
    u = current_user_optional(request)
    if u:
        return u
    raise HTTPException(status_code=303, headers={"Location": "/"})


def cookie_settings(settings: Settings) -> dict:
    return {"httponly": True, "samesite": "strict", "secure": settings.cookie_secure}
