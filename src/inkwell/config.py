# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

_TRUTHY = {"1", "true", "yes", "y"}


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in _TRUTHY


@dataclass(frozen=True)
class Settings:
    secret_key: str
    db_path: Path = Path("data/inkwell.db")
    db_timeout: float = 5.0
    cookie_name: str = "inkwell_session"
    cookie_secure: bool = True
    session_max_age: int = 60 * 60 * 24
    rate_limit_enabled: bool = True


def load_settings() -> Settings:
    """Read settings from the environment (and .env, if present) once at startup."""
    load_dotenv()
    secret = os.getenv("INKWELL_SECRET_KEY") or os.getenv("SECRET_KEY")
    if not secret:
        raise RuntimeError("Missing INKWELL_SECRET_KEY (or SECRET_KEY) in environment")
    return Settings(
        secret_key=secret,
        db_path=Path(os.getenv("INKWELL_DB_PATH", "data/inkwell.db")).resolve(),
        db_timeout=float(os.getenv("INKWELL_DB_TIMEOUT", "5")),
        cookie_name=os.getenv("INKWELL_COOKIE_NAME", "inkwell_session"),
        cookie_secure=_env_bool("INKWELL_COOKIE_SECURE", "true"),
        session_max_age=int(os.getenv("INKWELL_SESSION_MAX_AGE", "86400")),
        rate_limit_enabled=_env_bool("INKWELL_RATE_LIMIT_ENABLED", "true"),
    )
