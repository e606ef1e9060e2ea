# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Explicit outcome types for store and service operations.

Operations that can fail for expected reasons (validation, uniqueness,
ownership, store trouble) return ``Ok(value)`` or ``Err(error)`` instead of
raising, so callers branch on the variant.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Tuple, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E


@dataclass(frozen=True)
class Invalid:
    """User-visible validation failures, all of them."""

    violations: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class UsernameTaken:
    message: str = "Username already exists"


@dataclass(frozen=True)
class StoreFailure:
    message: str = "An error occurred during registration. Please try again."


@dataclass(frozen=True)
class NotPermitted:
    """Target does not exist or belongs to someone else. Deliberately one case."""
