# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authentication helpers.

This package provides:
- Credential policy and password hashing/verification (argon2)
- Account registration and login against the user store
- Signed, time-limited session tokens (itsdangerous)
"""
