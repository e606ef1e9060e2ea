# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from slowapi import Limiter
from slowapi.util import get_remote_address

AUTH_LIMIT = "5/15minutes"
GENERAL_LIMIT = "100/15minutes"

TOO_MANY_ATTEMPTS = "Too many attempts. Please wait 15 minutes before trying again."

# Counters are per client address, kept in process memory.
limiter = Limiter(key_func=get_remote_address, default_limits=[GENERAL_LIMIT])
