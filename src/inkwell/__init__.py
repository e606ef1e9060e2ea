# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""inkwell: a small server-rendered markdown blog."""

__version__ = "0.1.0"
