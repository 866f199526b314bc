# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""credstore: per-user credential and session storage.

This package provides:
- A storage contract for password hashes, session ids and CSRF tokens
- A JSON file backend (data/storage.json)
- A small FastAPI auth layer on top of it
"""

__version__ = "0.1.0"
