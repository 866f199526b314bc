# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authentication on top of the storage contract.

This package provides:
- Password hashing/verification (argon2)
- Session id / CSRF token generation and signed session cookies (itsdangerous)
- AuthService: login, logout and session resolution against a storage backend
"""
