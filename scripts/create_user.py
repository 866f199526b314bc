#!/usr/bin/env python3
from __future__ import annotations

import asyncio
from getpass import getpass

from credstore import config
from credstore.auth.service import AuthService
from credstore.logs import setup_logging
from credstore.storage import create_storage

STORAGE_PATH = config.JSON_FILE_PATH


async def _set_password(username: str, password: str) -> None:
    config.init_storage_file(STORAGE_PATH)
    storage = create_storage(config.STORAGE_TYPE, STORAGE_PATH)
    await AuthService(storage).set_password(username, password)


def main() -> None:
    setup_logging()
    username = input("Username: ").strip()
    if not username:
        raise SystemExit("Username is required")

    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")

    asyncio.run(_set_password(username, pw1))
    print(f"OK -> {STORAGE_PATH}")


if __name__ == "__main__":
    main()
