"""credstore entrypoint.

Run with:
  python -m credstore

Binds to CREDSTORE_HOST / CREDSTORE_PORT; CREDSTORE_RELOAD=1 enables autoreload.
"""

import uvicorn

from credstore import config


def main() -> None:
    uvicorn.run(
        "credstore.app:app",
        host=config.HOST,
        port=config.PORT,
        reload=config.env_flag("CREDSTORE_RELOAD"),
    )


if __name__ == "__main__":
    main()
