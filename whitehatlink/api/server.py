"""Uvicorn entry point for the API server."""

import os

import uvicorn
from dotenv import load_dotenv


def main(host: str | None = None, port: int | None = None, reload: bool | None = None):
    """Start the WhiteHatLink API server."""
    load_dotenv()

    host = host or os.getenv("WHL_HOST", "127.0.0.1")
    port = port or int(os.getenv("WHL_PORT", "8000"))
    if reload is None:
        reload = os.getenv("WHL_RELOAD", "false").lower() == "true"

    uvicorn.run(
        "whitehatlink.api.app:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


if __name__ == "__main__":
    main()
