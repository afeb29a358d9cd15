"""HTTP server launcher."""

import os

import uvicorn


def main() -> None:
    """Start the FastAPI service with uvicorn."""

    host = os.getenv("UCSINDEX_HOST", "127.0.0.1")
    port = int(os.getenv("UCSINDEX_PORT", "8000"))
    reload = os.getenv("UCSINDEX_RELOAD", "false").lower() == "true"

    uvicorn.run("ucsindex.web.app:create_app", factory=True, host=host, port=port, reload=reload, log_level="info")


if __name__ == "__main__":
    main()
