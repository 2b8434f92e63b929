"""CLI entry point for launching the FastAPI app with uvicorn."""

import uvicorn

from .dependencies import config


def main() -> None:
    """Run the API server."""
    server = config.server
    if server.reload:
        uvicorn.run(
            "src.server.app:app",
            host=server.host,
            port=server.port,
            reload=True,
            reload_dirs=["src"],
        )
    else:
        uvicorn.run("src.server.app:app", host=server.host, port=server.port)


if __name__ == "__main__":
    main()
