"""Start the local pass-and-play FastAPI server."""

from __future__ import annotations

import argparse
import logging


def main() -> None:
    """Run the local play server with uvicorn."""
    parser = argparse.ArgumentParser(description="Run Coup local play server.")
    parser.add_argument(
        "--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--port", type=int, default=8000, help="Port number (default: 8000)"
    )
    parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["debug", "info", "warning", "error"],
        help="Log level for the server and the rules engine (default: info)",
    )
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper())

    import uvicorn

    uvicorn.run(
        "coup.server.local_api:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
