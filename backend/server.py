#!/usr/bin/env python3
"""
Uvicorn launcher for the Time Bank Portal API.

Usage:
    python backend/server.py [--host 0.0.0.0] [--port 8080] [--no-reload]

Same as `python main.py serve`, or `uvicorn backend.app:create_app --factory`.
"""

import argparse
import logging

import uvicorn

logger = logging.getLogger(__name__)

APP_FACTORY = "backend.app:create_app"


def run_server(host: str = "127.0.0.1", port: int = 8000, reload: bool = True) -> None:
    """
    Serve the API with uvicorn.

    The app is built by create_app() in each worker, so configuration is
    read from .env at startup rather than in the launching process.
    """
    logger.info(f"Starting Time Bank Portal API at http://{host}:{port} (docs at /docs)")
    uvicorn.run(
        APP_FACTORY,
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level="info"
    )


def main():
    parser = argparse.ArgumentParser(description="Time Bank Portal API Server")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on (default: 8000)")
    parser.add_argument("--no-reload", action="store_true", help="Disable auto-reload (production)")
    args = parser.parse_args()

    print(f"Time Bank Portal API: http://{args.host}:{args.port} (docs at /docs)")
    run_server(args.host, args.port, reload=not args.no_reload)


if __name__ == "__main__":
    main()
