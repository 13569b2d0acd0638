#!/usr/bin/env python3
"""FastAPI server entry point for the dish recommendation API."""

import logging

import uvicorn

from backend.config import DEFAULT_SERVER_CONFIG

if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Healthy dish recommendation server")
    parser.add_argument("--host", default=DEFAULT_SERVER_CONFIG.host, help="Host to bind to")
    parser.add_argument("--port", type=int, default=DEFAULT_SERVER_CONFIG.port, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info("Healthy recommender API starting on port %s", args.port)

    uvicorn.run(
        "backend.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
    )
