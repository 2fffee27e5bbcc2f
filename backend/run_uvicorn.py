#!/usr/bin/env python3
"""
Uvicorn runner script for the Aosha backend.
Starts the Socket.IO-wrapped FastAPI server.
"""

import os

import uvicorn


def main():
    """Start the Socket.IO-wrapped FastAPI application with uvicorn."""
    port = int(os.getenv("PORT", "8000"))
    reload = os.getenv("ENVIRONMENT", "development").lower() not in {"prod", "production"}

    # Import string so --reload can re-import the app
    uvicorn.run(
        "aosha.api.app:socket_app",
        host="0.0.0.0",
        port=port,
        reload=reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
