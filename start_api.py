#!/usr/bin/env python3
"""
Entrypoint to run the search sessions API with uvicorn.
"""

import os

import uvicorn


def main() -> None:
    """Start the FastAPI app using uvicorn."""

    uvicorn.run(
        "api.app:app",
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=int(os.getenv("API_PORT", "8000")),
        reload=False,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
