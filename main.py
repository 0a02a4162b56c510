"""
TalkGraph Server Entry Point

Run with: python main.py
Or with uvicorn: uvicorn app:app --reload
"""

import os

import uvicorn

from talkgraph.config import Config

if __name__ == "__main__":
    config = Config.from_env()

    # Use reload only in development
    is_dev = os.getenv("ENVIRONMENT", "development") == "development"

    uvicorn.run(
        "app:app",
        host=config.server.host,
        port=config.server.port,
        reload=is_dev,  # Only reload in development
        log_level=config.logging.level.lower(),
    )
