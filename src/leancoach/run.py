"""
Lean Coach Runner

Entry point for running the API server.
"""
import logging
import os

import uvicorn

from .config import Config

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("leancoach")


def run():
    """Run the Lean Coach API"""
    logger.info(f"Starting Lean Coach on {Config.API_HOST}:{Config.API_PORT}")

    uvicorn.run(
        "leancoach.app:app",
        host=Config.API_HOST,
        port=Config.API_PORT,
        reload=os.getenv("DEBUG", "false").lower() == "true"
    )


if __name__ == "__main__":
    run()
