"""
DashChat Runner

Entry point for running the DashChat service.
"""
import uvicorn
import logging

from .config import Config

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("dashchat")


def run():
    """Run the DashChat service"""
    logger.info(f"Starting DashChat on {Config.API_HOST}:{Config.API_PORT}")

    uvicorn.run(
        "dashchat.app:app",
        host=Config.API_HOST,
        port=Config.API_PORT,
        reload=Config.DEBUG
    )


if __name__ == "__main__":
    run()
